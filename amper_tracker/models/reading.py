"""AmperReading database model - one sensor sample."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from amper_tracker.core.database import Base
from amper_tracker.models.types import UTCDateTime, new_object_id, utcnow

if TYPE_CHECKING:
    from amper_tracker.models.product import Product

# Readings at or above this value count as "high" amperage.
HIGH_AMPER_THRESHOLD = 1.0


class AmperReading(Base):
    """Append-only amperage sample tagged with a user and product."""

    __tablename__ = "amper_readings"
    __table_args__ = (
        Index("ix_readings_username_created", "username", "created_at"),
        Index("ix_readings_product_created", "product_id", "created_at"),
        Index("ix_readings_product_username_created", "product_id", "username", "created_at"),
        Index(
            "ix_readings_product_username_sensor_created",
            "product_id",
            "username",
            "sensor",
            "created_at",
        ),
    )

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    username: Mapped[str] = mapped_column(String(50))
    amper: Mapped[float] = mapped_column(Float)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"))
    sensor: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    product: Mapped["Product"] = relationship()

    @property
    def is_high_amper(self) -> bool:
        return self.amper >= HIGH_AMPER_THRESHOLD
