"""Product database model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from amper_tracker.core.database import Base
from amper_tracker.models.types import UTCDateTime, new_object_id, utcnow

if TYPE_CHECKING:
    from amper_tracker.models.reading import AmperReading


class Product(Base):
    """A device class declaring which sensor channels it reports."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(100), index=True)
    sensors: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    # Read-only view over readings that point at this product
    readings: Mapped[list["AmperReading"]] = relationship(
        order_by="AmperReading.created_at.desc()",
        viewonly=True,
    )
