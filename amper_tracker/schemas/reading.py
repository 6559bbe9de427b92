"""AmperReading schemas for request/response validation."""

from datetime import datetime

from amper_tracker.schemas.common import CamelModel, Pagination


class ReadingCreate(CamelModel):
    """A write payload that already passed validation."""

    username: str
    amper: float
    product_id: str
    sensor: str | None = None


class ProductRef(CamelModel):
    """Short product summary embedded in reading responses."""

    id: str
    name: str


class ReadingCreated(CamelModel):
    """Response body for a newly stored reading."""

    id: str
    username: str
    amper: float
    product: ProductRef
    sensor: str | None
    timestamp: datetime


class ReadingResponse(CamelModel):
    """A stored reading as returned by list endpoints."""

    id: str
    username: str
    amper: float
    product: str
    sensor: str | None
    created_at: datetime

    @classmethod
    def from_reading(cls, reading) -> "ReadingResponse":
        return cls(
            id=reading.id,
            username=reading.username,
            amper=reading.amper,
            product=reading.product_id,
            sensor=reading.sensor,
            created_at=reading.created_at,
        )


class RecentReading(CamelModel):
    """Compact reading for charting the last 24 hours."""

    id: str
    timestamp: datetime
    amper: float


class ReadingPage(CamelModel):
    """A page of readings for one user."""

    readings: list[ReadingResponse]
    pagination: Pagination
