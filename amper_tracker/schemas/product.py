"""Product and per-product query schemas."""

from datetime import datetime

from amper_tracker.schemas.common import CamelModel, Pagination
from amper_tracker.schemas.reading import ReadingResponse
from amper_tracker.schemas.stats import FilteredStatistics, UserSummary


class ProductSummary(CamelModel):
    id: str
    name: str
    sensors: list[str]


class ProductResponse(ProductSummary):
    """A product with its derived list of readings."""

    created_at: datetime
    updated_at: datetime
    readings: list[ReadingResponse]


class ProductUsers(CamelModel):
    product: ProductSummary
    users: list[UserSummary]


class ProductUsersPage(ProductUsers):
    sensor: str
    pagination: Pagination


class ProductUserReadings(CamelModel):
    product: ProductSummary
    username: str
    sensor: str | None = None
    readings: list[ReadingResponse]
    pagination: Pagination


class ProductUserStatistics(CamelModel):
    product: ProductSummary
    username: str
    sensor: str | None
    statistics: FilteredStatistics
