"""Aggregated statistics schemas."""

from pydantic import Field

from amper_tracker.schemas.common import CamelModel
from amper_tracker.schemas.reading import ReadingResponse


class UserStats(CamelModel):
    """High/low amperage split over all of a user's readings."""

    total_readings: int = 0
    high_amp_count: int = 0
    low_amp_count: int = 0
    percentage: int = 0


class UserSummary(CamelModel):
    """Per-username group within a product."""

    username: str
    total_readings: int
    latest_reading: ReadingResponse | None
    average_amper: float


class AmperBands(CamelModel):
    """Counts per fixed amperage band; the four bands partition [0, 100]."""

    off: int = 0
    low: int = 0
    mid: int = 0
    high: int = 0


class FilteredStatistics(CamelModel):
    total_readings: int = 0
    min_amper: float = 0
    max_amper: float = 0
    avg_amper: float = 0
    categories: AmperBands = Field(default_factory=AmperBands)
