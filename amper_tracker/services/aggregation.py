"""Grouping and statistics over filtered sets of readings.

All functions here are pure: they take any iterable of reading-like
objects (``username``, ``amper``, ``created_at``) so they can run over a
streamed query or a plain list in tests.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from amper_tracker.models.reading import HIGH_AMPER_THRESHOLD, AmperReading
from amper_tracker.schemas.reading import ReadingResponse
from amper_tracker.schemas.stats import AmperBands, FilteredStatistics, UserStats, UserSummary

# Lower edge of the "mid" band; "high" starts at HIGH_AMPER_THRESHOLD.
MID_AMPER_THRESHOLD = 0.5


def round_half_up(value: float, places: int = 0) -> float:
    """Round with ties away from zero, unlike the built-in ``round``."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def amper_band(amper: float) -> str:
    """Name the band an amperage falls in.

    off: exactly 0, low: (0, 0.5), mid: [0.5, 1.0), high: >= 1.0
    """
    if amper == 0:
        return "off"
    if amper < MID_AMPER_THRESHOLD:
        return "low"
    if amper < HIGH_AMPER_THRESHOLD:
        return "mid"
    return "high"


def user_stats(readings: Iterable[AmperReading]) -> UserStats:
    """High/low split of a user's readings with the high share in percent."""
    total = 0
    high = 0
    for reading in readings:
        total += 1
        if reading.amper >= HIGH_AMPER_THRESHOLD:
            high += 1

    percentage = int(round_half_up(100 * high / total)) if total else 0
    return UserStats(
        total_readings=total,
        high_amp_count=high,
        low_amp_count=total - high,
        percentage=percentage,
    )


@dataclass
class _UserGroup:
    username: str
    total: int = 0
    amper_sum: float = 0.0
    latest: AmperReading | None = field(default=None, repr=False)

    def add(self, reading: AmperReading) -> None:
        self.total += 1
        self.amper_sum += reading.amper
        if self.latest is None or reading.created_at > self.latest.created_at:
            self.latest = reading

    def summary(self) -> UserSummary:
        average = round_half_up(self.amper_sum / self.total, 2) if self.total else 0
        return UserSummary(
            username=self.username,
            total_readings=self.total,
            latest_reading=ReadingResponse.from_reading(self.latest) if self.latest else None,
            average_amper=average,
        )


def group_by_username(readings: Iterable[AmperReading]) -> list[UserSummary]:
    """Per-username count, latest reading and average amperage.

    Groups keep the order in which their first reading was seen.
    """
    groups: dict[str, _UserGroup] = {}
    for reading in readings:
        group = groups.get(reading.username)
        if group is None:
            group = groups[reading.username] = _UserGroup(username=reading.username)
        group.add(reading)
    return [group.summary() for group in groups.values()]


def filtered_statistics(readings: Iterable[AmperReading]) -> FilteredStatistics:
    """Count, min/max/avg and band counts; all zero for an empty set."""
    total = 0
    amper_sum = 0.0
    minimum: float | None = None
    maximum: float | None = None
    bands = {"off": 0, "low": 0, "mid": 0, "high": 0}

    for reading in readings:
        amper = reading.amper
        total += 1
        amper_sum += amper
        if minimum is None or amper < minimum:
            minimum = amper
        if maximum is None or amper > maximum:
            maximum = amper
        bands[amper_band(amper)] += 1

    if not total:
        return FilteredStatistics()

    return FilteredStatistics(
        total_readings=total,
        min_amper=round_half_up(minimum, 2),
        max_amper=round_half_up(maximum, 2),
        avg_amper=round_half_up(amper_sum / total, 2),
        categories=AmperBands(**bands),
    )
