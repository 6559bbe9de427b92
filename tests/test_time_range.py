"""Tests for lookback window parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from amper_tracker.services.time_range import parse_time_range

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("token", "hours"),
    [("1h", 1), ("6h", 6), ("12h", 12), ("24h", 24), ("7d", 7 * 24), ("30d", 30 * 24)],
)
def test_allowed_tokens(token: str, hours: int) -> None:
    assert parse_time_range(token, now=NOW) == NOW - timedelta(hours=hours)


def test_24h_is_exactly_one_day_back() -> None:
    assert parse_time_range("24h", now=NOW) == datetime(2026, 3, 9, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("token", [None, ""])
def test_absent_token_means_no_filter(token) -> None:
    assert parse_time_range(token, now=NOW) is None


@pytest.mark.parametrize("token", ["40h", "2h", "1d", "14d", "0h"])
def test_unsupported_magnitude_is_ignored(token: str) -> None:
    assert parse_time_range(token, now=NOW) is None


@pytest.mark.parametrize("token", ["abc", "24", "h24", "24m", "24H", " 24h", "24h\n", "-1h"])
def test_malformed_token_is_ignored(token: str) -> None:
    assert parse_time_range(token, now=NOW) is None


def test_defaults_to_current_time() -> None:
    before = datetime.now(timezone.utc)
    cutoff = parse_time_range("1h")
    after = datetime.now(timezone.utc)

    assert cutoff is not None
    assert before - timedelta(hours=1) <= cutoff <= after - timedelta(hours=1)


def test_non_ascii_digits_are_ignored() -> None:
    assert parse_time_range("٢٤h", now=NOW) is None
