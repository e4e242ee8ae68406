"""
Tests for `domain/time.py`.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from domain.time import (
    parse_optional_utc_timestamp,
    parse_utc_timestamp,
    require_utc_timestamp,
    to_iso_utc,
)

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_require_utc_timestamp() -> None:
    require_utc_timestamp("ts", T0)

    with pytest.raises(ValueError, match="timezone-aware"):
        require_utc_timestamp("ts", datetime(2025, 1, 1))
    with pytest.raises(ValueError, match="offset 0"):
        require_utc_timestamp("ts", datetime(2025, 1, 1, tzinfo=timezone(timedelta(hours=1))))


@pytest.mark.parametrize(
    "value",
    [
        "2025-01-01T12:00:00Z",
        "2025-01-01T12:00:00+00:00",
        "2025-01-01T06:00:00-06:00",
        "2025-01-01T12:00:00",
        T0,
    ],
)
def test_parse_utc_timestamp_normalizes_to_utc(value) -> None:
    parsed = parse_utc_timestamp(value)

    assert parsed == T0
    assert parsed.utcoffset() == timedelta(0)


def test_parse_utc_timestamp_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        parse_utc_timestamp(1735732800)


@pytest.mark.parametrize("value", [None, ""])
def test_parse_optional_utc_timestamp_empty(value) -> None:
    assert parse_optional_utc_timestamp(value) is None


def test_to_iso_utc_converts_offsets() -> None:
    central = T0.astimezone(timezone(timedelta(hours=-6)))

    assert to_iso_utc("ts", central) == "2025-01-01T12:00:00+00:00"
    with pytest.raises(ValueError):
        to_iso_utc("ts", datetime(2025, 1, 1))
