"""Tests for time bound expressions."""

from datetime import timedelta

import pytest

from sensorhub.shared.timerange import EPOCH, parse_duration, resolve_time_bound

from .helpers import utc

NOW = utc(2026, 2, 9, 22, 0, 0)


@pytest.mark.parametrize("expr,expected", [
    ("0", EPOCH),
    ("now()", NOW),
    ("now", NOW),
    ("-7d", NOW - timedelta(days=7)),
    ("-30m", NOW - timedelta(minutes=30)),
    ("-1h30m", NOW - timedelta(hours=1, minutes=30)),
    ("-500ms", NOW - timedelta(milliseconds=500)),
    ("-2w", NOW - timedelta(weeks=2)),
    ("2026-02-09T22:04:45Z", utc(2026, 2, 9, 22, 4, 45)),
    ("2026-02-09T23:04:45+01:00", utc(2026, 2, 9, 22, 4, 45)),
    ("2026-02-09", utc(2026, 2, 9)),
    ("1770674400", utc(2026, 2, 9, 22, 0, 0)),
])
def test_resolve_time_bound(expr, expected):
    assert resolve_time_bound(expr, now=NOW) == expected


def test_empty_expression_returns_default():
    assert resolve_time_bound(None, default=EPOCH) == EPOCH
    assert resolve_time_bound("  ", now=NOW) is None


@pytest.mark.parametrize("expr", [
    "last tuesday",
    "-7x",
    "7d",
    "now()+1",
    "-999999999999d",
    "-999999999d",
    "99999999999999999",
])
def test_invalid_expression(expr):
    with pytest.raises(ValueError):
        resolve_time_bound(expr, now=NOW)


def test_parse_duration():
    assert parse_duration("1d2h") == timedelta(days=1, hours=2)
