"""Resolution of query time bounds.

Accepts the literal defaults ("0" for all time, "now()" for the query
time), relative durations such as "-7d" or "-1h30m", ISO-8601 timestamps
and integer epoch seconds.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

DURATION_UNITS = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}

_DURATION_RE = re.compile(r"^-((?:\d+(?:ms|s|m|h|d|w))+)$")
_DURATION_PART_RE = re.compile(r"(\d+)(ms|s|m|h|d|w)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_duration(text: str) -> timedelta:
    """Parse a compound duration like "1h30m" into a timedelta."""
    total = timedelta()
    try:
        for amount, unit in _DURATION_PART_RE.findall(text):
            total += timedelta(**{DURATION_UNITS[unit]: int(amount)})
    except OverflowError:
        raise ValueError(f"Duration out of range: {text!r}") from None
    return total


def resolve_time_bound(
    expr: Optional[str],
    now: Optional[datetime] = None,
    default: Optional[datetime] = None,
) -> Optional[datetime]:
    """Resolve a time bound expression to an aware UTC datetime.

    Args:
        expr: The expression. Empty or None returns `default`.
        now: Reference time for "now()" and relative durations.
        default: Value used when no expression is given.

    Raises:
        ValueError: If the expression is not understood.
    """
    if expr is None or not str(expr).strip():
        return default

    expr = str(expr).strip()
    now = now or utcnow()

    if expr == "0":
        return EPOCH
    if expr in ("now()", "now"):
        return now

    try:
        return _resolve_expression(expr, now)
    except (OverflowError, OSError):
        raise ValueError(f"Time expression out of range: {expr!r}") from None


def _resolve_expression(expr: str, now: datetime) -> datetime:
    match = _DURATION_RE.match(expr)
    if match:
        return now - parse_duration(match.group(1))

    if re.fullmatch(r"\d+", expr):
        return datetime.fromtimestamp(int(expr), tz=timezone.utc)

    iso = expr[:-1] + "+00:00" if expr.endswith("Z") else expr
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        raise ValueError(f"Unrecognized time expression: {expr!r}") from None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
