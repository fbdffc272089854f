"""Builders for test data."""

from datetime import datetime, timezone

from sensorhub.shared.models import StoreRow


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_row(mac="AA:01", field="humidity", value=8, timestamp=None, **tags) -> StoreRow:
    """Build a store row with sensible tag defaults."""
    return StoreRow(
        device_mac=mac,
        device_type=tags.get("device_type", "AT-105"),
        device_category=tags.get("device_category", "sensor"),
        gateway_id=tags.get("gateway_id", "GW1"),
        group_id=tags.get("group_id", "G1"),
        field=field,
        value=value,
        timestamp=timestamp or utc(2026, 2, 9, 22, 0, 0),
    )
