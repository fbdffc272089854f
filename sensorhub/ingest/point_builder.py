"""Builds canonical points from raw device records."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sensorhub.shared.errors import RecordError
from sensorhub.shared.models import FieldValue, Point
from .normalizer import classify_number, flatten_field, is_number

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

# Metadata that is either mapped to tags or not a measurement at all
SKIP_FIELDS = frozenset([
    "Prefix",
    "NumberOfAttributes",
    "measure_name",
    "MacAddress",
    "GatewayID",
    "GroupID",
    "time",
    "SignalTimestamp",
    "Capture_Timestamp",
    "Received_Signal_Quality",
    "Recieved_Signal_Quality",  # misspelled by some sensor firmware
])

SIGNAL_QUALITY_KEYS = ("Received_Signal_Quality", "Recieved_Signal_Quality")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def parse_timestamp(text: Any) -> datetime:
    """Parse "2026-02-09 22:04:45.521000000" as UTC, truncated to milliseconds.

    Raises:
        ValueError: If the text is not a timestamp in that format.
    """
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be a string, got {type(text).__name__}")

    text = text.strip()
    if "." not in text:
        text += ".000"
    seconds, _, fraction = text.partition(".")
    if not fraction.isdigit():
        raise ValueError(f"Invalid fractional seconds in timestamp: {text!r}")
    millis = (fraction + "000")[:3]

    parsed = datetime.strptime(f"{seconds}.{millis}", TIMESTAMP_FORMAT)
    return parsed.replace(tzinfo=timezone.utc)


def get_signal_quality(record: Mapping[str, Any]) -> Optional[int]:
    """Reconcile signal quality from either spelling of its key.

    Returns None when neither key is present. Non-numeric values become 0.
    """
    value = None
    for key in SIGNAL_QUALITY_KEYS:
        if record.get(key) is not None:
            value = record[key]
            break
    if value is None:
        return None
    if not is_number(value):
        return 0
    return int(value)


def get_tags(record: Mapping[str, Any], device_type: str, category: str) -> Dict[str, str]:
    return {
        "device_mac": _tag_value(record.get("measure_name")),
        "device_type": device_type or UNKNOWN,
        "device_category": category or UNKNOWN,
        "gateway_id": _tag_value(record.get("GatewayID")),
        "group_id": _tag_value(record.get("GroupID")),
    }


def _tag_value(value: Any) -> str:
    if value is None or value == "":
        return UNKNOWN
    return str(value)


def build_point(record: Mapping[str, Any], device_type: str, category: str) -> Point:
    """Turn one raw record into a Point.

    Args:
        record: Raw JSON object for one sample.
        device_type: Device type, taken from the source file name.
        category: "gateway" or "sensor", taken from the source folder.

    Returns:
        The built point.

    Raises:
        RecordError: If the record is not an object or its timestamp is
            missing or unparseable.
    """
    if not isinstance(record, Mapping):
        raise RecordError(f"Record must be an object, got {type(record).__name__}")

    if "time" not in record:
        raise RecordError("Record has no 'time' field")
    try:
        timestamp = parse_timestamp(record["time"])
    except ValueError as e:
        raise RecordError(f"Unparseable timestamp {record['time']!r}: {e}") from e

    fields: Dict[str, FieldValue] = {}

    signal_quality = get_signal_quality(record)
    if signal_quality is not None:
        fields["signal_quality"] = signal_quality

    for key, value in record.items():
        if key in SKIP_FIELDS:
            continue
        for name, field_value in flatten_field(key, value).items():
            if is_number(field_value):
                fields[name] = classify_number(field_value)
            else:
                fields[name] = field_value

    return Point(
        timestamp=timestamp,
        tags=get_tags(record, device_type, category),
        fields=fields,
    )
