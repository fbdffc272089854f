"""Core data models for device telemetry."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

MEASUREMENT = "device_readings"

TAG_KEYS = ("device_mac", "device_type", "device_category", "gateway_id", "group_id")

FieldValue = Union[int, float, str]


def value_type_of(value: FieldValue) -> str:
    """Return the stored type name for a field value."""
    if isinstance(value, bool):
        raise TypeError("Boolean field values are not supported")
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    raise TypeError(f"Unsupported field value type: {type(value).__name__}")


@dataclass(frozen=True)
class Point:
    """One normalized, tagged observation ready for storage.

    Fields are held in a read-only mapping so a built point cannot change
    after it is handed to the storage layer.
    """
    timestamp: datetime
    tags: Mapping[str, str]
    fields: Mapping[str, FieldValue]
    measurement: str = MEASUREMENT

    def __post_init__(self):
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class StoreRow:
    """A single (device, field) value as returned by a store query."""
    device_mac: str
    device_type: str
    device_category: str
    gateway_id: str
    group_id: str
    field: str
    value: FieldValue
    timestamp: datetime

    def is_numeric(self) -> bool:
        """Check if the value can be charted."""
        return isinstance(self.value, (int, float)) and not isinstance(self.value, bool)


@dataclass
class Device:
    """Current state of a device, rebuilt from the store on every query."""
    mac: str
    type: str
    category: str
    gateway_id: str
    group_id: str
    last_seen: Optional[datetime] = None
    readings: Dict[str, FieldValue] = field(default_factory=dict)
    reading_times: Dict[str, datetime] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(cls, row: StoreRow) -> "Device":
        return cls(
            mac=row.device_mac,
            type=row.device_type,
            category=row.device_category,
            gateway_id=row.gateway_id,
            group_id=row.group_id,
        )

    def apply(self, row: StoreRow) -> None:
        """Fold one latest-value row into this device.

        A device heard by several gateways has one row per gateway for the
        same field; only the newest of them is kept.
        """
        seen = self.reading_times.get(row.field)
        if seen is None or row.timestamp >= seen:
            self.readings[row.field] = row.value
            self.reading_times[row.field] = row.timestamp
        if self.last_seen is None or row.timestamp > self.last_seen:
            self.last_seen = row.timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the field names the API exposes."""
        return {
            "mac": self.mac,
            "type": self.type,
            "category": self.category,
            "gatewayId": self.gateway_id,
            "groupId": self.group_id,
            "lastSeen": format_iso(self.last_seen),
            "readings": dict(self.readings),
        }


@dataclass(frozen=True)
class DisplayField:
    """Human readable label and value for one reading."""
    field: str
    label: str
    value_text: str


def format_iso(timestamp: Optional[datetime]) -> Optional[str]:
    """Format a UTC timestamp as RFC3339 with millisecond precision."""
    if timestamp is None:
        return None
    return timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp.microsecond // 1000:03d}Z"
