"""Formatting utilities for device readings.

Turns canonical field names and raw values into display text:

    "temperature_chip" -> "Temperature (Chip)"
    "acceleration_0"   -> "Acceleration (X)"
    "vibration_x_3"    -> "Vibration X (Band 4)"

    temperature_chip: 223 -> "22.3 °C"
    humidity: 8           -> "8 %"
    voltage: 3025         -> "3025 mV"
"""

import re
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional, Tuple, Union

from sensorhub.shared.models import DisplayField

Number = Union[int, float]

FIELD_LABELS = {
    "temperature_chip": "Temperature (Chip)",
    "temperature_ntc": "Temperature (NTC)",
    "temperature_rtd": "Temperature (RTD)",
    "humidity": "Humidity",
    "voltage": "Voltage",
    "fault_status": "Fault Status",
    "signal_quality": "Signal Quality",
    "battery_voltage": "Battery Voltage",
    "battery_capacity": "Battery Capacity",
    "charge_percentage": "Charge",
    "state_of_charge": "State of Charge",
    "bat_charging_status": "Charging Status",
    "ble_buffer_status": "BLE Buffer",
    "gtw_host_status": "Gateway Host Status",
    "device_angle": "Device Angle",
    "coulomb_count": "Coulomb Count",
    "charge_status": "Charge Status",
    "wgr_fault_status": "Gauge Fault Status",
}

AXES = ("X", "Y", "Z")


def _accel_label(match) -> str:
    index = int(match.group(1))
    axis = AXES[index] if index < len(AXES) else match.group(1)
    return f"Acceleration ({axis})"


# Checked in order, first match wins
FIELD_PATTERNS: List[Tuple[re.Pattern, Callable]] = [
    (re.compile(r"^acceleration_(\d)$"), _accel_label),
    (re.compile(r"^vibration_([xyz])_(\d)$"),
     lambda m: f"Vibration {m.group(1).upper()} (Band {int(m.group(2)) + 1})"),
    (re.compile(r"^temperature_rtd_(\d)$"),
     lambda m: f"Temperature RTD (Ch {int(m.group(1)) + 1})"),
    (re.compile(r"^voltage_(\d+)$"),
     lambda m: f"Voltage (Ch {int(m.group(1)) + 1})"),
    (re.compile(r"^current_(\d+)$"),
     lambda m: f"Current (Ch {int(m.group(1)) + 1})"),
    (re.compile(r"^wgr_gauge_report_(\d)$"),
     lambda m: f"Gauge Report ({int(m.group(1)) + 1})"),
]

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_field_name(field: str) -> str:
    """Convert a canonical field name into a readable label."""
    if field in FIELD_LABELS:
        return FIELD_LABELS[field]

    for pattern, build_label in FIELD_PATTERNS:
        match = pattern.match(field)
        if match:
            return build_label(match)

    return " ".join(word[:1].upper() + word[1:] for word in field.split("_"))


def format_number(value: Number) -> str:
    """Render a number without a trailing ".0" for integral ints."""
    if isinstance(value, int):
        return str(value)
    return repr(value)


def format_field_value(field: str, value: Union[Number, str]) -> str:
    """Format a raw value with the scale and unit of its field."""
    if isinstance(value, str):
        return value

    number = format_number(value)

    # Temperatures are stored in tenths of a degree
    if field.startswith("temperature_") or field.startswith("battery_ntc"):
        return f"{value / 10:.1f} °C"

    if field == "humidity":
        return f"{number} %"

    if field.startswith("voltage") or field.startswith("battery_voltage"):
        return f"{number} mV"

    if field.startswith("acceleration"):
        return f"{number} mG"

    if field.startswith("vibration"):
        return f"{number} mm/s"

    if field == "signal_quality":
        return f"{number} dBm"

    if field.startswith("battery_capacity") or field.startswith("state_of_charge"):
        return f"{number} mAh"

    if field.startswith("charge_percentage") or field.startswith("ble_buffer_status"):
        return f"{number} %"

    if field == "device_angle":
        return f"{number}°"

    if field.startswith("current"):
        return f"{number} uA"

    if field.startswith("wgr_gauge_report"):
        return f"{value:.3f}"

    if field in ("fault_status", "wgr_fault_status"):
        return "No Faults" if value == 0 else f"Fault ({number})"

    return number


def display_fields(readings: Mapping[str, Union[Number, str]]) -> List[DisplayField]:
    """Format every reading of a device, ordered by field name."""
    return [
        DisplayField(
            field=field,
            label=format_field_name(field),
            value_text=format_field_value(field, value),
        )
        for field, value in sorted(readings.items())
    ]


def format_timestamp(timestamp: datetime) -> str:
    """Format a timestamp like "Feb 9, 22:10"."""
    return f"{MONTHS[timestamp.month - 1]} {timestamp.day}, {timestamp:%H:%M}"


def time_ago(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Get a relative time string such as "3 hours ago"."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - timestamp).total_seconds())

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    return f"{seconds // 86400} days ago"
