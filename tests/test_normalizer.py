"""Tests for field name cleaning and flattening."""

import re

import pytest

from sensorhub.ingest.normalizer import classify_number, clean_field_name, flatten_field

CLEAN_NAME_RE = re.compile(r"^[a-z0-9_]*$")


@pytest.mark.parametrize("raw,expected", [
    ("Temperature_CHIP-0.1°C", "temperature_chip"),
    ("Vibration_X-mm/s", "vibration_x"),
    ("Humidity-RH%", "humidity"),
    ("Voltage-mV", "voltage"),
    ("Device_Angle-°", "device_angle"),
    ("Battery Capacity-mAh", "battery_capacity"),
    ("BLE__Buffer..Status", "ble_buffer_status"),
    ("Fault_Status", "fault_status"),
])
def test_clean_field_name(raw, expected):
    assert clean_field_name(raw) == expected


@pytest.mark.parametrize("raw", [
    "Temperature_CHIP-0.1°C",
    "Weird  Key!!",
    "Trailing_",
    "a-b-c",
    "-mV",
    "Ünïcode-Key",
])
def test_clean_field_name_idempotent_and_lowercase(raw):
    once = clean_field_name(raw)
    assert clean_field_name(once) == once
    assert CLEAN_NAME_RE.match(once)


def test_clean_field_name_keeps_inner_hyphen_segments():
    # Only the final unit suffix is stripped
    assert clean_field_name("Some-Name-mV") == "some_name"


def test_flatten_number():
    assert flatten_field("Humidity-RH%", 41) == {"humidity": 41}


def test_flatten_string_gets_suffix():
    assert flatten_field("Firmware", "1.4.2") == {"firmware_str": "1.4.2"}


def test_flatten_none_yields_nothing():
    assert flatten_field("Humidity-RH%", None) == {}


def test_flatten_multi_value():
    assert flatten_field("Accel", {"value0": 12, "value1": -3}) == {"accel_0": 12, "accel_1": -3}


def test_flatten_multi_value_strings_and_suffixes():
    result = flatten_field("Status", {"value0": "ok", "valueA": 5, "value1": [1, 2], "value2": None})
    assert result == {"status_str_0": "ok", "status_A": 5}


def test_flatten_drops_booleans():
    assert flatten_field("Flag", True) == {}


def test_flatten_array_by_position():
    assert flatten_field("Accel", [12, -3]) == {"accel_0": 12, "accel_1": -3}


def test_flatten_array_strings_and_dropped_entries():
    assert flatten_field("Tags", ["a", None, 4, True]) == {"tags_str_0": "a", "tags_2": 4}


def test_classify_number():
    assert classify_number(3) == 3 and isinstance(classify_number(3), int)
    assert isinstance(classify_number(3.0), int)
    assert classify_number(3.5) == 3.5 and isinstance(classify_number(3.5), float)
    assert isinstance(classify_number(float("inf")), float)
