"""Pytest fixtures shared by the sensorhub tests."""

import json
from unittest.mock import MagicMock

import pytest

from sensorhub.shared.database import PointStorage


@pytest.fixture
def mock_storage():
    """Storage double with the query methods stubbed."""
    storage = MagicMock(spec=PointStorage)
    storage.query_latest.return_value = []
    storage.query_series.return_value = []
    return storage


@pytest.fixture
def sample_record() -> dict:
    """A raw sensor record as exported by a gateway."""
    return {
        "Prefix": "TP",
        "NumberOfAttributes": 6,
        "measure_name": "AC:23:3F:00:00:01",
        "MacAddress": "AC:23:3F:00:00:01",
        "GatewayID": "GW1",
        "GroupID": "G7",
        "time": "2026-02-09 22:04:45.521000000",
        "SignalTimestamp": "2026-02-09 22:04:45",
        "Received_Signal_Quality": -67,
        "Temperature_CHIP-0.1°C": 223,
        "Humidity-RH%": 41,
        "Acceleration-mG": {"value0": 12, "value1": -3, "value2": 1001},
        "Firmware": "1.4.2",
        "Battery_Level": 3.5,
    }


@pytest.fixture
def data_dir(tmp_path, sample_record):
    """Import directory with one gateway file and two sensor files."""
    gateways = tmp_path / "gateways"
    sensors = tmp_path / "sensors"
    gateways.mkdir()
    sensors.mkdir()

    gateway_record = {
        "measure_name": "GW:00:00:00:00:01",
        "GatewayID": "GW1",
        "time": "2026-02-09 22:00:00.000000000",
        "Voltage-mV": 3025,
    }
    (gateways / "GTW-100.json").write_text(json.dumps([gateway_record] * 2))
    (sensors / "AT-105.json").write_text(json.dumps([sample_record] * 3))
    (sensors / "TP-400R8.json").write_text(json.dumps([sample_record]))
    (sensors / "notes.txt").write_text("not telemetry")
    return tmp_path
