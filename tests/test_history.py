"""Tests for field listing and history queries."""

from unittest.mock import ANY

import pytest

from sensorhub.query.history import HistoryReader
from sensorhub.query.service import DeviceService
from sensorhub.shared.timerange import EPOCH

from .helpers import make_row, utc


def test_fields_excludes_strings_and_sorts(mock_storage):
    mock_storage.query_latest.return_value = [
        make_row(field="voltage", value=3025),
        make_row(field="firmware_str", value="1.4.2"),
        make_row(field="battery_level", value=3.5),
        make_row(field="acceleration_0", value=12),
    ]

    fields = HistoryReader(mock_storage).fields("AA:01")

    assert fields == ["acceleration_0", "battery_level", "voltage"]
    mock_storage.query_latest.assert_called_once_with(mac="AA:01")


def test_history_defaults_to_all_time(mock_storage):
    HistoryReader(mock_storage).history("AA:01", "humidity")
    mac, field, start, stop = mock_storage.query_series.call_args[0]
    assert (mac, field, start) == ("AA:01", "humidity", EPOCH)
    assert stop > start


def test_history_returns_time_value_pairs(mock_storage):
    t1, t2 = utc(2026, 2, 9, 22, 0), utc(2026, 2, 9, 22, 1)
    mock_storage.query_series.return_value = [
        make_row(value=40, timestamp=t1),
        make_row(value=41, timestamp=t2),
    ]

    assert HistoryReader(mock_storage).history("AA:01", "humidity") == [(t1, 40), (t2, 41)]


def test_service_history_response(mock_storage):
    mock_storage.query_series.return_value = [
        make_row(value=41, timestamp=utc(2026, 2, 9, 22, 4, 45, 521000)),
    ]

    result = DeviceService(mock_storage).device_history("AA:01", "humidity", start="-7d")

    assert result == {
        "mac": "AA:01",
        "field": "humidity",
        "count": 1,
        "data": [{"time": "2026-02-09T22:04:45.521Z", "value": 41}],
    }
    mock_storage.query_series.assert_called_once_with("AA:01", "humidity", ANY, ANY)


def test_service_history_requires_field(mock_storage):
    with pytest.raises(ValueError):
        DeviceService(mock_storage).device_history("AA:01", "")


def test_service_history_rejects_bad_time(mock_storage):
    with pytest.raises(ValueError):
        DeviceService(mock_storage).device_history("AA:01", "humidity", start="last tuesday")


@pytest.mark.parametrize("start", ["-999999999999d", "99999999999999999"])
def test_service_history_rejects_out_of_range_time(mock_storage, start):
    with pytest.raises(ValueError):
        DeviceService(mock_storage).device_history("AA:01", "humidity", start=start)
    mock_storage.query_series.assert_not_called()


def test_service_list_devices_counts(mock_storage):
    mock_storage.query_latest.return_value = [make_row(mac="AA"), make_row(mac="BB")]
    result = DeviceService(mock_storage).list_devices()
    assert result["count"] == 2
    assert [d["mac"] for d in result["devices"]] == ["AA", "BB"]


def test_service_fields_response(mock_storage):
    mock_storage.query_latest.return_value = [make_row(field="humidity")]
    assert DeviceService(mock_storage).device_fields("AA") == {"mac": "AA", "fields": ["humidity"]}
