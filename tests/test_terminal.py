"""Tests for the terminal device view."""

from io import StringIO

from rich.console import Console

from sensorhub.display.terminal import DeviceMonitor
from sensorhub.query.devices import DeviceAggregator, fold_rows

from .helpers import make_row, utc


def make_console():
    return Console(file=StringIO(), width=120, color_system=None)


def test_show_devices(mock_storage):
    mock_storage.query_latest.return_value = [
        make_row(mac="AA:01", device_type="AT-105"),
        make_row(mac="GW:01", device_type="GTW-100", device_category="gateway"),
    ]
    console = make_console()

    shown = DeviceMonitor(DeviceAggregator(mock_storage), console).show_devices()

    output = console.file.getvalue()
    assert shown == 2
    assert output.index("GTW-100") < output.index("AT-105")


def test_show_device_formats_readings(mock_storage):
    mock_storage.query_latest.return_value = [
        make_row(mac="AA:01", field="temperature_chip", value=223),
        make_row(mac="AA:01", field="fault_status", value=0),
    ]
    console = make_console()

    assert DeviceMonitor(DeviceAggregator(mock_storage), console).show_device("AA:01")

    output = console.file.getvalue()
    assert "Temperature (Chip)" in output
    assert "22.3 °C" in output
    assert "No Faults" in output


def test_show_device_not_found(mock_storage):
    console = make_console()
    assert not DeviceMonitor(DeviceAggregator(mock_storage), console).show_device("missing")
    assert "Device not found" in console.file.getvalue()


def test_last_seen_text():
    [device] = fold_rows([make_row(timestamp=utc(2026, 2, 9, 22, 10))]).values()
    monitor = DeviceMonitor(aggregator=None, console=make_console())
    text = monitor._last_seen_text(device, now=utc(2026, 2, 9, 23, 10))
    assert text == "Feb 9, 22:10 (1 hours ago)"
