"""Device queries shaped as the responses the API serves."""

from typing import Any, Dict, Optional

from sensorhub.shared.database import PointStorage
from sensorhub.shared.models import format_iso
from sensorhub.shared.timerange import resolve_time_bound, utcnow
from .devices import DeviceAggregator
from .history import HistoryReader


class DeviceService:
    """Entry point for the device queries, one storage handle for all of them."""

    def __init__(self, storage: PointStorage):
        self.aggregator = DeviceAggregator(storage)
        self.history_reader = HistoryReader(storage)

    def list_devices(self) -> Dict[str, Any]:
        devices = self.aggregator.list_devices()
        return {
            "devices": [device.to_dict() for device in devices],
            "count": len(devices),
        }

    def get_device(self, mac: str) -> Optional[Dict[str, Any]]:
        """Get one device, or None when the MAC has no data."""
        device = self.aggregator.get_device(mac)
        if device is None:
            return None
        return device.to_dict()

    def device_fields(self, mac: str) -> Dict[str, Any]:
        return {"mac": mac, "fields": self.history_reader.fields(mac)}

    def device_history(
        self,
        mac: str,
        field: str,
        start: Optional[str] = None,
        stop: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Get the history of one field.

        Args:
            mac: Device MAC address.
            field: Field name, required.
            start: Time expression, defaults to all time ("0").
            stop: Time expression, defaults to now ("now()").

        Raises:
            ValueError: If field is empty or a time expression is invalid.
        """
        if not field:
            raise ValueError('Query parameter "field" is required')

        now = utcnow()
        start_time = resolve_time_bound(start or "0", now=now)
        stop_time = resolve_time_bound(stop or "now()", now=now)

        series = self.history_reader.history(mac, field, start_time, stop_time)
        return {
            "mac": mac,
            "field": field,
            "count": len(series),
            "data": [{"time": format_iso(ts), "value": value} for ts, value in series],
        }
