"""Current device state rebuilt from the latest value of every field."""

import logging
from typing import Dict, Iterable, List, Optional

from sensorhub.shared.database import PointStorage
from sensorhub.shared.models import Device, StoreRow

logger = logging.getLogger(__name__)

# Left out of the device list, shown only in single-device views
LIST_EXCLUDED_FIELDS = ("signal_quality",)

CATEGORY_ORDER = {"gateway": 0, "sensor": 1}


def fold_rows(rows: Iterable[StoreRow]) -> Dict[str, Device]:
    """Merge latest-value rows into one Device per MAC.

    The first row seen for a MAC sets its tags. Every row adds its field to
    the readings and pushes last_seen forward, so last_seen ends up as the
    newest timestamp over all fields, not that of any single record.
    """
    devices: Dict[str, Device] = {}
    for row in rows:
        device = devices.get(row.device_mac)
        if device is None:
            device = devices[row.device_mac] = Device.from_row(row)
        device.apply(row)
    return devices


def sort_key(device: Device):
    return (CATEGORY_ORDER.get(device.category, len(CATEGORY_ORDER)), device.type)


class DeviceAggregator:
    """Builds device state records from the point store."""

    def __init__(self, storage: PointStorage):
        self.storage = storage

    def list_devices(self) -> List[Device]:
        """Get every device with its latest readings.

        Gateways come before sensors; within a category devices are
        ordered by type.
        """
        rows = self.storage.query_latest(exclude_fields=LIST_EXCLUDED_FIELDS)
        devices = sorted(fold_rows(rows).values(), key=sort_key)
        logger.debug(f"Aggregated {len(rows)} rows into {len(devices)} devices")
        return devices

    def get_device(self, mac: str) -> Optional[Device]:
        """Get one device with its latest readings, or None if unknown."""
        rows = self.storage.query_latest(mac=mac)
        if not rows:
            return None
        # Tags match exactly in the store, so every row belongs to one device
        return next(iter(fold_rows(rows).values()))
