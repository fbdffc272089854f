"""Field listings and time series for a single device."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sensorhub.shared.database import PointStorage
from sensorhub.shared.models import FieldValue
from sensorhub.shared.timerange import EPOCH, utcnow

logger = logging.getLogger(__name__)


class HistoryReader:
    """Reads chartable fields and their history from the point store."""

    def __init__(self, storage: PointStorage):
        self.storage = storage

    def fields(self, mac: str) -> List[str]:
        """Get the fields of a device whose latest value is numeric.

        String fields cannot be charted and are left out.
        """
        rows = self.storage.query_latest(mac=mac)
        return sorted(row.field for row in rows if row.is_numeric())

    def history(
        self,
        mac: str,
        field: str,
        start: Optional[datetime] = None,
        stop: Optional[datetime] = None,
    ) -> List[Tuple[datetime, FieldValue]]:
        """Get every value of a field in [start, stop), oldest first.

        Args:
            mac: Device MAC address.
            field: Canonical field name.
            start: Range start, defaults to all time.
            stop: Range end, defaults to the time of the call.
        """
        start = start or EPOCH
        stop = stop or utcnow()
        rows = self.storage.query_series(mac, field, start, stop)
        logger.debug(f"Read {len(rows)} points for {mac}/{field}")
        return [(row.timestamp, row.value) for row in rows]
