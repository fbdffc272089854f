"""Device state and history queries."""

from .devices import DeviceAggregator
from .history import HistoryReader
from .service import DeviceService

__all__ = ["DeviceAggregator", "HistoryReader", "DeviceService"]
