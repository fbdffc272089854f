"""Shared utilities for sensorhub services."""

from .models import Point, StoreRow, Device, DisplayField
from .database import DBConfig, PointStorage
from .config import load_yaml_config, get_config_path
from .errors import SensorhubError, StorageError, RecordError
from .logging import setup_logging

__all__ = [
    "Point",
    "StoreRow",
    "Device",
    "DisplayField",
    "DBConfig",
    "PointStorage",
    "load_yaml_config",
    "get_config_path",
    "SensorhubError",
    "StorageError",
    "RecordError",
    "setup_logging",
]
