"""Exception types shared across sensorhub services."""

from typing import Optional


class SensorhubError(Exception):
    """Base class for sensorhub errors."""

    pass


class StorageError(SensorhubError):
    """Raised when the point store cannot be written to or queried."""

    pass


class RecordError(SensorhubError):
    """Raised when a raw telemetry record cannot be turned into a point."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        index: Optional[int] = None,
    ):
        self.source = source
        self.index = index
        location = ""
        if source is not None:
            location = f" ({source}"
            if index is not None:
                location += f", record {index}"
            location += ")"
        super().__init__(f"{message}{location}")
