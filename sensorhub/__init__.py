"""Device telemetry ingestion and query services."""

__version__ = "0.1.0"
