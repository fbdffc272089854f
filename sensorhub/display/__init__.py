"""Terminal display service."""

from .format import format_field_name, format_field_value, display_fields
from .terminal import DeviceMonitor


def main(argv=None):
    """Entry point for display service."""
    import argparse
    import sys

    from sensorhub.query.devices import DeviceAggregator
    from sensorhub.shared.config import get_log_level, load_yaml_config
    from sensorhub.shared.database import DBConfig, PointStorage
    from sensorhub.shared.errors import StorageError
    from sensorhub.shared.logging import setup_logging, get_logger

    parser = argparse.ArgumentParser(description="Show devices and their latest readings")
    parser.add_argument("--mac", help="Show a single device")
    parser.add_argument("--config", help="Path to YAML config file")
    args = parser.parse_args(argv)

    config = load_yaml_config(args.config)
    setup_logging(get_log_level(config))
    logger = get_logger("display")

    storage = PointStorage(DBConfig.from_env())
    monitor = DeviceMonitor(DeviceAggregator(storage))

    try:
        if args.mac:
            found = monitor.show_device(args.mac)
            if not found:
                sys.exit(1)
        else:
            monitor.show_devices()
    except StorageError as e:
        logger.error(f"Failed to fetch devices: {e}")
        sys.exit(1)


__all__ = ["DeviceMonitor", "format_field_name", "format_field_value", "display_fields", "main"]
