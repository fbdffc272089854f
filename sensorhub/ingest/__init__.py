"""Telemetry import service."""

from .importer import DataImporter, ImportSummary, FileResult
from .normalizer import clean_field_name, flatten_field, classify_number
from .point_builder import build_point, parse_timestamp


def main(argv=None):
    """Entry point for the import service."""
    import argparse
    import sys

    from .config import load_config
    from .importer import format_summary
    from sensorhub.shared.database import PointStorage
    from sensorhub.shared.errors import SensorhubError
    from sensorhub.shared.logging import setup_logging, get_logger

    parser = argparse.ArgumentParser(description="Import device JSON files into the point store")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--data-dir", help="Directory with gateways/ and sensors/ folders")
    parser.add_argument("--batch-size", type=int, help="Points per write batch")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)
    logger = get_logger("import")

    data_dir = args.data_dir or config.data_dir
    storage = PointStorage(config.db, batch_size=args.batch_size or config.batch_size)

    try:
        storage.ensure_schema()
        summary = DataImporter(storage, data_dir).run()
    except SensorhubError as e:
        logger.error(f"Import failed: {e}")
        sys.exit(1)

    for label, value in format_summary(summary):
        logger.info(f"{label}: {value}")


__all__ = [
    "DataImporter",
    "ImportSummary",
    "FileResult",
    "clean_field_name",
    "flatten_field",
    "classify_number",
    "build_point",
    "parse_timestamp",
    "main",
]
