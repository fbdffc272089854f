"""Batch import of per-device-type JSON files into the point store."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union

from sensorhub.shared.database import PointStorage
from sensorhub.shared.errors import RecordError
from .point_builder import build_point

logger = logging.getLogger(__name__)

# (folder, category) pairs, processed in this order
CATEGORIES = (
    ("gateways", "gateway"),
    ("sensors", "sensor"),
)


@dataclass
class FileResult:
    """Points written from one source file."""
    category: str
    device_type: str
    path: Path
    points: int


@dataclass
class ImportSummary:
    """Outcome of an import run."""
    files: List[FileResult] = field(default_factory=list)
    missing_folders: List[Path] = field(default_factory=list)

    @property
    def files_processed(self) -> int:
        return len(self.files)

    @property
    def total_points(self) -> int:
        return sum(f.points for f in self.files)

    def points_by_category(self) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for result in self.files:
            totals[result.category] = totals.get(result.category, 0) + result.points
        return totals


class DataImporter:
    """Reads device JSON files and writes one point per record."""

    def __init__(self, storage: PointStorage, data_dir: Union[str, Path]):
        """Initialize the importer.

        Args:
            storage: Point store the run writes to. The importer closes it
                when the run ends.
            data_dir: Directory holding the gateways/ and sensors/ folders.
        """
        self.storage = storage
        self.data_dir = Path(data_dir)
        self._field_types: Dict[str, type] = {}

    def run(self) -> ImportSummary:
        """Import every file and flush the store.

        The store is flushed and closed whether the run succeeds or fails.

        Raises:
            RecordError: A record or file could not be parsed.
            StorageError: The store rejected a write.
        """
        logger.info(f"Starting data import from {self.data_dir}")
        summary = ImportSummary()

        with self.storage:
            for folder, category in CATEGORIES:
                self._import_folder(folder, category, summary)

            logger.info(f"Flushing {self.storage.pending} pending points")

        logger.info(
            f"Import complete: {summary.files_processed} files processed, "
            f"{summary.total_points} total points"
        )
        return summary

    def _import_folder(self, folder: str, category: str, summary: ImportSummary) -> None:
        folder_path = self.data_dir / folder
        if not folder_path.is_dir():
            logger.error(f"Folder not found: {folder_path}")
            summary.missing_folders.append(folder_path)
            return

        files = sorted(folder_path.glob("*.json"))
        logger.info(f"Processing {folder}/ ({len(files)} files)")

        for path in files:
            points = self.import_file(path, category)
            summary.files.append(FileResult(
                category=category,
                device_type=path.stem,
                path=path,
                points=points,
            ))
            logger.info(f"{path.name:<20} -> {points} points written")

    def import_file(self, path: Path, category: str) -> int:
        """Write one point per record of a device type file.

        The file name without extension is the device type.

        Returns:
            Number of points written.
        """
        device_type = path.stem
        records = load_records(path)

        count = 0
        for index, record in enumerate(records):
            try:
                point = build_point(record, device_type, category)
            except RecordError as e:
                raise RecordError(str(e), source=str(path), index=index) from e
            self._check_field_types(point.fields, path)
            self.storage.write_point(point)
            count += 1
        return count

    def _check_field_types(self, fields, path: Path) -> None:
        for name, value in fields.items():
            seen = self._field_types.setdefault(name, type(value))
            if seen is not type(value):
                logger.debug(
                    f"Field {name} changed type from {seen.__name__} "
                    f"to {type(value).__name__} in {path.name}"
                )
                self._field_types[name] = type(value)


def load_records(path: Path) -> List[dict]:
    """Read a JSON array of records from a file.

    Raises:
        RecordError: If the file is not valid JSON or not an array.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordError(f"Invalid JSON: {e}", source=str(path)) from e

    if not isinstance(data, list):
        raise RecordError("File must contain a JSON array of records", source=str(path))
    return data


def format_summary(summary: ImportSummary) -> List[Tuple[str, str]]:
    """Summary lines as (label, value) pairs for display."""
    lines = [
        ("Files processed", str(summary.files_processed)),
        ("Total points", str(summary.total_points)),
    ]
    for category, points in summary.points_by_category().items():
        lines.append((f"  {category}", str(points)))
    if summary.missing_folders:
        lines.append(("Missing folders", ", ".join(str(p) for p in summary.missing_folders)))
    return lines
