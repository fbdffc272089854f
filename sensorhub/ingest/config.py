"""Configuration loading for the import service."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sensorhub.shared.config import config_section, get_log_level, load_yaml_config, resolve_repo_path
from sensorhub.shared.database import DEFAULT_BATCH_SIZE, DBConfig


@dataclass
class ImportConfig:
    """Settings for one import run."""
    db: DBConfig
    data_dir: Path
    batch_size: int = DEFAULT_BATCH_SIZE
    log_level: str = "INFO"


def load_config(config_path: Optional[str] = None) -> ImportConfig:
    """Load import settings from YAML and environment variables.

    The `import` section of the YAML file is optional; a missing file
    means defaults. A relative `data_dir` in the file is taken from the
    repo root. SENSORHUB_DATA_DIR and SENSORHUB_BATCH_SIZE override the
    file; the directory from the environment is used as given.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        ImportConfig with all settings loaded.
    """
    config_data = load_yaml_config(config_path)
    import_data = config_section(config_data, "import")

    data_dir = resolve_repo_path(import_data.get("data_dir", "data"))
    if env_dir := os.getenv("SENSORHUB_DATA_DIR"):
        data_dir = env_dir

    batch_size = import_data.get("batch_size", DEFAULT_BATCH_SIZE)
    if env_batch := os.getenv("SENSORHUB_BATCH_SIZE"):
        batch_size = env_batch

    return ImportConfig(
        db=DBConfig.from_env(),
        data_dir=Path(data_dir),
        batch_size=int(batch_size),
        log_level=get_log_level(config_data),
    )
