"""Settings files and environment lookup shared by all sensorhub entry points.

Settings live in `config/config-<env>.yaml` at the repo root, one file per
deployment. Secrets such as database credentials come from the process
environment, optionally seeded from a `.env` file.
"""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

PathLike = Union[str, Path]


def get_environment() -> str:
    """Deployment name from SENSORHUB_ENV, 'sensorhub' when unset."""
    return os.getenv("SENSORHUB_ENV", "sensorhub")


def get_repo_root() -> Path:
    return Path(__file__).parent.parent.parent


def resolve_repo_path(path: PathLike) -> Path:
    """Anchor a relative path from a config file at the repo root."""
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return get_repo_root() / path


def get_config_path(
    config_name: Optional[str] = None,
    config_dir: Optional[PathLike] = None,
) -> Path:
    """Locate a settings file.

    Args:
        config_name: File name. Defaults to config-<env>.yaml for the
            current deployment.
        config_dir: Directory to look in. Defaults to config/ at the repo
            root.
    """
    config_dir = Path(config_dir) if config_dir is not None else get_repo_root() / "config"
    return config_dir / (config_name or f"config-{get_environment()}.yaml")


def load_yaml_config(
    config_path: Optional[PathLike] = None,
    load_env: bool = True,
    required: Optional[bool] = None,
) -> dict:
    """Read a settings file into a dictionary.

    Args:
        config_path: File to read. Without one the deployment's default
            file from get_config_path() is used.
        load_env: Load `.env` into the environment first.
        required: Raise when the file is missing. Defaults to True for an
            explicit `config_path` and False for the deployment default,
            which may legitimately not exist.

    Raises:
        FileNotFoundError: If a required file is missing.
        yaml.YAMLError: If the file is not valid YAML.
    """
    if load_env:
        load_dotenv()

    if required is None:
        required = config_path is not None
    path = Path(config_path) if config_path is not None else get_config_path()

    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def config_section(config: dict, name: str) -> dict:
    """Get one service's section, treating an empty section as no settings.

    Raises:
        ValueError: If the section is present but not a mapping.
    """
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def get_log_level(config: dict) -> str:
    """Log level name; LOG_LEVEL in the environment wins over the file."""
    return (os.getenv("LOG_LEVEL") or config.get("log_level", "INFO")).upper()
