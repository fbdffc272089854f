"""Configuration for the API service."""

import os
from dataclasses import dataclass, field
from typing import Optional

from sensorhub.shared.config import config_section, get_log_level, load_yaml_config
from sensorhub.shared.database import DBConfig


@dataclass
class ApiConfig:
    """Configuration for the HTTP API."""

    host: str = "0.0.0.0"
    port: int = 3000
    db: DBConfig = field(default_factory=DBConfig.from_env)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "ApiConfig":
        """Create config from the `api` section of a config dictionary."""
        api_data = config_section(data, "api")
        return cls(
            host=api_data.get("host", "0.0.0.0"),
            port=int(os.getenv("PORT") or api_data.get("port", 3000)),
            db=DBConfig.from_env(),
            log_level=get_log_level(data),
        )


def load_config(config_path: Optional[str] = None) -> ApiConfig:
    """Load API configuration from YAML file and environment.

    Args:
        config_path: Path to YAML config file. If not provided, the
            environment's default config is used when it exists.
    """
    data = load_yaml_config(config_path)
    return ApiConfig.from_dict(data)
