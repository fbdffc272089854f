"""Logging setup shared by the import, API and display entry points."""

import logging
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# Driver and server chatter that drowns out per-file import progress
QUIET_LOGGERS = ("pymysql", "aiohttp.access", "asyncio")


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    quiet_loggers: Iterable[str] = (),
) -> None:
    """Configure root logging for a sensorhub process.

    Unknown level names fall back to INFO. The loggers in QUIET_LOGGERS,
    plus any given in `quiet_loggers`, are held at WARNING regardless of
    `level`.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=format_string or LOG_FORMAT)

    for logger_name in (*QUIET_LOGGERS, *quiet_loggers):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(component: str) -> logging.Logger:
    """Get the logger for an entry point, e.g. "import" -> "sensorhub.import"."""
    if not component.startswith("sensorhub"):
        component = f"sensorhub.{component}"
    return logging.getLogger(component)
