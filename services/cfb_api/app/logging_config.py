"""Logging setup for the API service.

Call `configure_logging()` once from the service entrypoint. Modules obtain
their own logger with `logging.getLogger(__name__)`.
"""

import logging
import sys

from .settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(name: str) -> int:
    """Numeric level for a level name such as "debug"; INFO if unrecognized."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Configure root logging to stdout.

    Args:
        level: Log level name (e.g. "DEBUG"). Defaults to `settings.log_level`.
    """
    logging.basicConfig(
        level=resolve_level(level or settings.log_level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
