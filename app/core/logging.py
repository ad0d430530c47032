"""Logging configuration."""
import logging
import sys
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every query or operation at INFO/DEBUG
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "strawberry.execution")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure stdout logging for the service.

    ``level`` overrides ``settings.log_level``. Calling this again replaces
    the root handlers instead of stacking them.
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"[LOGGING] Configured at {level_name}")
