# marketplace_booking/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from typing import Optional

from marketplace_booking.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library loggers that drown out booking logs unless debugging
LIBRARY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "uvicorn.access",
)


def resolve_level(name: str) -> int:
    """Numeric level for a LOG_LEVEL name, INFO when unrecognised"""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(verbose: Optional[bool] = None):
    """
    Configure application logging.

    The service's own loggers follow LOG_LEVEL. Library loggers are held at
    WARNING unless verbose, which defaults to the DEBUG setting.
    """
    settings = get_settings()
    if verbose is None:
        verbose = settings.DEBUG

    logging.basicConfig(
        level=resolve_level(settings.LOG_LEVEL),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    library_level = logging.INFO if verbose else logging.WARNING
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
