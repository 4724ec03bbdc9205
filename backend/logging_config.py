"""Centralized logging configuration.

Used by the API process (which also hosts the daily snapshot job) and by
the command-line scripts.
"""

import logging
from typing import Optional

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"

# Third-party loggers that are chatty below WARNING
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "apscheduler",
    "httpx",
    "httpcore",
)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for the application.

    Sets the root logger level from ``level`` or, when omitted,
    settings.LOG_LEVEL, and suppresses noisy third-party loggers to WARNING.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, level_name),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
