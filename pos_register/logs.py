"""structlog setup.

Textual owns the terminal, so log events go to a file instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

import structlog

from pos_register.config import LOG_LEVEL, LOG_PATH


def configure_logging(path: str | Path = LOG_PATH, level: str = LOG_LEVEL) -> Path:
    """Route structlog output to ``path`` as timestamped key=value lines."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.WriteLoggerFactory(file=log_file.open("a", encoding="utf-8")),
        cache_logger_on_first_use=True,
    )
    return log_file
