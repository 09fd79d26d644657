"""Logging setup for hunkfmt.

structlog renders events and hands them to stdlib logging, so handler and
level selection stay with ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(colors=False),
    ],
)

logger: structlog.BoundLogger = structlog.get_logger("hunkfmt")


def configure_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """Route hunkfmt log output to stderr or to ``log_file``."""
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
