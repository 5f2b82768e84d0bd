"""
Structured logging setup.

The engine itself only calls ``structlog.get_logger``; applications embedding
it call ``configure_logging()`` once at startup.
"""

import logging
import sys
from typing import Optional

import structlog

from slide_constraints.core.config import get_settings


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure stdlib logging and the structlog processor chain.

    Args:
        level: Log level name; defaults to ``Settings.LOG_LEVEL``
        log_format: ``json`` for machine-readable output, anything else for
            the console renderer; defaults to ``Settings.LOG_FORMAT``
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    fmt = (log_format or settings.LOG_FORMAT).lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if fmt == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
