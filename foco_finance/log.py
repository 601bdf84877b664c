"""
Structured Logging

Every storage fallback, failed write and bulk ledger change is logged
locally as a structured JSON line. Logging is for debugging only:
nothing reads these records back, and a logging failure never
changes the outcome of an operation.
"""

import logging
from typing import Optional

import structlog

from foco_finance.config import get_settings


_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; only the first call has an effect.
    """
    global _configured
    if _configured:
        return

    if level is None:
        try:
            level = get_settings().app.log_level
        except Exception:
            level = "INFO"

    logging.basicConfig(format="%(message)s", level=level)

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
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring structlog on first use."""
    configure_logging()
    return structlog.get_logger(name)
