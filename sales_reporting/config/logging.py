"""
Report Logging

structlog events and stdlib records (uvicorn, SQLAlchemy) share one stderr
handler, so CLI report output on stdout stays clean. LOG_FORMAT picks JSON
lines for deployments or the coloured console renderer for local runs.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.types import Processor

from sales_reporting.config.settings import get_settings

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _pre_chain() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
    """
    Route structlog and stdlib logging through a single stderr handler.

    Args:
        log_level: Overrides LOG_LEVEL, e.g. from the CLI --log-level flag
        log_format: Overrides LOG_FORMAT ("json" or "text")

    Returns:
        The handler installed on the root logger
    """
    settings = get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    log_format = log_format or settings.monitoring.log_format
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=_renderer(log_format), foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers[:] = []
        server_logger.propagate = True
        server_logger.setLevel(level)

    if not settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured", level=level_name, format=log_format, environment=settings.app_env
    )
    return handler
