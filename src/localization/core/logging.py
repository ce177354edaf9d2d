import logging
import sys
from typing import Any

import structlog

from localization.core.config import settings

# Third party loggers that log every outbound request or statement at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def _build_processors(json_output: bool) -> list[Any]:
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if not json_output:
        return [*shared, structlog.dev.ConsoleRenderer(colors=True)]
    return [
        *shared,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def setup_logging(level: int | None = None) -> None:
    """Configure stdlib logging and structlog for the service.

    Local runs get the coloured console renderer, every other environment
    emits one JSON document per line.
    """
    log_level = level if level is not None else (
        logging.DEBUG if settings.DEBUG else logging.INFO
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(json_output=settings.ENVIRONMENT != "local"),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
