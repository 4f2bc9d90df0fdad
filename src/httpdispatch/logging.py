"""Structured logging for the dispatch layer.

JSON lines on stdout via structlog's stdlib integration. The request id bound in
middleware.py through structlog.contextvars is merged into every event.

The formatter, aggregator and metrics reporter only call ``error``, described
by LogSink, so tests can hand them a recording fake.
"""

import logging.config
import sys
from typing import Any, Protocol

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger


class LogSink(Protocol):
    def error(self, event: str, *args: Any, **kw: Any) -> Any: ...


class LoggingSettings(BaseSettings):
    """Logging settings from environment variables."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def configure_logging(settings: LoggingSettings) -> None:
    """Route structlog events through the root stdlib logger as JSON.

    Called once when this module is first imported.
    """
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.processors.JSONRenderer(),
                    "foreign_pre_chain": shared,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                },
            },
            "root": {"handlers": ["stdout"], "level": settings.log_level.upper()},
        }
    )


configure_logging(LoggingSettings())


def get_logger(name: str) -> BoundLogger:
    """Structured logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
