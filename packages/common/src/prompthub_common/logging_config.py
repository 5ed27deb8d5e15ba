"""Structured logging configuration using structlog.

JSON lines in production, coloured console output in development. Both
renderers share one processor chain, which masks database passwords in
`dsn` / `database_url` fields before anything is written.
"""

import logging
import sys
from typing import Any

import structlog

CREDENTIAL_KEYS = frozenset({"dsn", "database_url"})


def mask_dsn(dsn: str) -> str:
    """Replace the password in a connection string with ***.

    Example:
        >>> mask_dsn("postgresql://app:s3cret@db:5432/prompthub")
        'postgresql://app:***@db:5432/prompthub'
    """
    if "@" not in dsn or "://" not in dsn:
        return dsn
    scheme, rest = dsn.split("://", 1)
    credentials, location = rest.rsplit("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{location}"


def redact_credentials(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor: mask connection strings logged by key."""
    for key in CREDENTIAL_KEYS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_dsn(value)
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_credentials,
    ]


def _renderer_chain(json_output: bool) -> list:
    if json_output:
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.set_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    ]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level name, any case (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, human-readable console otherwise

    Example:
        >>> configure_logging(level="DEBUG")
        >>> get_logger(__name__).info("search_completed", total=9, returned=9)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    structlog.configure(
        processors=_shared_processors() + _renderer_chain(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings) -> None:
    """Configure logging from a Settings instance (log_level, log_format)."""
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_format == "json",
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to `name` (usually __name__)."""
    return structlog.get_logger(name)
