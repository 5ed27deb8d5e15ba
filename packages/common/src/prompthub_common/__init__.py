"""PromptHub Common - Shared utilities.

Version: 1.0.0

This package provides:
- Settings (pydantic-settings)
- Structured logging (structlog)
- Retry/backoff patterns (tenacity)
- OpenTelemetry instrumentation helpers
- Custom error types
"""

from prompthub_common.config import Settings, get_settings
from prompthub_common.errors import (
    PromptHubError,
    RetrievalError,
    StorageError,
    ValidationError,
)
from prompthub_common.instrumentation import (
    get_tracer,
    init_telemetry,
    instrument_function,
)
from prompthub_common.logging_config import (
    configure_from_settings,
    configure_logging,
    get_logger,
    mask_dsn,
)
from prompthub_common.retry import retry_on_exception

__version__ = "1.0.0"

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "mask_dsn",
    # Retry
    "retry_on_exception",
    # Instrumentation
    "init_telemetry",
    "get_tracer",
    "instrument_function",
    # Errors
    "PromptHubError",
    "ValidationError",
    "RetrievalError",
    "StorageError",
]
