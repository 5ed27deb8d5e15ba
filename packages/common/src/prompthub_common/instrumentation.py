"""OpenTelemetry instrumentation helpers.

Spans are recorded against the global tracer provider. Until
init_telemetry() is called that provider is OpenTelemetry's no-op default,
so instrumented code costs nothing in tests and in the mock path.
"""

import inspect
from functools import wraps
from typing import Any, Callable

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

_tracer_provider: TracerProvider | None = None


def init_telemetry(service_name: str = "prompthub", console_export: bool = False) -> None:
    """Initialize OpenTelemetry tracing.

    Call this once at application startup. Repeated calls are ignored.

    Args:
        service_name: Name of the service for traces
        console_export: Print finished spans to stdout (development)
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return

    _tracer_provider = TracerProvider(
        resource=Resource.create({"service.name": service_name})
    )
    if console_export:
        _tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(_tracer_provider)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for creating spans.

    Args:
        name: Tracer name (typically module name like "prompthub_retrieval.live_gateway")
    """
    return trace.get_tracer(name)


def instrument_function(span_name: str | None = None) -> Callable:
    """Decorator to automatically create a span for a function.

    Args:
        span_name: Name for the span (default: function name)

    Example:
        >>> @instrument_function("gateway.retrieve")
        ... async def retrieve(self, query_filter, ranking, limit, offset):
        ...     ...
    """

    def decorator(func: Callable) -> Callable:
        actual_span_name = span_name or func.__name__

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer(func.__module__).start_as_current_span(actual_span_name):
                return await func(*args, **kwargs)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer(func.__module__).start_as_current_span(actual_span_name):
                return func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
