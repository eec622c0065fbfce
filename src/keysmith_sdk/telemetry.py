"""Tracing and structured logging for the KeySmith SDK.

Each client owns a ``Telemetry`` built from its ``TelemetryConfig``. The SDK
never configures structlog or OpenTelemetry globally: log events go through
whatever pipeline the host application set up, filtered at the client's
level, and spans go to the globally registered tracer provider.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .config import TelemetryConfig

if TYPE_CHECKING:
    from collections.abc import Generator

T = TypeVar("T")

_INSTRUMENTATION_VERSION = "0.1.0"

_LOG_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class Telemetry:
    """Tracer and logger of one client."""

    def __init__(self, config: TelemetryConfig | None = None) -> None:
        self.config = config or TelemetryConfig()
        if self.config.enabled:
            self.tracer: trace.Tracer = trace.get_tracer(
                self.config.service_name, _INSTRUMENTATION_VERSION
            )
        else:
            self.tracer = trace.NoOpTracer()
        self.logger: structlog.BoundLogger = structlog.wrap_logger(
            None,
            wrapper_class=structlog.make_filtering_bound_logger(
                _LOG_LEVELS.get(self.config.log_level, 20)
            ),
            logger_factory_args=(self.config.service_name,),
        )

    @contextmanager
    def span(
        self,
        name: str,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[trace.Span, None, None]:
        """Run the enclosed block in a span; None attributes are skipped.

        Exceptions are recorded on the span and re-raised.
        """
        with self.tracer.start_as_current_span(
            name, record_exception=False, set_status_on_exception=False
        ) as span:
            for key, value in (attributes or {}).items():
                if value is not None:
                    span.set_attribute(key, value)
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise


def traced(name: str | None = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorate a method of an object with a ``telemetry`` attribute."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        span_name = name or f"keysmith.{func.__name__}"

        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            with self.telemetry.span(span_name):
                return func(self, *args, **kwargs)

        return wrapper

    return decorator
