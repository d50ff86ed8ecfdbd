"""Utility functions and decorators for distributed tracing"""
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

# Keyword arguments recorded as span attributes
_RECORDED_ARGS = ("user_id", "permission", "resource_id", "role_id", "target_user_id")


def traced(operation_name: str | None = None, attributes: dict[str, Any] | None = None):
    """
    Decorator to create a span around an async function

    Usage:
        @traced("authz.has_permission")
        async def has_permission(self, user_id: str, permission: str) -> bool:
            ...

    Args:
        operation_name: Name of the span (defaults to module.function)
        attributes: Static attributes added to every span
    """

    def decorator(func: Callable) -> Callable:
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def wrapper(*args, **kwargs):
            tracer = trace.get_tracer(__name__)

            with tracer.start_as_current_span(span_name) as span:
                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, value)

                for key in _RECORDED_ARGS:
                    if kwargs.get(key) is not None:
                        span.set_attribute(f"arg.{key}", str(kwargs[key]))

                try:
                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def add_span_attributes(**attributes):
    """
    Add attributes to the current span

    Usage:
        add_span_attributes(decision="allow")
    """
    span = trace.get_current_span()
    if span:
        for key, value in attributes.items():
            span.set_attribute(key, value)
