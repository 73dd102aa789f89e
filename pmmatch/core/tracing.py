"""Call correlation support using structlog contextvars."""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import contextmanager

import structlog.contextvars as contextvars


def generate_trace_id() -> str:
    """Generate a unique trace ID.

    Returns:
        Hexadecimal trace ID (32 characters)
    """
    return uuid.uuid4().hex


def get_trace_id() -> str | None:
    """Return the trace ID bound in the current context, if any."""
    return contextvars.get_contextvars().get("trace_id")


@contextmanager
def trace_context(trace_id: str | None = None) -> Generator[str, None, None]:
    """Bind a trace ID for the duration of a block.

    Other bound variables stay visible inside the block. On exit the
    previous trace ID is restored, or unbound if there was none.

    Args:
        trace_id: Trace ID to bind (None generates a new one)

    Yields:
        The bound trace ID

    Example:
        >>> with trace_context(get_trace_id()) as trace_id:
        ...     logger.info("Matching targets")  # Will include trace_id
    """
    if trace_id is None:
        trace_id = generate_trace_id()

    with contextvars.bound_contextvars(trace_id=trace_id):
        yield trace_id
