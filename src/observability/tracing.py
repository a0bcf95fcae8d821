"""Helpers for correlation identifiers in logs."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

from src.config.logging_config import bind_context, unbind_context

CORRELATION_ID_KEY = "correlation_id"
BUILD_ID_KEY = "build_id"


@contextmanager
def correlation_scope(
    existing_id: str | None = None, *, build_id: int | None = None
) -> Iterator[str]:
    """Bind a correlation identifier (and optionally the build) for the scope."""

    correlation_id = existing_id or str(uuid4())
    bound: dict[str, object] = {CORRELATION_ID_KEY: correlation_id}
    if build_id is not None:
        bound[BUILD_ID_KEY] = build_id

    bind_context(**bound)
    try:
        yield correlation_id
    finally:
        unbind_context(*bound)


__all__ = ["BUILD_ID_KEY", "CORRELATION_ID_KEY", "correlation_scope"]
