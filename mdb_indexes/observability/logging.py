"""
Structured logging utilities for MDB_INDEXES.

Log records emitted through `get_logger` carry the current correlation ID
and index context (database, collection, backend) in their `extra` fields.
"""

import contextvars
import logging
import uuid
from datetime import datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mdb_indexes_correlation_id", default=None
)

_index_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "mdb_indexes_index_context", default=None
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set a correlation ID in the current context.

    Args:
        correlation_id: Optional correlation ID (generates new one if None)

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def set_index_context(
    db_name: str | None = None,
    collection_name: str | None = None,
    backend: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Set the index context attached to subsequent log records.

    Args:
        db_name: Database whose indexes are being managed
        collection_name: Collection whose indexes are being managed
        backend: Index backend in use ("legacy" or "modern")
        **kwargs: Additional context
    """
    context = {
        key: value
        for key, value in (
            ("db_name", db_name),
            ("collection_name", collection_name),
            ("backend", backend),
        )
        if value is not None
    }
    context.update(kwargs)
    _index_context.set(context)


def clear_index_context() -> None:
    _index_context.set(None)


def get_logging_context() -> dict[str, Any]:
    """
    Get current logging context (correlation ID and index context).

    Returns:
        Dictionary with context information
    """
    context: dict[str, Any] = {
        "timestamp": datetime.now().isoformat(),
    }

    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id

    index_context = _index_context.get()
    if index_context:
        context.update(index_context)

    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that automatically adds context to log records.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()

        extra = kwargs.get("extra", {})
        if extra:
            context.update(extra)

        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """
    Get a contextual logger that automatically adds correlation ID and context.

    Args:
        name: Logger name (typically __name__)

    Returns:
        ContextualLoggerAdapter instance
    """
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_index_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    namespace: str,
    success: bool = True,
    duration_ms: float | None = None,
    level: int = logging.DEBUG,
    **context: Any,
) -> None:
    """
    Log one index operation with structured context.

    Args:
        logger: Logger or adapter instance
        operation: Operation name (e.g. "indexes.modern.create")
        namespace: Namespace (or database name) the operation targeted
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        level: Log level
        **context: Additional context
    """
    log_context = get_logging_context()
    log_context.update(
        {
            "operation": operation,
            "namespace": namespace,
            "success": success,
        }
    )

    if duration_ms is not None:
        log_context["duration_ms"] = round(duration_ms, 2)

    if context:
        log_context.update(context)

    message = f"Index operation: {operation} on '{namespace}'"
    if not success:
        message = f"Index operation failed: {operation} on '{namespace}'"
    if duration_ms is not None:
        message += f" (duration: {duration_ms:.2f}ms)"

    logger.log(level, message, extra=log_context)
