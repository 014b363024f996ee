"""
Observability components.

Provides structured logging and metrics collection for index operations.
"""

from .logging import (
    ContextualLoggerAdapter,
    clear_correlation_id,
    clear_index_context,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_index_operation,
    set_correlation_id,
    set_index_context,
)
from .metrics import (
    MetricsCollector,
    OperationMetrics,
    get_metrics_collector,
    record_operation,
    timed_index_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationMetrics",
    "get_metrics_collector",
    "record_operation",
    "timed_index_operation",
    # Logging
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "set_index_context",
    "clear_index_context",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_index_operation",
]
