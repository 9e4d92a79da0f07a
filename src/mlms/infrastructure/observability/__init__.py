"""Observability infrastructure for structured logging."""

from mlms.infrastructure.observability.logger_template import log_operation
from mlms.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from mlms.infrastructure.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "log_operation",
    "set_correlation_id",
]
