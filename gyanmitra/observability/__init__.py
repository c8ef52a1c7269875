"""
Observability module.

Logging configuration, correlation id tracking and request middleware.
"""

from gyanmitra.observability.correlation import get_correlation_id, set_correlation_id
from gyanmitra.observability.logger import configure_logging
from gyanmitra.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
]
