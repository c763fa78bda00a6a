"""
Middleware module initialization
"""

from .request_logging import RequestLoggingMiddleware
from .trace_context import TraceContextMiddleware

__all__ = ["RequestLoggingMiddleware", "TraceContextMiddleware"]
