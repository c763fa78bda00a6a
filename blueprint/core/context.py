"""
Request-scoped trace context shared by the middleware and the logger
"""

from contextvars import ContextVar
from typing import Optional

# Trace ID of the request being handled
trace_id_ctx: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the trace ID from the current context"""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID in the current context"""
    trace_id_ctx.set(trace_id)
