"""
W3C Trace Context middleware

Reads the incoming traceparent header (or starts a new trace), stores the ids
in the request context for logging and echoes them on the response.
"""

import re
import uuid
from typing import Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from blueprint.core.context import set_trace_id

# version-trace_id-parent_id-flags
TRACEPARENT_PATTERN = re.compile(r"^00-([0-9a-f]{32})-([0-9a-f]{16})-[0-9a-f]{2}$")


def parse_traceparent(traceparent: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return (trace_id, span_id) from a traceparent header, None if absent or invalid"""
    if not traceparent:
        return None

    match = TRACEPARENT_PATTERN.match(traceparent.strip().lower())
    if not match:
        return None

    trace_id, span_id = match.groups()
    if trace_id == "0" * 32 or span_id == "0" * 16:
        return None
    return trace_id, span_id


def new_trace_context() -> Tuple[str, str]:
    return uuid.uuid4().hex, uuid.uuid4().hex[:16]


class TraceContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        trace_id, span_id = parse_traceparent(request.headers.get("traceparent")) or new_trace_context()

        set_trace_id(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)

        response.headers["traceparent"] = f"00-{trace_id}-{span_id}-01"
        response.headers["X-Trace-ID"] = trace_id
        return response
