"""Unit tests for middleware components"""
import pytest
from unittest.mock import Mock

from blueprint.core.context import get_trace_id
from blueprint.middleware.trace_context import TraceContextMiddleware, parse_traceparent


class TestParseTraceparent:
    def test_valid_header(self):
        assert parse_traceparent("00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01") == (
            "4bf92f3577b34da6a3ce929d0e0e4736",
            "00f067aa0ba902b7",
        )

    @pytest.mark.parametrize("value", [
        None,
        "",
        "garbage",
        "00-00000000000000000000000000000000-00f067aa0ba902b7-01",
        "00-4bf92f3577b34da6a3ce929d0e0e4736-0000000000000000-01",
    ])
    def test_invalid_headers(self, value):
        assert parse_traceparent(value) is None


class TestTraceContextMiddleware:
    """Test TraceContextMiddleware functionality"""

    @pytest.mark.asyncio
    async def test_trace_id_from_header(self):
        # Arrange
        middleware = TraceContextMiddleware(Mock())
        request = Mock()
        request.headers = {"traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"}

        captured = None

        async def call_next(req):
            nonlocal captured
            captured = get_trace_id()
            response = Mock()
            response.headers = {}
            return response

        # Act
        response = await middleware.dispatch(request, call_next)

        # Assert
        assert captured == "4bf92f3577b34da6a3ce929d0e0e4736"
        assert response.headers["X-Trace-ID"] == captured

    @pytest.mark.asyncio
    async def test_trace_id_generated(self):
        middleware = TraceContextMiddleware(Mock())
        request = Mock()
        request.headers = {}

        async def call_next(req):
            response = Mock()
            response.headers = {}
            return response

        response = await middleware.dispatch(request, call_next)

        trace_id = response.headers["X-Trace-ID"]
        assert len(trace_id) == 32
        assert response.headers["traceparent"].startswith(f"00-{trace_id}-")
