"""
Unit tests for middleware.
"""

import logging

import pytest

from productserver.http import HTTPRequest, HTTPResponse, ok, parse_request
from productserver.middleware import LoggingMiddleware, Middleware, MiddlewarePipeline, RequestLog


def make_request() -> HTTPRequest:
    return parse_request(
        b"GET /products/1 HTTP/1.1\r\nHost: localhost\r\n\r\n",
        ("10.0.0.5", 40000),
    )


class Recorder(Middleware):
    """Appends its label on the way in and on the way out."""

    def __init__(self, label: str, calls: list):
        self.label = label
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(f"{self.label}:in")
        response = next(request)
        self.calls.append(f"{self.label}:out")
        return response


class TestMiddlewarePipeline:
    """Tests for MiddlewarePipeline."""

    def test_empty_pipeline(self):
        pipeline = MiddlewarePipeline()
        handler = pipeline.wrap(lambda request: ok("plain"))

        assert handler(make_request()).text == "plain"
        assert len(pipeline) == 0

    def test_first_added_is_outermost(self):
        calls = []
        pipeline = MiddlewarePipeline()
        pipeline.add(Recorder("outer", calls)).add(Recorder("inner", calls))

        def handler(request: HTTPRequest) -> HTTPResponse:
            calls.append("handler")
            return ok("done")

        pipeline.wrap(handler)(make_request())

        assert calls == ["outer:in", "inner:in", "handler", "inner:out", "outer:out"]
        assert [m.label for m in pipeline] == ["outer", "inner"]

    def test_middleware_name(self):
        assert LoggingMiddleware().name == "LoggingMiddleware"


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    def test_logs_access_line(self, caplog):
        caplog.set_level(logging.INFO, logger="productserver.access")

        response = LoggingMiddleware()(make_request(), lambda request: ok("Product created"))

        assert response.text == "Product created"
        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message.startswith("10.0.0.5 - - [")
        assert '"GET /products/1 HTTP/1.1" 200 15 ' in message
        assert message.endswith("ms")

    def test_response_unchanged(self):
        original = ok("[]")
        response = LoggingMiddleware()(make_request(), lambda request: original)

        assert response is original
        assert response.headers == {"Content-Type": "application/json"}

    def test_handler_error_logged_and_raised(self, caplog):
        caplog.set_level(logging.INFO, logger="productserver.access")

        def broken(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            LoggingMiddleware()(make_request(), broken)

        assert "Request failed" in caplog.text
        assert "RuntimeError: boom" in caplog.text

    def test_control_characters_escaped(self, caplog):
        caplog.set_level(logging.INFO, logger="productserver.access")
        request = parse_request(b"GET /\x1b[31m HTTP/1.1\r\n\r\n")

        LoggingMiddleware()(request, lambda request: ok())

        assert "\x1b" not in caplog.records[0].getMessage()
        assert "\\x1b" in caplog.records[0].getMessage()


class TestRequestLog:

    def test_to_text(self):
        entry = RequestLog(
            client_ip="",
            request_line="GET /products HTTP/1.1",
            status_code=404,
            content_length=13,
            duration_ms=1.234,
            timestamp="19/Oct/2026:10:15:02 +0000",
        )

        assert entry.to_text() == (
            '- - - [19/Oct/2026:10:15:02 +0000] "GET /products HTTP/1.1" 404 13 1.23ms'
        )
