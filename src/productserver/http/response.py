"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Responses are hand-built HTTP/1.1 messages. There is no Content-Length,
Date or Server header: the connection is closed after every response, so
the client reads the body until EOF.

=============================================================================
WIRE FORMAT
=============================================================================

    Success (any 2xx):

        HTTP/1.1 200 OK\r\n
        Content-Type: application/json\r\n
        \r\n
        [{"id":1,"name":"Widget","price":10}]

    Error (4xx / 5xx), no headers at all:

        HTTP/1.1 404 NOT FOUND\r\n
        \r\n
        Product not found

    Success bodies are either JSON or a short plain-text message such as
    "Product created"; the Content-Type header says application/json in
    both cases.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union
import json

from .status_codes import HTTPStatus


JSON_CONTENT_TYPE = "application/json"


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized onto a socket.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE

        Example: "HTTP/1.1 500 INTERNAL SERVER ERROR"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (mostly for logs and tests)."""
        return self.body.decode("utf-8", errors="replace")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding strings as UTF-8."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response.

            HTTP/1.1 200 OK\r\n                   ← status line
            Content-Type: application/json\r\n   ← one line per header
            \r\n                                 ← blank line
            <body>
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Blank line separates the preamble from the body
        lines.append("")

        preamble = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return preamble + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json([{"id": 1, "name": "Widget", "price": 10}])
            .build())
    """

    def __init__(self):
        self._response = HTTPResponse()

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._response.status = status
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """Set a plain-text body without touching headers."""
        self._response.set_body(text)
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Set a JSON body and the JSON content type.

        Strings are taken as already-serialized JSON (or a plain message)
        and written as-is; anything else goes through json.dumps with
        compact separators.
        """
        if isinstance(data, str):
            body = data
        else:
            body = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        self._response.set_body(body)
        self._response.set_header("Content-Type", JSON_CONTENT_TYPE)
        return self

    def build(self) -> HTTPResponse:
        return self._response


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def ok(body: Union[str, list, dict] = "") -> HTTPResponse:
    """
    200 OK with the JSON content type.

        ok("Product created")
        ok([{"id": 1, "name": "Widget", "price": 10}])
    """
    return ResponseBuilder().status(HTTPStatus.OK).json(body).build()


def not_found(message: str = "404 Not found") -> HTTPResponse:
    """404 with a plain-text reason and no headers."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(message).build()


def payload_too_large(message: str = "Request too large") -> HTTPResponse:
    """413 for requests that exceed max_request_size."""
    return ResponseBuilder().status(HTTPStatus.PAYLOAD_TOO_LARGE).text(message).build()


def internal_error(message: str = "Error") -> HTTPResponse:
    """500 with the literal body "Error"."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).text(message).build()
