"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Emits one line per request on the "productserver.access" logger:

    127.0.0.1 - - [19/Oct/2026:10:15:02 +0000] "GET /products/1 HTTP/1.1" 200 36 1.84ms

Nothing is added to the response, so the bytes on the wire are exactly
what the handler built.

Route the access log separately if needed:

    logging.getLogger("productserver.access").addHandler(file_handler)

=============================================================================
"""

from dataclasses import dataclass
import logging
import time

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("productserver.access")


@dataclass
class RequestLog:
    """One access-log entry."""

    client_ip: str
    request_line: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Apache-style common log line with a duration suffix."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.request_line}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware. Add it first so it sees every request.
    """

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.request_line!r} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        log_entry = RequestLog(
            client_ip=request.client_address[0],
            # Non-printable bytes in a garbage request line stay out of the log
            request_line=request.request_line[:200].encode("unicode_escape").decode("ascii"),
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        logger.info(log_entry.to_text())

        return response
