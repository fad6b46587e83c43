"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The product API answers with a small, fixed set of status codes:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK - record(s) returned or mutation applied               │
    │  404   │ NOT FOUND - unknown route or missing record               │
    │  413   │ PAYLOAD TOO LARGE - request exceeded max_request_size     │
    │  500   │ INTERNAL SERVER ERROR - bad input or storage failure      │
    └────────┴───────────────────────────────────────────────────────────┘

Status lines are written with the reason phrase in UPPERCASE:

    HTTP/1.1 404 NOT FOUND
    HTTP/1.1 500 INTERNAL SERVER ERROR

Existing clients match on these exact bytes, so the phrase
table below is the single source for them.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'NOT FOUND'
    """

    OK = 200
    NOT_FOUND = 404
    PAYLOAD_TOO_LARGE = 413
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase as written on the status line."""
        return _PHRASES[self.value]


_PHRASES = {
    200: "OK",
    404: "NOT FOUND",
    413: "PAYLOAD TOO LARGE",
    500: "INTERNAL SERVER ERROR",
}
