"""
HTTP protocol components: request decoding, response building, routing.
"""

from .status_codes import HTTPStatus
from .request import (
    HTTPRequest,
    parse_request,
    decode_request,
    extract_path_segment,
    extract_body,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    not_found,
    payload_too_large,
    internal_error,
)
from .router import Router, Route, RouteShadowedError

__all__ = [
    "HTTPStatus",
    "HTTPRequest",
    "parse_request",
    "decode_request",
    "extract_path_segment",
    "extract_body",
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "not_found",
    "payload_too_large",
    "internal_error",
    "Router",
    "Route",
    "RouteShadowedError",
]
