"""
=============================================================================
HTTP REQUEST DECODING
=============================================================================

Turns the raw bytes read from a client socket into an HTTPRequest.

=============================================================================
LENIENT DECODING
=============================================================================

The product API is text-prefix routed: the router only looks at the literal
start of the request ("GET /products/..."), and handlers pull the id and the
JSON body out of the text with two small string operations. Because of that,
decoding never fails:

    - invalid UTF-8 sequences are replaced with U+FFFD
    - a malformed request line gives empty method/path (no route matches,
      the client gets a 404)
    - header lines without a colon are skipped

=============================================================================
THE TWO EXTRACTIONS
=============================================================================

    Request text:

        PUT /products/42 HTTP/1.1\r\n
        Host: localhost:8080\r\n
        Content-Type: application/json\r\n
        \r\n
        {"name":"Gadget","price":25}

    Path segment - split the WHOLE text on "/", take index 2, keep the
    first whitespace-delimited token:

        ["PUT ", "products", "42 HTTP", "1.1\r\nHost: ..."]
                               ──┬────
                                 └── "42"

    Body - the last piece after splitting on the blank line "\r\n\r\n"
    ("\n\n" from bare-LF clients):

        '{"name":"Gadget","price":25}'

    The same segment offset serves /products/<id> and /price/<threshold>.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict
import re


# Blank line after the headers; bare-LF clients send "\n\n"
HEADER_TERMINATOR = re.compile(r"\r?\n\r?\n")
LINE_BREAK = re.compile(r"\r?\n")


def extract_path_segment(text: str) -> str:
    """
    Return the path segment after the first path component.

    Examples:
        "GET /products/7 HTTP/1.1\\r\\n..."  → "7"
        "GET /price/100 HTTP/1.1\\r\\n..."   → "100"
        "GET /products HTTP/1.1\\r\\n..."    → "1.1"  (never routed here)
        "GET"                                → ""
    """
    segments = text.split("/")
    if len(segments) < 3:
        return ""
    tokens = segments[2].split()
    return tokens[0] if tokens else ""


def extract_body(text: str) -> str:
    """
    Return the text following the last blank line.

    When the text has no blank line at all, the whole text comes back,
    which then fails JSON decoding.
    """
    return HEADER_TERMINATOR.split(text)[-1]


@dataclass
class HTTPRequest:
    """
    A decoded request.

    Attributes:
        text:           The full request, decoded leniently. Routing and
                        extraction work on this.
        method:         Request-line method ("" when malformed).
        path:           Request-line target without the query string.
        version:        Request-line version.
        headers:        Header dict with lowercase names.
        client_address: (ip, port) of the peer, for logging.
    """

    text: str
    method: str = ""
    path: str = ""
    version: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    @property
    def request_line(self) -> str:
        """First line of the request, as sent."""
        return LINE_BREAK.split(self.text, 1)[0]

    @property
    def path_segment(self) -> str:
        """Id or price threshold embedded in the path."""
        return extract_path_segment(self.text)

    @property
    def body_text(self) -> str:
        """Request body as text."""
        return extract_body(self.text)


def decode_request(data: bytes) -> str:
    """Decode raw bytes as UTF-8, replacing invalid sequences."""
    return data.decode("utf-8", errors="replace")


def parse_request(data: bytes, client_address: tuple[str, int] = ("", 0)) -> HTTPRequest:
    """
    Build an HTTPRequest from raw socket bytes.

    Never raises. Whatever cannot be parsed is left empty.
    """
    text = decode_request(data)

    head = HEADER_TERMINATOR.split(text, 1)[0]
    lines = LINE_BREAK.split(head)

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST LINE: METHOD SP TARGET SP VERSION
    # ─────────────────────────────────────────────────────────────────────
    parts = lines[0].split(" ")
    method = parts[0] if len(parts) >= 2 else ""
    target = parts[1] if len(parts) >= 2 else ""
    version = parts[2] if len(parts) >= 3 else ""
    path = target.split("?", 1)[0]

    # ─────────────────────────────────────────────────────────────────────
    # HEADERS: "Name: value", names folded to lowercase
    # ─────────────────────────────────────────────────────────────────────
    headers: Dict[str, str] = {}
    for line in lines[1:]:
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        headers[name.strip().lower()] = value.strip()

    return HTTPRequest(
        text=text,
        method=method,
        path=path,
        version=version,
        headers=headers,
        client_address=client_address,
    )
