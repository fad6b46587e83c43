"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: read one request, send one response,
close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

A single recv() can return half a request line or a request plus part of
its body. One fixed-size read is therefore not a request. The connection
buffers chunks until it has:

    1. the blank line ending the headers: \r\n\r\n, or \n\n from
       bare-LF clients such as netcat, then
    2. Content-Length more bytes of body (without the header, whatever
       arrived together with the headers is the body)

    ┌─────────────────────────────────────────────────────────────────┐
    │  POST /products HTTP/1.1\r\n                                    │
    │  Content-Type: application/json\r\n                             │
    │  Content-Length: 28\r\n         ← how much body to wait for     │
    │  \r\n                           ← end of headers                │
    │  {"name":"Widget","price":10}   ← exactly 28 bytes              │
    └─────────────────────────────────────────────────────────────────┘

If the peer stops sending early (half-close or reset), whatever arrived is
returned and routed as-is.

Anything larger than max_request_size is refused with RequestTooLargeError,
which the server answers with 413 instead of truncating the request.

=============================================================================
CONNECTION STATES
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple
import uuid


logger = logging.getLogger(__name__)

# Earliest match ends the headers
HEADER_TERMINATORS = (b"\r\n\r\n", b"\n\n")


def find_header_end(buffer: bytes) -> Optional[Tuple[int, int]]:
    """
    Locate the blank line after the headers.

    Returns:
        (end of headers, start of body), or None if no blank line yet.
    """
    found = None
    for terminator in HEADER_TERMINATORS:
        index = buffer.find(terminator)
        if index != -1 and (found is None or index < found[0]):
            found = (index, index + len(terminator))
    return found


class RequestTooLargeError(Exception):
    """The request exceeded the configured max_request_size."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Request too large: {size} bytes (limit {limit})")
        self.size = size
        self.limit = limit


class ConnectionState(Enum):
    """Connection lifecycle states, used in logs."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Bytes requested per recv().
        timeout: Read timeout in seconds (None = block forever).
        max_request_size: Largest request accepted.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = 30.0
    max_request_size: int = 64 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete request.

        Returns:
            The request bytes, or None if the client closed the
            connection without sending anything.

        Raises:
            RequestTooLargeError: If the request exceeds max_request_size.
            TimeoutError: If the client stops sending before the request
                          is complete.
        """
        self.state = ConnectionState.READING

        try:
            # ─────────────────────────────────────────────────────────────
            # PHASE 1: headers
            # ─────────────────────────────────────────────────────────────
            bounds = find_header_end(self._buffer)
            while bounds is None:
                if not self._receive():
                    return self._buffer or None
                bounds = find_header_end(self._buffer)

            header_end, body_start = bounds

            # ─────────────────────────────────────────────────────────────
            # PHASE 2: body
            # ─────────────────────────────────────────────────────────────
            content_length = self._parse_content_length(self._buffer[:header_end])
            if content_length is None:
                # No length declared: the body is whatever came with the headers
                return self._buffer

            expected_size = body_start + content_length
            if expected_size > self.max_request_size:
                raise RequestTooLargeError(expected_size, self.max_request_size)

            while len(self._buffer) < expected_size:
                if not self._receive():
                    break

            return self._buffer[:expected_size]

        except socket.timeout:
            raise TimeoutError(f"Request read timeout after {len(self._buffer)} bytes")

    def _receive(self) -> bool:
        """
        Append one chunk to the buffer.

        Returns:
            False when the peer has stopped sending.
        """
        try:
            chunk = self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return False
        if not chunk:
            return False

        self._buffer += chunk
        if len(self._buffer) > self.max_request_size:
            raise RequestTooLargeError(len(self._buffer), self.max_request_size)
        return True

    def _parse_content_length(self, headers: bytes) -> Optional[int]:
        """
        Content-Length from raw header bytes.

        None when the header is missing or not a number.
        """
        header_str = headers.decode("utf-8", errors="replace").lower()
        for line in header_str.splitlines()[1:]:
            if line.startswith("content-length:"):
                try:
                    return max(0, int(line.split(":", 1)[1].strip()))
                except ValueError:
                    return None
        return None

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the full response with sendall().

        Returns:
            True if sent, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-body
        2. drain whatever the client still sends
        3. close() releases the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
