"""
Core networking: the sequential socket server and the connection wrapper.
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, RequestTooLargeError

__all__ = ["SocketServer", "Connection", "ConnectionState", "RequestTooLargeError"]
