"""
Networking core: the listening socket and per-client connections.

    ┌──────────────────┐   accept()   ┌──────────────────┐
    │   SocketServer   │ ───────────► │    Connection    │
    │  (listen, loop)  │              │ (read_line, send)│
    └──────────────────┘              └──────────────────┘
"""

from .connection import Connection, ConnectionState, RequestLineTooLong
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "RequestLineTooLong",
    "SocketServer",
]
