"""
=============================================================================
TINYHTTPD - A SINGLE-THREADED STATIC FILE SERVER
=============================================================================

Serves files from a content directory over HTTP/1.1, one connection at a
time, one request per connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │  Client ──► SocketServer ──► Connection.read_line()                  │
    │                                   │                                  │
    │                                   ▼                                  │
    │                         StaticFileHandler.handle()                   │
    │                                   │                                  │
    │                                   ▼                                  │
    │                ResponseWriter (+ FaultInjector) ──► Client           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    from tinyhttpd import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(content_root="./content", port=8080))
    server.run()

Or from the shell:

    python -m tinyhttpd --root ./content --port 8080

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
