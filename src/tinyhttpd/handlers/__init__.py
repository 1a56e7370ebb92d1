"""
Request handlers.

A handler takes the raw request line and returns an HTTPResponse:

    handler.handle("GET /index.html HTTP/1.1")  →  HTTPResponse(200, ...)
"""

from .static import StaticFileHandler, serve_static

__all__ = [
    "StaticFileHandler",
    "serve_static",
]
