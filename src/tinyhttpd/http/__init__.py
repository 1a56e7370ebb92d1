"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST LINE (request.py)                                           │
    │ "GET /index.html HTTP/1.1"  →  RequestLine(GET, "/index.html", ...) │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)                                      │
    │ 200, 400, 404, 405, 418, 500                                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ CONTENT TYPES (mime_types.py)                                       │
    │ "html" → "text/html", unknown extension → UnsupportedMediaType      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py), WRITER (writer.py, imported directly)       │
    │ HTTPResponse → bytes, with optional fault injection                 │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import Method, RequestLine, RequestParseError, parse_request_line
from .response import (
    HTTPResponse,
    bare,
    content,
    ok,
    bad_request,
    not_found,
    method_not_allowed,
    internal_error,
)
from .status_codes import HTTPStatus
from .mime_types import (
    ContentTypeMap,
    UnsupportedMediaType,
    BASIC_CONTENT_TYPES,
    EXTENDED_CONTENT_TYPES,
    file_extension,
    get_content_type_map,
    get_mime_type,
)

__all__ = [
    # Request parsing
    "Method",
    "RequestLine",
    "RequestParseError",
    "parse_request_line",

    # Responses
    "HTTPResponse",
    "bare",
    "content",
    "ok",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Status codes
    "HTTPStatus",

    # Content types
    "ContentTypeMap",
    "UnsupportedMediaType",
    "BASIC_CONTENT_TYPES",
    "EXTENDED_CONTENT_TYPES",
    "file_extension",
    "get_content_type_map",
    "get_mime_type",
]
