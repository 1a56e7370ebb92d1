"""
=============================================================================
HTTP RESPONSE
=============================================================================

Every response this server writes has the same shape:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                 ← status line                 │
    │    Content-Length: 2\r\n               ← zero or more header lines   │
    │    Content-Type: text/html\r\n            written verbatim, in order │
    │    \r\n                                ← blank line                  │
    │    hi                                  ← optional body bytes         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing is added automatically: no Date, no Server, no Connection. A
"bare" response is just the status line and the blank line. Headers are
an ordered list rather than a dict so the order they were added in is the
order they go out on the wire.

The connection is always closed by the caller after one response, so
Content-Length is informational. When present it is the BYTE length of
the body.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .status_codes import HTTPStatus


CRLF = "\r\n"


@dataclass
class HTTPResponse:
    """
    A response to be written to the client.

    Attributes:
        status: HTTP status code.
        headers: Raw header lines ("Name: value"), written in order.
        body: Body bytes, or None for no body.
        version: HTTP version for the status line.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: List[str] = field(default_factory=list)
    body: Optional[bytes] = None
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def add_header(self, name: str, value: Union[str, int]) -> "HTTPResponse":
        """
        Append a header line.

        Returns self for method chaining:
            response.add_header("Content-Length", 2).add_header("Content-Type", "text/html")
        """
        self.headers.append(f"{name}: {value}")
        return self

    def get_header(self, name: str) -> Optional[str]:
        """Get the value of the first header with this name (case-insensitive)."""
        prefix = name.lower() + ":"
        for line in self.headers:
            if line.lower().startswith(prefix):
                return line[len(prefix):].strip()
        return None

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding strings as UTF-8."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

            HTTP/1.1 200 OK\r\n
            <header line>\r\n   (for each header)
            \r\n
            <body>
        """
        lines = [self.status_line, *self.headers, ""]
        head = (CRLF.join(lines) + CRLF).encode("utf-8")
        if self.body:
            return head + self.body
        return head


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def bare(status: HTTPStatus) -> HTTPResponse:
    """A response with only a status line: no headers, no body."""
    return HTTPResponse(status=status)


def content(body: bytes, content_type: str) -> HTTPResponse:
    """
    200 OK with a body.

    Headers go out as Content-Length first, then Content-Type.
    """
    return (HTTPResponse(status=HTTPStatus.OK, body=body)
            .add_header("Content-Length", len(body))
            .add_header("Content-Type", content_type))


def ok() -> HTTPResponse:
    """Bare 200 OK."""
    return bare(HTTPStatus.OK)


def bad_request() -> HTTPResponse:
    """Bare 400 Bad Request."""
    return bare(HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """Bare 404 Not Found."""
    return bare(HTTPStatus.NOT_FOUND)


def method_not_allowed() -> HTTPResponse:
    """Bare 405 Method Not Allowed."""
    return bare(HTTPStatus.METHOD_NOT_ALLOWED)


def internal_error() -> HTTPResponse:
    """Bare 500 Internal Server Error."""
    return bare(HTTPStatus.INTERNAL_SERVER_ERROR)
