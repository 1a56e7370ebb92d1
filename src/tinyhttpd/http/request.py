"""
=============================================================================
REQUEST LINE PARSER
=============================================================================

Only the first line of an HTTP request is ever looked at. Headers and
body, if the client sends any, are ignored.

    GET /docs/index.html HTTP/1.1
    ─┬─ ────────┬─────── ───┬────
     │          │           │
   Method     Path       Version (kept, never used)

=============================================================================
PARSING RULES
=============================================================================

1. Split on single spaces. Trailing empty fields are dropped, so
   "GET / HTTP/1.1 " still has three tokens, but "GET  / HTTP/1.1"
   (double space) has four and is rejected.
2. Exactly three tokens, otherwise 400 Bad Request.
3. The method must be one of GET, POST, PUT, DELETE, matched exactly
   (case-sensitive), otherwise 400 Bad Request.

Whether the method is *allowed* is not decided here. That is the
handler's job (it answers 405 for anything but GET).

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class Method(str, Enum):
    """Request methods recognised by the parser."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RequestParseError(Exception):
    """
    Raised when a request line cannot be parsed.

    Carries the HTTP status that should be returned to the client,
    the same way the response layer expects it.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestLine:
    """A parsed request line."""

    method: Method
    path: str
    version: str

    def __str__(self) -> str:
        return f"{self.method.value} {self.path} {self.version}"


def split_fields(text: str, separator: str) -> List[str]:
    """
    Split text on a separator, dropping trailing empty fields.

    Leading and inner empty fields are kept:

        >>> split_fields("a b ", " ")
        ['a', 'b']
        >>> split_fields(" a", " ")
        ['', 'a']
        >>> split_fields("/readme.", ".")
        ['/readme']
    """
    fields = text.split(separator)
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def parse_request_line(line: str) -> RequestLine:
    """
    Parse a raw request line.

    Args:
        line: The request line without its line terminator.

    Returns:
        The parsed RequestLine.

    Raises:
        RequestParseError: If the line does not have exactly three tokens
            or the method is not recognised.
    """
    tokens = split_fields(line, " ")
    if len(tokens) != 3:
        raise RequestParseError(f"Malformed request line: {line!r}")

    method_token, path, version = tokens
    try:
        method = Method(method_token)
    except ValueError:
        raise RequestParseError(f"Unknown method: {method_token!r}") from None

    return RequestLine(method=method, path=path, version=version)
