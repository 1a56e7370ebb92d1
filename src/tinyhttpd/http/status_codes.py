"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The closed set of status codes this server can answer with.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └───────── Status code

The table is deliberately small. A static file server that only serves
GET needs very few outcomes:

    ┌───────┬────────────────────────┬──────────────────────────────────┐
    │ Code  │ Phrase                 │ When                             │
    ├───────┼────────────────────────┼──────────────────────────────────┤
    │ 200   │ OK                     │ File, directory index, fallback  │
    │ 400   │ Bad Request            │ Malformed request line           │
    │ 404   │ Not Found              │ Nothing at that path             │
    │ 405   │ Method Not Allowed     │ POST / PUT / DELETE              │
    │ 418   │ I'm a Teapot           │ Fault injection only             │
    │ 500   │ Internal Server Error  │ Read failures in strict mode     │
    └───────┴────────────────────────┴──────────────────────────────────┘

IntEnum lets a status compare equal to its integer (HTTPStatus.OK == 200)
and format as a plain number in f-strings.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """HTTP status codes understood by the server."""

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    IM_A_TEAPOT = 418                   # RFC 2324, used by fault injection
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

        Returns:
            Human-readable description of the status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        """Check if this is a 4xx (client error) status code."""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a 5xx (server error) status code."""
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.IM_A_TEAPOT: "I'm a Teapot",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
