"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns one request line into one response by looking the path up under a
content root.

=============================================================================
DECISION FLOW
=============================================================================

    "GET /docs HTTP/1.1"
        │
        ├── not exactly 3 tokens ──────────────────────────► 400
        ├── method not GET/POST/PUT/DELETE ────────────────► 400
        ├── method is not GET ─────────────────────────────► 405
        │
        ├── resolve content_root / path
        │     ├── escapes content_root ────────────────────► 404
        │     └── does not exist ──────────────────────────► 404
        │
        ├── regular file
        │     ├── read ok, extension known ────────────────► 200 + body
        │     └── read error / unknown extension ──────────► failure (*)
        │
        ├── directory
        │     ├── no index.html ───────────────────────────► 200, empty
        │     ├── index.html read ok ──────────────────────► 200 + body
        │     └── index.html read error ───────────────────► failure (*)
        │
        └── anything else (socket, fifo, ...) ─────────────► 200, empty

    (*) failure = bare 200 by default, 500 when strict_errors is on.
        Either way the exception is logged with its traceback.

=============================================================================
KNOWN QUIRKS (kept on purpose, covered by tests)
=============================================================================

1. The extension comes from the REQUESTED path, not the file that is read.
   "/notes.txt" is looked up as "txt" even if it resolves through a
   symlink to "notes.md".
2. An unknown extension answers 200 with an empty body, not an error
   status, unless strict_errors is enabled.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

Request paths are joined onto the content root and then resolved:

    content_root = /srv/content
    GET /../../etc/passwd
        → /srv/content/../../etc/passwd
        → resolve() → /etc/passwd
        → not inside /srv/content → 404

The check uses the resolved path, so ".." segments and symlinks that
point outside the root are both refused.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..http.mime_types import (
    ContentTypeMap,
    EXTENDED_CONTENT_TYPES,
    UnsupportedMediaType,
    file_extension,
)
from ..http.request import Method, RequestParseError, parse_request_line
from ..http.response import (
    HTTPResponse,
    bad_request,
    content,
    internal_error,
    method_not_allowed,
    not_found,
    ok,
)


logger = logging.getLogger(__name__)


INDEX_CONTENT_TYPE = "text/html"


class StaticFileHandler:
    """
    Serves files from a content root.

    Usage:
        handler = StaticFileHandler("./content")
        response = handler.handle("GET /index.html HTTP/1.1")
    """

    def __init__(
        self,
        root_dir: Union[str, Path] = "./content",
        content_types: ContentTypeMap = EXTENDED_CONTENT_TYPES,
        index_file: str = "index.html",
        strict_errors: bool = False,
    ):
        """
        Initialize the handler.

        Args:
            root_dir: Directory to serve files from. All served files
                must resolve to somewhere inside it.
            content_types: Extension → MIME type table for regular files.
            index_file: File served for directory requests.
            strict_errors: Answer read failures and unknown extensions
                with 500 instead of an empty 200.
        """
        self.root_dir = Path(root_dir).resolve()
        self.content_types = content_types
        self.index_file = index_file
        self.strict_errors = strict_errors

    def handle(self, line: str) -> HTTPResponse:
        """
        Handle one raw request line.

        Never raises for bad input: every outcome is a response.
        """
        try:
            request = parse_request_line(line)
        except RequestParseError as e:
            logger.info(f"Bad request: {e}")
            return bad_request()

        if request.method is not Method.GET:
            logger.debug(f"Method {request.method.value} not allowed")
            return method_not_allowed()

        target = self.resolve(request.path)
        if target is None:
            return not_found()

        extension = file_extension(request.path)

        try:
            exists = target.exists()
        except OSError:
            exists = False
        if not exists:
            return not_found()

        if target.is_file():
            return self._serve_file(target, extension)

        if target.is_dir():
            return self._serve_index(target)

        return ok()

    def resolve(self, request_path: str) -> Optional[Path]:
        """
        Map a request path to a filesystem path under the content root.

        Returns:
            The resolved path, or None if it would fall outside the
            content root (or cannot be represented on this filesystem).
        """
        candidate = self.root_dir / request_path.lstrip("/")
        try:
            full_path = candidate.resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot resolve {request_path!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {request_path!r}")
            return None
        return full_path

    def _serve_file(self, path: Path, extension: str) -> HTTPResponse:
        try:
            body = path.read_bytes()
            content_type = self.content_types.content_type(extension)
        except (OSError, UnsupportedMediaType):
            return self._failure(path)
        return content(body, content_type)

    def _serve_index(self, directory: Path) -> HTTPResponse:
        index_path = directory / self.index_file
        if not index_path.exists():
            return ok()
        try:
            body = index_path.read_bytes()
        except OSError:
            return self._failure(index_path)
        return content(body, INDEX_CONTENT_TYPE)

    def _failure(self, path: Path) -> HTTPResponse:
        """Log the active exception and pick the degraded response."""
        logger.exception(f"Failed to serve {path}")
        if self.strict_errors:
            return internal_error()
        return ok()


def serve_static(root_dir: Union[str, Path], **kwargs) -> StaticFileHandler:
    """
    Create a static file handler.

    Convenience function:
        handler = serve_static("./content", strict_errors=True)
    """
    return StaticFileHandler(root_dir, **kwargs)
