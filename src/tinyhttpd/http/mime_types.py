"""
=============================================================================
CONTENT TYPE TABLES
=============================================================================

Maps file extensions to the MIME type sent in the Content-Type header.

Unlike a general-purpose server there is NO fallback type. An extension
that is not in the table is an error for that request:

    get_mime_type("notes.txt")     → "text/plain"
    get_mime_type("style.weird")   → UnsupportedMediaType

Two tables ship with the server:

    ┌────────────┬─────────────┬──────────────────┐
    │ Extension  │ basic       │ extended         │
    ├────────────┼─────────────┼──────────────────┤
    │ html       │ text/html   │ text/html        │
    │ txt        │ text/plain  │ text/plain       │
    │ css        │     -       │ text/css         │
    │ jpg, jpeg  │     -       │ image/jpg        │
    │ png        │     -       │ image/png        │
    └────────────┴─────────────┴──────────────────┘

The extension is taken from the REQUESTED path, not from the file that
ends up being read. "/docs" has no dot, so its "extension" is the whole
path "/docs", which is never in a table.

=============================================================================
"""

from typing import Dict, Mapping, Optional

from .request import split_fields


class UnsupportedMediaType(LookupError):
    """Raised when an extension has no entry in the content type table."""

    def __init__(self, extension: str):
        super().__init__(f"Cannot serve file of type {extension!r}")
        self.extension = extension


def file_extension(path: str) -> str:
    """
    Get the extension token of a request path.

    This is the last dot-separated segment. A path without a dot yields
    the whole path.

        >>> file_extension("/index.html")
        'html'
        >>> file_extension("/docs")
        '/docs'
        >>> file_extension("/archive.tar.gz")
        'gz'
    """
    segments = split_fields(path, ".")
    return segments[-1] if segments else ""


class ContentTypeMap:
    """
    Immutable extension → MIME type lookup.

    Extensions are stored without the dot and matched lower-cased.
    """

    def __init__(self, name: str, types: Mapping[str, str]):
        self.name = name
        self._types: Dict[str, str] = {ext.lower(): mime for ext, mime in types.items()}

    def __contains__(self, extension: str) -> bool:
        return extension.lower() in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"ContentTypeMap({self.name!r}, {len(self)} types)"

    def get(self, extension: str, default: Optional[str] = None) -> Optional[str]:
        """Look up an extension, returning default when it is unknown."""
        return self._types.get(extension.lower(), default)

    def content_type(self, extension: str) -> str:
        """
        Look up an extension.

        Raises:
            UnsupportedMediaType: If the extension is not in the table.
        """
        mime_type = self.get(extension)
        if mime_type is None:
            raise UnsupportedMediaType(extension)
        return mime_type

    def for_path(self, path: str) -> str:
        """Content type for a request path (see file_extension)."""
        return self.content_type(file_extension(path))


BASIC_CONTENT_TYPES = ContentTypeMap("basic", {
    "html": "text/html",
    "txt": "text/plain",
})

EXTENDED_CONTENT_TYPES = ContentTypeMap("extended", {
    "html": "text/html",
    "css": "text/css",
    "txt": "text/plain",
    "jpg": "image/jpg",
    "jpeg": "image/jpg",
    "png": "image/png",
})

CONTENT_TYPE_TABLES = {
    BASIC_CONTENT_TYPES.name: BASIC_CONTENT_TYPES,
    EXTENDED_CONTENT_TYPES.name: EXTENDED_CONTENT_TYPES,
}


def get_content_type_map(name: str) -> ContentTypeMap:
    """
    Get a built-in content type table by name.

    Raises:
        ValueError: If no table has that name.
    """
    try:
        return CONTENT_TYPE_TABLES[name]
    except KeyError:
        choices = ", ".join(sorted(CONTENT_TYPE_TABLES))
        raise ValueError(f"Unknown content type table {name!r} (choose from {choices})") from None


def get_mime_type(path: str, table: ContentTypeMap = EXTENDED_CONTENT_TYPES) -> str:
    """
    Get the MIME type for a request path.

    Raises:
        UnsupportedMediaType: If the path's extension is not in the table.
    """
    return table.for_path(path)
