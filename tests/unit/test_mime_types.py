"""
Unit tests for content type tables.
"""

import pytest

from tinyhttpd.http.mime_types import (
    BASIC_CONTENT_TYPES,
    EXTENDED_CONTENT_TYPES,
    ContentTypeMap,
    UnsupportedMediaType,
    file_extension,
    get_content_type_map,
    get_mime_type,
)


class TestFileExtension:
    """Tests for file_extension()."""

    def test_last_segment(self):
        assert file_extension("/index.html") == "html"
        assert file_extension("/archive.tar.gz") == "gz"

    def test_no_dot_yields_whole_path(self):
        """Test the dotless edge case: the whole path is the 'extension'."""
        assert file_extension("/docs") == "/docs"
        assert file_extension("/") == "/"

    def test_dot_in_directory_name(self):
        """Test that the split is on the whole request path."""
        assert file_extension("/v1.2/readme") == "2/readme"

    def test_trailing_dot(self):
        assert file_extension("/readme.") == "/readme"


class TestContentTypeMap:
    """Tests for the built-in tables."""

    def test_basic_table(self):
        assert BASIC_CONTENT_TYPES.content_type("html") == "text/html"
        assert BASIC_CONTENT_TYPES.content_type("txt") == "text/plain"
        assert "css" not in BASIC_CONTENT_TYPES
        assert len(BASIC_CONTENT_TYPES) == 2

    def test_extended_table(self):
        assert EXTENDED_CONTENT_TYPES.content_type("html") == "text/html"
        assert EXTENDED_CONTENT_TYPES.content_type("css") == "text/css"
        assert EXTENDED_CONTENT_TYPES.content_type("txt") == "text/plain"
        assert EXTENDED_CONTENT_TYPES.content_type("jpg") == "image/jpg"
        assert EXTENDED_CONTENT_TYPES.content_type("jpeg") == "image/jpg"
        assert EXTENDED_CONTENT_TYPES.content_type("png") == "image/png"

    def test_lookup_is_case_insensitive(self):
        assert EXTENDED_CONTENT_TYPES.content_type("HTML") == "text/html"
        assert EXTENDED_CONTENT_TYPES.content_type("Png") == "image/png"

    def test_unknown_extension_raises(self):
        """Test that there is no fallback type."""
        with pytest.raises(UnsupportedMediaType) as exc_info:
            EXTENDED_CONTENT_TYPES.content_type("weird")

        assert exc_info.value.extension == "weird"

    def test_get_returns_default(self):
        assert EXTENDED_CONTENT_TYPES.get("weird") is None
        assert EXTENDED_CONTENT_TYPES.get("weird", "x/y") == "x/y"

    def test_custom_table(self):
        table = ContentTypeMap("custom", {"JSON": "application/json"})
        assert table.for_path("/data.json") == "application/json"


class TestLookupHelpers:
    """Tests for module-level helpers."""

    def test_get_mime_type(self):
        assert get_mime_type("/style.css") == "text/css"
        assert get_mime_type("/notes.txt", BASIC_CONTENT_TYPES) == "text/plain"

        with pytest.raises(UnsupportedMediaType):
            get_mime_type("/style.css", BASIC_CONTENT_TYPES)

    def test_get_content_type_map(self):
        assert get_content_type_map("basic") is BASIC_CONTENT_TYPES
        assert get_content_type_map("extended") is EXTENDED_CONTENT_TYPES

        with pytest.raises(ValueError):
            get_content_type_map("nope")
