"""
Unit tests for HTTP responses and status codes.
"""

from tinyhttpd.http.response import (
    HTTPResponse,
    bad_request,
    bare,
    content,
    internal_error,
    method_not_allowed,
    not_found,
    ok,
)
from tinyhttpd.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"
        assert (HTTPResponse(status=HTTPStatus.IM_A_TEAPOT).status_line
                == "HTTP/1.1 418 I'm a Teapot")

    def test_bare_response_has_no_headers(self):
        """Test that nothing is added automatically."""
        assert ok().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_headers_are_written_in_order(self):
        """Test that header lines keep insertion order."""
        response = (HTTPResponse()
            .add_header("X-Two", "2")
            .add_header("X-One", "1"))

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\nX-Two: 2\r\nX-One: 1\r\n\r\n"

    def test_body_follows_blank_line(self):
        """Test body placement."""
        response = HTTPResponse(body=b"hello")
        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\nhello"

    def test_set_body_encodes_text(self):
        """Test that string bodies become UTF-8."""
        response = HTTPResponse().set_body("héllo")
        assert response.body == "héllo".encode("utf-8")

    def test_get_header_is_case_insensitive(self):
        response = HTTPResponse().add_header("Content-Type", "text/html")

        assert response.get_header("content-type") == "text/html"
        assert response.get_header("Content-Length") is None


class TestConvenienceFunctions:
    """Tests for convenience response constructors."""

    def test_content_sets_length_then_type(self):
        """Test that content() emits Content-Length before Content-Type."""
        response = content(b"hi", "text/html")

        assert response.status == HTTPStatus.OK
        assert response.headers == ["Content-Length: 2", "Content-Type: text/html"]
        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Length: 2\r\n"
            b"Content-Type: text/html\r\n"
            b"\r\n"
            b"hi"
        )

    def test_content_length_counts_bytes(self):
        """Test that multi-byte text is measured in bytes, not characters."""
        body = "héllo".encode("utf-8")
        assert content(body, "text/plain").get_header("Content-Length") == "6"

    def test_error_constructors(self):
        """Test the bare error responses."""
        assert bad_request().status == HTTPStatus.BAD_REQUEST
        assert not_found().status == HTTPStatus.NOT_FOUND
        assert method_not_allowed().status == HTTPStatus.METHOD_NOT_ALLOWED
        assert internal_error().status == HTTPStatus.INTERNAL_SERVER_ERROR

        for response in (bad_request(), not_found(), method_not_allowed(), internal_error()):
            assert response.headers == []
            assert response.body is None

    def test_bare(self):
        assert bare(HTTPStatus.IM_A_TEAPOT).to_bytes() == b"HTTP/1.1 418 I'm a Teapot\r\n\r\n"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_table_is_closed(self):
        """Test the full set of codes."""
        assert [int(s) for s in HTTPStatus] == [200, 400, 404, 405, 418, 500]

    def test_status_phrases(self):
        """Test that all statuses have phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.BAD_REQUEST.phrase == "Bad Request"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.METHOD_NOT_ALLOWED.phrase == "Method Not Allowed"
        assert HTTPStatus.IM_A_TEAPOT.phrase == "I'm a Teapot"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"

    def test_status_categories(self):
        """Test status category helpers."""
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.NOT_FOUND.is_client_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_server_error

        assert HTTPStatus.IM_A_TEAPOT.is_error
        assert not HTTPStatus.OK.is_error
