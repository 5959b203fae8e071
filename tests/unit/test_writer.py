"""
Unit tests for the ResponseWriter and status lines.
"""

import logging

import pytest

from serverkit.http.status_codes import HTTPStatus, status_line


class TestResponseWriter:
    """Tests for the single commit point."""

    def test_write_header_commits_once(self, writer, start_response):
        writer.headers["X-One"] = "1"
        writer.write_header(404)

        assert writer.committed
        assert start_response.calls == [("404 Not Found", [("X-One", "1")])]

    def test_second_write_header_ignored(self, writer, start_response, caplog):
        """Test that the first status wins and the extra call is logged."""
        writer.write_header(200)
        with caplog.at_level(logging.WARNING, logger="serverkit.handler"):
            writer.write_header(500)

        assert len(start_response.calls) == 1
        assert writer.status == 200
        assert "Superfluous" in caplog.text

    def test_headers_after_commit_not_sent(self, writer, start_response):
        writer.write_header(200)
        writer.headers["X-Late"] = "1"

        assert "x-late" not in start_response.headers

    def test_write_commits_200(self, writer, start_response):
        """Test that writing without a status sends 200 first."""
        written = writer.write("hi")

        assert written == 2
        assert start_response.status == "200 OK"
        assert writer.chunks == [b"hi"]

    def test_body_joins_chunks(self, writer):
        writer.write(b"a")
        writer.write(bytearray(b"b"))
        writer.write("c")

        assert writer.body == b"abc"

    def test_header_set_replaces_case_insensitively(self, writer, start_response):
        writer.headers["Content-Type"] = "text/plain"
        writer.headers["content-type"] = "text/html"
        writer.write_header(200)

        assert start_response.calls[0][1] == [("content-type", "text/html")]


class TestStatusLine:
    """Tests for WSGI status line formatting."""

    def test_known_codes(self):
        assert status_line(200) == "200 OK"
        assert status_line(HTTPStatus.FOUND) == "302 Found"
        assert status_line(500) == "500 Internal Server Error"

    def test_unknown_code(self):
        assert status_line(299) == "299 Unknown"

    @pytest.mark.parametrize("code", [0, 99, 600])
    def test_out_of_range(self, code):
        with pytest.raises(ValueError):
            status_line(code)

    def test_categories(self):
        assert HTTPStatus.FOUND.is_redirect
        assert HTTPStatus.NOT_FOUND.is_error
        assert not HTTPStatus.OK.is_error
