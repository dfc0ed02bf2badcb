"""Tests for HTTP sources."""

import io

import pytest
from pytest_httpserver import HTTPServer

from fasttail.core.engine import tail_source
from fasttail.core.model import FromByte, FromLine, LastBytes, LastLines, SourceError, SourceUnavailable
from fasttail.io.base import SourceKind
from fasttail.io.http_sync import HTTPSource, close_global_session, open_http_source


class TestHTTPSource:
    """Test streamed HTTP sources against a local server."""

    def setup_method(self):
        """Set up test HTTP server."""
        self.test_data = b"".join(b"line %d\n" % i for i in range(1, 101))
        self.server = HTTPServer(host="127.0.0.1", port=0)
        self.server.expect_request("/log").respond_with_data(self.test_data)
        self.server.expect_request("/gone").respond_with_data("not here", status=404)
        self.server.start()
        self.base_url = f"http://127.0.0.1:{self.server.port}"

    def teardown_method(self):
        """Clean up test HTTP server."""
        if self.server.is_running():
            self.server.stop()
        close_global_session()

    def test_is_single_pass(self):
        source = open_http_source(f"{self.base_url}/log")
        assert isinstance(source, HTTPSource)
        assert source.kind is SourceKind.SINGLE_PASS
        assert source.name == f"{self.base_url}/log"

    def test_last_lines(self):
        out = io.BytesIO()
        tail_source(HTTPSource(f"{self.base_url}/log"), LastLines(2), out)
        assert out.getvalue() == b"line 99\nline 100\n"

    def test_last_bytes(self):
        out = io.BytesIO()
        tail_source(HTTPSource(f"{self.base_url}/log"), LastBytes(4), out)
        assert out.getvalue() == b"100\n"

    def test_from_line(self):
        out = io.BytesIO()
        tail_source(HTTPSource(f"{self.base_url}/log"), FromLine(99), out)
        assert out.getvalue() == b"line 99\nline 100\n"

    def test_from_byte(self):
        out = io.BytesIO()
        tail_source(HTTPSource(f"{self.base_url}/log"), FromByte(len(self.test_data) - 2), out)
        assert out.getvalue() == b"00\n"

    def test_read_respects_size(self):
        source = HTTPSource(f"{self.base_url}/log")
        with source.open() as fh:
            assert fh.read(7) == b"line 1\n"
            assert fh.read(7) == b"line 2\n"
            rest = fh.read()
            assert fh.read(10) == b""
        assert len(rest) == len(self.test_data) - 14

    def test_second_open_fails(self):
        source = HTTPSource(f"{self.base_url}/log")
        with source.open():
            pass
        with pytest.raises(SourceError, match="already consumed"):
            with source.open():
                pass

    def test_http_error_status(self):
        with pytest.raises(SourceUnavailable, match="status 404"):
            tail_source(HTTPSource(f"{self.base_url}/gone"), LastLines(1), io.BytesIO())

    def test_connection_refused(self):
        port = self.server.port
        self.server.stop()
        with pytest.raises(SourceUnavailable, match="GET request failed"):
            tail_source(HTTPSource(f"http://127.0.0.1:{port}/log"), LastLines(1), io.BytesIO())
