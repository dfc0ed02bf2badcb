"""Tests for local sources."""

import io
import os
import tempfile
from pathlib import Path

import pytest

from fasttail.core.model import SourceError, SourceUnavailable
from fasttail.io.base import Source, SourceKind
from fasttail.io.local import LocalSource, StreamSource, open_local_source, open_stdin, STDIN_NAME


class TestLocalSource:
    """Test path-backed sources."""

    def test_reopen_gives_fresh_handles(self):
        with tempfile.NamedTemporaryFile() as f:
            f.write(b"0123456789")
            f.flush()

            source = LocalSource(f.name)
            assert source.kind is SourceKind.REOPENABLE

            with source.open() as fh:
                assert fh.read() == b"0123456789"
            assert fh.closed

            with source.open() as fh:
                assert fh.read(3) == b"012"

    def test_name_defaults_to_path(self, tmp_path):
        path = tmp_path / "x.log"
        assert LocalSource(path).name == str(path)
        assert LocalSource(path, name="alias").name == "alias"

    def test_missing_file(self, tmp_path):
        source = LocalSource(tmp_path / "nope")
        with pytest.raises(SourceUnavailable) as exc_info:
            with source.open():
                pass
        assert exc_info.value.reason == "No such file or directory"
        assert exc_info.value.name == str(tmp_path / "nope")

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read anything")
    def test_permission_denied(self, tmp_path):
        path = tmp_path / "secret"
        path.write_bytes(b"x")
        path.chmod(0)
        try:
            with pytest.raises(SourceUnavailable, match="Permission denied"):
                with LocalSource(path).open():
                    pass
        finally:
            path.chmod(0o600)

    def test_is_a_source(self, tmp_path):
        assert isinstance(LocalSource(tmp_path / "x"), Source)


class TestStreamSource:
    """Test already-open streams."""

    def test_seekable_stream_is_reopenable(self):
        bio = io.BytesIO(b"0123456789")
        source = StreamSource(bio, name="buf")
        assert source.kind is SourceKind.REOPENABLE

        with source.open() as fh:
            assert fh.read() == b"0123456789"
        with source.open() as fh:
            assert fh.read(2) == b"01"
        assert not bio.closed

    def test_single_pass_stream_opens_once(self):
        source = StreamSource(io.BytesIO(b"abc"), kind=SourceKind.SINGLE_PASS)
        with source.open() as fh:
            assert fh.read() == b"abc"
        with pytest.raises(SourceError, match="already consumed"):
            with source.open():
                pass

    def test_pipe_is_single_pass(self):
        r, w = os.pipe()
        os.write(w, b"piped\n")
        os.close(w)
        with os.fdopen(r, "rb") as pipe:
            source = StreamSource(pipe)
            assert source.kind is SourceKind.SINGLE_PASS
            with source.open() as fh:
                assert fh.read() == b"piped\n"

    def test_text_stream_uses_buffer(self):
        raw = io.BytesIO(b"bytes")
        text = io.TextIOWrapper(raw)
        source = StreamSource(text)
        with source.open() as fh:
            assert fh.read() == b"bytes"

    def test_default_name(self):
        assert StreamSource(io.BytesIO()).name == STDIN_NAME


class TestFactoryFunctions:

    def test_open_local_source_path(self, tmp_path):
        source = open_local_source(tmp_path / "f")
        assert isinstance(source, LocalSource)

    def test_open_local_source_stream(self):
        source = open_local_source(io.BytesIO(b"x"))
        assert isinstance(source, StreamSource)
        assert source.name == "<stream>"

    def test_open_local_source_file_object_keeps_name(self, tmp_path):
        path = tmp_path / "named.txt"
        path.write_bytes(b"x")
        with open(path, "rb") as fh:
            assert open_local_source(fh).name == str(path)

    def test_open_stdin(self, monkeypatch):
        fake = io.TextIOWrapper(io.BytesIO(b"from stdin\n"))
        monkeypatch.setattr("sys.stdin", fake)
        source = open_stdin()
        assert source.name == STDIN_NAME
        with source.open() as fh:
            assert fh.read() == b"from stdin\n"
