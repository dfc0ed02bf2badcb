"""Local sources: filesystem paths and already-open binary streams."""

import io
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from ..core.model import SourceError, SourceUnavailable
from .base import SourceKind

logger = logging.getLogger(__name__)

STDIN_NAME = "standard input"


class LocalSource:
    """A file on disk. Reopenable: every open() is a fresh handle by name."""

    kind = SourceKind.REOPENABLE

    def __init__(self, path: Union[Path, str], name: Optional[str] = None):
        self.path = Path(path)
        self.name = name if name is not None else str(path)

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        try:
            fh = open(self.path, "rb")
        except OSError as e:
            raise SourceUnavailable(self.name, e.strerror or str(e)) from e
        with fh:
            yield fh

    def __repr__(self) -> str:
        return f"LocalSource({str(self.path)!r})"


class StreamSource:
    """An already-open binary stream, e.g. standard input.

    Seekable streams are reopenable: open() seeks back to where the stream
    was when the source was built. Anything else can be read only once.
    The stream is never closed here; it belongs to the caller.
    """

    def __init__(self, stream: BinaryIO, name: str = STDIN_NAME, kind: Optional[SourceKind] = None):
        if isinstance(stream, io.TextIOBase):
            stream = stream.buffer
        self._stream = stream
        self._start = 0
        self._consumed = False
        self.name = name

        if kind is None:
            kind = SourceKind.REOPENABLE if _seekable(stream) else SourceKind.SINGLE_PASS
        if kind is SourceKind.REOPENABLE:
            try:
                self._start = stream.tell()
            except OSError as e:
                raise SourceUnavailable(name, f"cannot reposition stream: {e}") from e
        self.kind = kind

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        if self.kind is SourceKind.REOPENABLE:
            try:
                self._stream.seek(self._start)
            except OSError as e:
                raise SourceError(self.name, str(e)) from e
        else:
            if self._consumed:
                raise SourceError(self.name, "single-pass source already consumed")
            self._consumed = True
        yield self._stream

    def __repr__(self) -> str:
        return f"StreamSource({self.name!r}, kind={self.kind.value})"


def _seekable(stream) -> bool:
    try:
        return bool(stream.seekable())
    except (AttributeError, ValueError, OSError):
        return False


def open_local_source(source: Union[Path, str, BinaryIO], name: Optional[str] = None):
    """Create a source for a path or a binary stream."""
    if hasattr(source, "read"):
        name = name or getattr(source, "name", None)
        return StreamSource(source, name=str(name) if name else "<stream>")
    return LocalSource(source, name=name)


def open_stdin(stream: Optional[BinaryIO] = None) -> StreamSource:
    """Wrap standard input, or `stream` standing in for it."""
    logger.debug("Reading standard input")
    return StreamSource(sys.stdin.buffer if stream is None else stream, name=STDIN_NAME)
