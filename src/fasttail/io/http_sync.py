"""HTTP source using requests. The body is streamed, so it is read only once."""

import logging
from contextlib import contextmanager
from typing import Iterator

import requests

from ..core.model import SourceError, SourceUnavailable
from .base import READ_CHUNK_SIZE, SourceKind

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30  # seconds, connect and per-read

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


class _ResponseReader:
    """read()-only view over a streamed response body."""

    def __init__(self, response: requests.Response):
        self._chunks = response.iter_content(chunk_size=READ_CHUNK_SIZE)
        self._buf = bytearray()

    def read(self, size: int = -1) -> bytes:
        try:
            while size < 0 or len(self._buf) < size:
                chunk = next(self._chunks, None)
                if chunk is None:
                    break
                self._buf += chunk
        except requests.RequestException as e:
            raise OSError(f"read failed: {e}") from e

        if size < 0:
            size = len(self._buf)
        data = bytes(self._buf[:size])
        del self._buf[:size]
        return data

    def seekable(self) -> bool:
        return False


class HTTPSource:
    """A remote file fetched with a single streamed GET."""

    kind = SourceKind.SINGLE_PASS

    def __init__(self, url: str, name: str | None = None):
        self.url = url
        self.name = name or url
        self._consumed = False

    @contextmanager
    def open(self) -> Iterator[_ResponseReader]:
        if self._consumed:
            raise SourceError(self.name, "single-pass source already consumed")
        self._consumed = True

        try:
            response = _get_session().get(self.url, stream=True, timeout=HTTP_TIMEOUT)
        except requests.RequestException as e:
            raise SourceUnavailable(self.name, f"GET request failed: {e}") from e

        with response:
            if response.status_code >= 400:
                raise SourceUnavailable(self.name, f"GET request failed with status {response.status_code}")
            logger.debug("GET %s -> %s", self.url, response.status_code)
            yield _ResponseReader(response)

    def __repr__(self) -> str:
        return f"HTTPSource({self.url!r})"


def open_http_source(url: str) -> HTTPSource:
    """Create an HTTP source."""
    return HTTPSource(url)


def close_global_session():
    """Close the global requests session. Call this at application shutdown."""
    global _session
    if _session is not None:
        _session.close()
        _session = None
