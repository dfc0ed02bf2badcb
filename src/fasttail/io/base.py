"""Base protocols and shared types for the I/O layer."""

from contextlib import AbstractContextManager
from enum import Enum
from typing import BinaryIO, Protocol, runtime_checkable


READ_CHUNK_SIZE = 64 * 1024  # 64 KB


class SourceKind(Enum):
    REOPENABLE = "reopenable"     # can be read again from the start
    SINGLE_PASS = "single-pass"   # consumed exactly once


@runtime_checkable
class Source(Protocol):
    """Protocol for anything the engine can tail."""

    name: str
    kind: SourceKind

    def open(self) -> AbstractContextManager[BinaryIO]:
        """Return a context manager over a binary handle positioned at the start.
        A single-pass source may only be opened once → raise SourceError.
        """
        ...
