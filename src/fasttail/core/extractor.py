from __future__ import annotations
import logging
import os
import sys
from collections import deque
from typing import BinaryIO, Callable

from ..io.base import READ_CHUNK_SIZE
from .model import Anchor, Mode, SourceError, Totals, Unit, UnsupportedAddressing

logger = logging.getLogger(__name__)

ByteSink = Callable[[bytes], object]


# ------------------------------------------------------------------ #
# forward scan: discard a computed prefix, copy the rest
# ------------------------------------------------------------------ #
def leading_units_to_skip(mode: Mode, totals: Totals | None = None, name: str = "<stream>") -> int:
    """How many leading lines/bytes to discard before copying. Saturates at 0."""
    if mode.anchor is Anchor.START:
        return max(mode.value - 1, 0)
    if totals is None:
        raise UnsupportedAddressing(name, f"{type(mode).__name__} needs a known total")
    total = totals.lines if mode.unit is Unit.LINES else totals.bytes
    return max(total - mode.value, 0)


def extract_forward(fh: BinaryIO, mode: Mode, sink: ByteSink, *, totals: Totals | None = None,
                    name: str = "<stream>", chunk_size: int = READ_CHUNK_SIZE) -> int:
    """Stream the selected region from a start-positioned handle in one pass.

    Only failures of `fh` become SourceError; whatever the sink raises is
    passed through untouched.
    """
    if mode.needs_total and mode.value == 0:
        return 0
    skip = leading_units_to_skip(mode, totals, name)
    logger.debug("%s: skipping %d %s", name, skip, mode.unit.value)

    if mode.unit is Unit.BYTES:
        _skip_bytes(fh, skip, name, chunk_size)
        return _copy_rest(fh, sink, name, chunk_size)

    rest = _skip_lines(fh, skip, name, chunk_size)
    if rest is None:  # ran out of lines
        return 0
    return _copy_rest(fh, sink, name, chunk_size, pending=rest, terminate=True)


def _read(fh: BinaryIO, size: int, name: str) -> bytes:
    try:
        return fh.read(size)
    except OSError as e:
        raise SourceError(name, e.strerror or str(e)) from e


def _skip_bytes(fh: BinaryIO, n: int, name: str, chunk_size: int) -> None:
    if n <= 0:
        return
    if _seekable(fh):
        # offsets past the end are clamped, seek() rejects ints wider than off_t
        try:
            here = fh.tell()
            end = fh.seek(0, os.SEEK_END)
            fh.seek(min(here + n, end))
        except OSError as e:
            raise SourceError(name, e.strerror or str(e)) from e
        return
    while n > 0:
        chunk = _read(fh, min(n, chunk_size), name)
        if not chunk:
            return
        n -= len(chunk)


def _skip_lines(fh: BinaryIO, n: int, name: str, chunk_size: int) -> bytes | None:
    """Consume n newlines; return what followed the last one in its chunk."""
    if n <= 0:
        return b""
    while chunk := _read(fh, chunk_size, name):
        found = chunk.count(b"\n")
        if found < n:
            n -= found
            continue
        pos = -1
        for _ in range(n):
            pos = chunk.index(b"\n", pos + 1)
        return chunk[pos + 1:]
    return None


def _copy_rest(fh: BinaryIO, sink: ByteSink, name: str, chunk_size: int, *,
               pending: bytes = b"", terminate: bool = False) -> int:
    written = 0
    last = b""
    if pending:
        sink(pending)
        written += len(pending)
        last = pending[-1:]
    while chunk := _read(fh, chunk_size, name):
        sink(chunk)
        written += len(chunk)
        last = chunk[-1:]
    if terminate and written and last != b"\n":
        sink(b"\n")
        written += 1
    return written


def _seekable(fh) -> bool:
    try:
        return bool(fh.seekable())
    except (AttributeError, ValueError, OSError):
        return False


# ------------------------------------------------------------------ #
# bounded window: last N units of a stream that can't be read twice
# ------------------------------------------------------------------ #
def extract_window(fh: BinaryIO, mode: Mode, sink: ByteSink, *,
                   name: str = "<stream>", chunk_size: int = READ_CHUNK_SIZE) -> int:
    """Keep at most `count` trailing units while reading, write them at EOF."""
    if not mode.needs_total:
        return extract_forward(fh, mode, sink, name=name, chunk_size=chunk_size)
    if mode.value == 0:
        return 0

    if mode.unit is Unit.BYTES:
        window = _tail_bytes(fh, mode.value, name, chunk_size)
        if window:
            sink(bytes(window))
        return len(window)

    written = 0
    lines = _tail_lines(fh, mode.value, name, chunk_size)
    for line in lines:
        sink(line)
        written += len(line)
    if lines and not lines[-1].endswith(b"\n"):
        sink(b"\n")
        written += 1
    return written


def _tail_bytes(fh: BinaryIO, count: int, name: str, chunk_size: int) -> bytearray:
    window = bytearray()
    while chunk := _read(fh, chunk_size, name):
        window += chunk
        if len(window) > count:
            del window[:len(window) - count]
    return window


def _tail_lines(fh: BinaryIO, count: int, name: str, chunk_size: int) -> deque[bytes]:
    # oldest line falls off the left; maxlen must fit a C ssize_t
    window: deque[bytes] = deque(maxlen=min(count, sys.maxsize))
    carry = bytearray()
    while chunk := _read(fh, chunk_size, name):
        start = 0
        while (nl := chunk.find(b"\n", start)) != -1:
            carry += chunk[start:nl + 1]
            window.append(bytes(carry))
            carry.clear()
            start = nl + 1
        carry += chunk[start:]
    if carry:
        window.append(bytes(carry))
    return window
