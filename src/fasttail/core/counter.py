from __future__ import annotations
import logging
from typing import BinaryIO

from ..io.base import READ_CHUNK_SIZE
from .model import SourceError, Totals

logger = logging.getLogger(__name__)


def count_units(fh: BinaryIO, name: str = "<stream>", *, chunk_size: int = READ_CHUNK_SIZE) -> Totals:
    """Count lines and bytes in one pass with a fixed-size buffer.

    A final fragment without a newline still counts as a line.
    """
    newlines = 0
    total = 0
    last = b""
    try:
        while chunk := fh.read(chunk_size):
            newlines += chunk.count(b"\n")
            total += len(chunk)
            last = chunk[-1:]
    except OSError as e:
        raise SourceError(name, e.strerror or str(e)) from e

    lines = newlines + (1 if total and last != b"\n" else 0)
    logger.debug("%s: %d lines, %d bytes", name, lines, total)
    return Totals(lines, total)
