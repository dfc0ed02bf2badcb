"""fasttail - print the last part of files, pipes and URLs without loading them."""

import logging

from .core.model import (                                              # re-export
    Mode, LastLines, LastBytes, FromLine, FromByte, Unit, Anchor, Totals, SourceResult,
    TailError, InvalidMode, SourceUnavailable, SourceError, UnsupportedAddressing,
)
from .core.mode import parse_mode
from .core.counter import count_units
from .core.engine import tail_source, tail_batch
from .io import open_source, LocalSource, StreamSource, HTTPSource, SourceKind

logging.getLogger(__name__).addHandler(logging.NullHandler())


def tail(source, mode: Mode, sink) -> int:
    """Tail a single source (path, URL, '-' or binary stream) into sink."""
    return tail_source(open_source(source), mode, sink)


__all__ = [
    "tail", "tail_source", "tail_batch", "count_units", "parse_mode",
    "Mode", "LastLines", "LastBytes", "FromLine", "FromByte", "Unit", "Anchor",
    "Totals", "SourceResult",
    "open_source", "LocalSource", "StreamSource", "HTTPSource", "SourceKind",
    "TailError", "InvalidMode", "SourceUnavailable", "SourceError", "UnsupportedAddressing",
]
