from __future__ import annotations
import codecs
import io
import logging
from pathlib import Path
from typing import Iterable, Sequence, Union

from ..io import STDIN_NAME, Source, SourceKind, open_source, open_stdin
from .counter import count_units
from .extractor import ByteSink, extract_forward, extract_window
from .model import Mode, SourceError, SourceResult, SourceUnavailable

logger = logging.getLogger(__name__)

HEADER_TEMPLATE = "==> {name} <==\n"

SourceLike = Union[str, Path, Source]


class TextSink:
    """Adapts a text stream to a ByteSink, decoding UTF-8 lossily.

    Multi-byte sequences split across chunks are reassembled; invalid bytes
    become U+FFFD.
    """

    def __init__(self, stream: io.TextIOBase):
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __call__(self, data: bytes) -> None:
        text = self._decoder.decode(data)
        if text:
            self._stream.write(text)

    def finish(self) -> None:
        """Flush a dangling partial sequence at the end of a source."""
        text = self._decoder.decode(b"", final=True)
        if text:
            self._stream.write(text)
        self._decoder.reset()


def as_byte_sink(sink) -> ByteSink:
    """Accept a binary stream, a text stream or a plain callable."""
    if isinstance(sink, io.TextIOBase):
        return TextSink(sink)
    if hasattr(sink, "write"):
        return sink.write
    if callable(sink):
        return sink
    raise TypeError(f"Cannot write to {sink!r}")


def tail_source(source: Source, mode: Mode, sink) -> int:
    """Write the part of `source` selected by `mode` to `sink`; return bytes written.

    Raises SourceUnavailable if the source cannot be opened and SourceError if
    reading fails part way. Every handle is closed before returning.
    """
    write = as_byte_sink(sink)
    try:
        if mode.needs_total and source.kind is SourceKind.REOPENABLE:
            logger.debug("%s: count then extract (%r)", source.name, mode)
            with source.open() as fh:
                totals = count_units(fh, source.name)
            # never trust the counting cursor, reacquire from the start
            with source.open() as fh:
                return extract_forward(fh, mode, write, totals=totals, name=source.name)

        if mode.needs_total:
            logger.debug("%s: bounded window (%r)", source.name, mode)
            with source.open() as fh:
                return extract_window(fh, mode, write, name=source.name)

        logger.debug("%s: forward scan (%r)", source.name, mode)
        with source.open() as fh:
            return extract_forward(fh, mode, write, name=source.name)
    finally:
        if isinstance(write, TextSink):
            write.finish()


def _display_name(item: SourceLike) -> str:
    if isinstance(item, Source):
        return item.name
    if str(item) == "-":
        return STDIN_NAME
    return str(item)


def _resolve(item: SourceLike, stdin) -> Source:
    if isinstance(item, Source):
        return item
    if stdin is not None and str(item) == "-":
        return open_stdin(stdin)
    return open_source(item)


def _run_one(item: SourceLike, mode: Mode, write: ByteSink, stdin=None) -> SourceResult:
    name = _display_name(item)
    try:
        source = _resolve(item, stdin)
        n = tail_source(source, mode, write)
    except (SourceUnavailable, SourceError) as e:
        logger.warning("Failed to tail %s: %s", name, e.reason)
        return SourceResult(name=name, success=False, error=str(e), bytes_written=0)
    return SourceResult(name=name, success=True, error=None, bytes_written=n)


def tail_batch(sources: Sequence[SourceLike] | Iterable[SourceLike], mode: Mode, sink, *,
               quiet: bool = False, stdin=None) -> list[SourceResult]:
    """Tail each source in order, with `==> name <==` headers when there are several.

    A failing source is recorded in its result and the batch carries on.
    Errors raised by the sink are not source failures and propagate.
    `stdin`, if given, is the binary stream read for "-".
    """
    items = list(sources)
    write = as_byte_sink(sink)
    show_headers = not quiet and len(items) > 1

    results: list[SourceResult] = []
    for num, item in enumerate(items):
        if show_headers:
            write(HEADER_TEMPLATE.format(name=_display_name(item)).encode("utf-8"))
        results.append(_run_one(item, mode, write, stdin))
        if show_headers and num + 1 < len(items):
            write(b"\n")
    return results
