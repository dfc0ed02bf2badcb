from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, NamedTuple


class Unit(Enum):
    LINES = "lines"
    BYTES = "bytes"


class Anchor(Enum):
    END = "end"        # last N units
    START = "start"    # from unit N to the end


class TailError(RuntimeError):
    """Base class for every error raised by fasttail."""
    pass


class InvalidMode(TailError, ValueError):
    """Raised when a count or offset cannot be turned into a Mode."""
    pass


class SourceUnavailable(TailError):
    """Raised when a source cannot be opened."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class SourceError(TailError):
    """Raised when reading or seeking a source fails mid-stream."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class UnsupportedAddressing(SourceError):
    """Raised when a mode needs a total that a single-pass source cannot give."""
    pass


@dataclass(frozen=True, slots=True)
class Mode:
    unit: ClassVar[Unit]
    anchor: ClassVar[Anchor]

    @property
    def needs_total(self) -> bool:
        return self.anchor is Anchor.END

    @property
    def value(self) -> int:
        """The count for last-N modes, the 1-based start for from-N modes."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class LastLines(Mode):
    count: int
    unit: ClassVar[Unit] = Unit.LINES
    anchor: ClassVar[Anchor] = Anchor.END

    def __post_init__(self):
        _check_non_negative("line count", self.count)

    @property
    def value(self) -> int:
        return self.count


@dataclass(frozen=True, slots=True)
class LastBytes(Mode):
    count: int
    unit: ClassVar[Unit] = Unit.BYTES
    anchor: ClassVar[Anchor] = Anchor.END

    def __post_init__(self):
        _check_non_negative("byte count", self.count)

    @property
    def value(self) -> int:
        return self.count


@dataclass(frozen=True, slots=True)
class FromLine(Mode):
    start: int
    unit: ClassVar[Unit] = Unit.LINES
    anchor: ClassVar[Anchor] = Anchor.START

    def __post_init__(self):
        _check_non_negative("line offset", self.start)

    @property
    def value(self) -> int:
        return self.start


@dataclass(frozen=True, slots=True)
class FromByte(Mode):
    start: int
    unit: ClassVar[Unit] = Unit.BYTES
    anchor: ClassVar[Anchor] = Anchor.START

    def __post_init__(self):
        _check_non_negative("byte offset", self.start)

    @property
    def value(self) -> int:
        return self.start


def _check_non_negative(what: str, n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidMode(f"{what} must be an integer, got {n!r}")
    if n < 0:
        raise InvalidMode(f"{what} must be non-negative, got {n}")


class Totals(NamedTuple):
    lines: int
    bytes: int


@dataclass(slots=True)
class SourceResult:
    name: str
    success: bool
    error: str | None
    bytes_written: int         # filled by the extractor
