from __future__ import annotations
import re

from .model import FromByte, FromLine, InvalidMode, LastBytes, LastLines, Mode

# "+N" anchors at the start, "N" or "-N" anchors at the end
_COUNT_RE = re.compile(r"^([+-]?)([0-9]+)$")


def parse_mode(lines: str | None = "10", bytes: str | None = None) -> Mode:
    """Turn raw -n/-c values into a Mode. A byte count wins over a line count."""
    if bytes is not None:
        sign, n = _split(bytes, "byte")
        return FromByte(n) if sign == "+" else LastBytes(n)
    if lines is None:
        lines = "10"
    sign, n = _split(lines, "line")
    return FromLine(n) if sign == "+" else LastLines(n)


def _split(raw: str, unit: str) -> tuple[str, int]:
    m = _COUNT_RE.match(raw.strip())
    if not m:
        raise InvalidMode(f"illegal {unit} count -- {raw}")
    return m.group(1), int(m.group(2))
