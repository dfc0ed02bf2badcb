
"""CLI implementation for fasttail."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from . import tail_batch, parse_mode
from .core.model import InvalidMode, SourceResult
from .io.http_sync import close_global_session

app = typer.Typer(add_completion=False, help="Print the last part of files, pipes and URLs.")


def _detach_stdout() -> None:
    """Point stdout at /dev/null so the interpreter's final flush does not fail again."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)


def iter_sources(files: Optional[list[str]]) -> list[str]:
    """Get list of sources from files argument, defaulting to stdin."""
    if files:
        return list(files)
    return ["-"]


@app.command()
def main(
    files: list[str] = typer.Argument(None, help="Files or URLs to read, or '-' for stdin"),
    lines: str = typer.Option("10", "-n", "--lines", help="Last N lines, or +N to start at line N"),
    bytes: Optional[str] = typer.Option(None, "-c", "--bytes", help="Last N bytes, or +N to start at byte N"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Never print headers giving file names"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    debug: bool = typer.Option(False, "--debug", help="Log what the engine does to stderr"),
):
    """Print the last 10 lines of each FILE; with more than one, precede each with a header."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(levelname)s %(name)s: %(message)s")

    try:
        mode = parse_mode(lines=lines, bytes=bytes)
    except InvalidMode as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    sources = iter_sources(files)

    # open output sink
    sink = open(output, "wb") if output else typer.get_binary_stream("stdout")
    results: list[SourceResult] = []
    try:
        try:
            results = tail_batch(sources, mode, sink, quiet=quiet)
            sink.flush()
        finally:
            if output:
                sink.close()
            close_global_session()
    except BrokenPipeError:
        # the reader went away (`fasttail big.log | head -1`), nothing left to do
        _detach_stdout()
        raise typer.Exit(code=0)
    except OSError as e:
        target = output or "standard output"
        typer.echo(f"fasttail: error writing {target}: {e.strerror or e}", err=True)
        raise typer.Exit(code=1)

    for res in results:
        if not res.success:
            typer.echo(f"fasttail: {res.error}", err=True)

    # exit code
    if any(not r.success for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
