"""I/O layer for fasttail - turns names into sources the engine can read."""

# Re-export these for import convenience
from .base import Source, SourceKind, READ_CHUNK_SIZE
from .local import LocalSource, StreamSource, open_local_source, open_stdin, STDIN_NAME
from .http_sync import HTTPSource, open_http_source


def open_source(source, name=None):
    """Factory function to create the appropriate Source for a name or stream."""
    if hasattr(source, 'read'):  # BinaryIO
        return open_local_source(source, name=name)

    source_str = str(source)
    if source_str == "-":
        return open_stdin()
    if source_str.startswith(('http://', 'https://')):
        return open_http_source(source_str)
    return open_local_source(source, name=name)
