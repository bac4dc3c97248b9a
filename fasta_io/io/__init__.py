"""Low-level stream helpers for fasta_io."""

from .linereader import StreamLineReader
from .streams import GZIP_SUFFIXES, is_gzip_path, open_input, open_output

__all__ = [
    "GZIP_SUFFIXES",
    "StreamLineReader",
    "is_gzip_path",
    "open_input",
    "open_output",
]
