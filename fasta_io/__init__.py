"""Streaming FASTA reading and writing."""

from .errors import EmptyInputError, FastaError, FastaFormatError
from .reader import FastaReader, read_fasta
from .writer import FastaWriter, LINE_WIDTH, write_fasta, write_fasta_sequence

__version__ = "0.1.0"

__all__ = [
    "EmptyInputError",
    "FastaError",
    "FastaFormatError",
    "FastaReader",
    "FastaWriter",
    "LINE_WIDTH",
    "read_fasta",
    "write_fasta",
    "write_fasta_sequence",
    "__version__",
]
