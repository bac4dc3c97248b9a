"""Exception types raised while reading or writing FASTA data."""

from __future__ import annotations


class FastaError(RuntimeError):
    """Base error for FASTA reading and writing failures."""


class FastaFormatError(FastaError, ValueError):
    """Raised when input or output violates the FASTA grammar."""


class EmptyInputError(FastaError):
    """Raised when a FASTA source contains no data at all."""


def entry_context(entry: int) -> str:
    """Return the suffix used to locate an error in the input."""

    return f"(entry {entry} of FASTA input)"


__all__ = ["FastaError", "FastaFormatError", "EmptyInputError", "entry_context"]
