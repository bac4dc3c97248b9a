"""Opening FASTA sources and sinks, with transparent gzip handling."""

from __future__ import annotations

import gzip
import io
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Union

from ..config import DEFAULT_COMPRESS_LEVEL

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
GZIP_SUFFIXES = (".gz",)

PathLike = Union[str, Path]


def is_gzip_path(path: PathLike) -> bool:
    """Return True when the file name carries a compressed suffix."""

    return str(path).lower().endswith(GZIP_SUFFIXES)


class _OwningGzipFile(gzip.GzipFile):
    """GzipFile that also closes the handle it decompresses."""

    def __init__(self, handle: BinaryIO) -> None:
        self._handle = handle
        super().__init__(fileobj=handle, mode="rb")

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._handle.close()


def has_gzip_magic(handle: BinaryIO) -> bool:
    """Return True when a buffered handle starts with the gzip magic number.

    Only peeks, so nothing is consumed from pipes or FIFOs.
    """

    return handle.peek(len(GZIP_MAGIC))[: len(GZIP_MAGIC)] == GZIP_MAGIC


def open_input(path: PathLike) -> BinaryIO:
    """Open a FASTA file once for binary reading, decompressing gzip input."""

    handle = open(path, "rb")
    try:
        compressed = has_gzip_magic(handle)
    except BaseException:
        handle.close()
        raise
    if compressed:
        logger.debug("Opening %s as gzip input", path)
        return _OwningGzipFile(handle)
    logger.debug("Opening %s as plain input", path)
    return handle


def open_output(path: PathLike, mode: str = "w", compress_level: int = DEFAULT_COMPRESS_LEVEL) -> BinaryIO:
    """Open a FASTA file for binary writing; ``.gz`` names are compressed."""

    if mode not in {"w", "a", "x"}:
        raise ValueError(f"Unsupported output mode: {mode!r}")
    if is_gzip_path(path):
        logger.debug("Opening %s as gzip output (level %s)", path, compress_level)
        return gzip.open(path, mode + "b", compresslevel=compress_level)
    logger.debug("Opening %s as plain output", path)
    return open(path, mode + "b")


def default_output():
    """Return the binary standard output stream, or the text one if unavailable."""

    return getattr(sys.stdout, "buffer", sys.stdout)


def is_text_stream(stream) -> bool:
    return isinstance(stream, io.TextIOBase)


__all__ = [
    "GZIP_MAGIC",
    "GZIP_SUFFIXES",
    "default_output",
    "has_gzip_magic",
    "is_gzip_path",
    "is_text_stream",
    "open_input",
    "open_output",
]
