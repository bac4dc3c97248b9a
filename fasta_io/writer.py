"""FASTA writer: an incremental validating formatter plus bulk helpers."""

from __future__ import annotations

import logging
import string
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Tuple, Union

from .config import DEFAULT_COMPRESS_LEVEL
from .errors import FastaFormatError, entry_context
from .io.streams import default_output, is_text_stream, open_output

logger = logging.getLogger(__name__)

LINE_WIDTH = 80
WHITESPACE = frozenset(string.whitespace)

Destination = Union[str, Path, BinaryIO, None]


def _as_char(value: Any, entry: int) -> str:
    if isinstance(value, int):
        value = chr(value)
    if not isinstance(value, str) or len(value) != 1:
        raise TypeError(f"expected a single character, got {value!r} {entry_context(entry)}")
    if not value.isascii():
        raise FastaFormatError(f"invalid (non-ASCII) character: {value!r} {entry_context(entry)}")
    return value


def _output_function(stream):
    if is_text_stream(stream):
        return stream.write
    write = stream.write
    return lambda text: write(text.encode("ascii"))


def _clean_description(description: Any, entry: int) -> str:
    if isinstance(description, (bytes, bytearray)):
        if not description.isascii():
            raise FastaFormatError(f"description must be ASCII {entry_context(entry)}")
        description = description.decode("ascii")
    description = str(description).strip()
    if not description.isascii():
        raise FastaFormatError(f"description must be ASCII {entry_context(entry)}")
    if not description:
        raise FastaFormatError(f"empty description {entry_context(entry)}")
    if "\n" in description or "\r" in description:
        raise FastaFormatError(f"newlines are not allowed within description {entry_context(entry)}")
    return description


def write_fasta_sequence(stream, sequence: Iterable[Any], entry: int, newline: bool = True) -> int:
    """Write sequence data wrapped at 80 columns and return the characters written.

    Whitespace is dropped; non-ASCII characters and '>' are rejected. No
    line break is written after the last line unless ``newline`` is set.
    """
    column = 0
    emit = _output_function(stream)
    written = 0
    for item in sequence:
        ch = _as_char(item, entry)
        if ch in WHITESPACE:
            continue
        if ch == ">":
            raise FastaFormatError(f"character '>' not allowed in sequence data {entry_context(entry)}")
        if column == LINE_WIDTH:
            emit("\n")
            column = 0
        emit(ch)
        column += 1
        written += 1
    if newline:
        emit("\n")
    return written


class FastaWriter:
    """Write well-formed FASTA, validating input one character at a time.

    ``dest`` is a path (``.gz`` names are compressed), an open stream, or
    ``None`` for standard output. Only paths are closed by the writer.

    Characters fed through :meth:`write` follow the FASTA grammar: the first
    non-blank character must be '>', the description ends at the first line
    break, whitespace inside sequence data is dropped and sequence lines are
    re-wrapped at 80 columns. A '>' directly after a line break in sequence
    data starts a new entry.
    """

    def __init__(
        self,
        dest: Destination = None,
        mode: str = "w",
        compress_level: int = DEFAULT_COMPRESS_LEVEL,
    ) -> None:
        if dest is None:
            self.name = "<stdout>"
            self._stream = default_output()
            self._own_stream = False
        elif isinstance(dest, (str, Path)):
            self.name = str(dest)
            self._stream = open_output(dest, mode, compress_level)
            self._own_stream = True
        else:
            self.name = getattr(dest, "name", repr(dest))
            self._stream = dest
            self._own_stream = False
        self._emit = _output_function(self._stream)
        self._in_seq = False
        self._at_start = True
        self._seq_chars = 0
        self._desc_chars = 0
        self._parsed_nl = False
        self._pos = 0
        self._entry = 1
        self.closed = False

    @property
    def entry(self) -> int:
        """1-based number of the entry currently being written."""
        return self._entry

    def _put(self, ch: str) -> None:
        if self._pos == LINE_WIDTH:
            if self._in_seq:
                self._emit("\n")
                self._pos = 0
            else:
                logger.warning("description line longer than 80 characters %s", entry_context(self._entry))
        self._emit(ch)
        self._pos += 1
        if self._in_seq:
            self._seq_chars += 1
        else:
            self._desc_chars += 1

    def _feed(self, item: Any) -> None:
        ch = _as_char(item, self._entry)
        if ch == "\n" and not self._at_start:
            self._parsed_nl = True
            if not self._in_seq:
                if self._desc_chars == 0:
                    raise FastaFormatError(f"empty description {entry_context(self._entry)}")
                self._emit("\n")
                self._pos = 0
                self._in_seq = True
        if ch in WHITESPACE and (self._at_start or self._in_seq or self._desc_chars == 0 or ch == "\r"):
            return
        if self._at_start:
            if ch != ">":
                raise FastaFormatError(f"no description given {entry_context(self._entry)}")
            self._at_start = False
            self._emit(ch)
            self._pos = 1
            return
        if self._parsed_nl and ch == ">":
            if self._seq_chars == 0:
                raise FastaFormatError(f"empty sequence data {entry_context(self._entry)}")
            self._emit("\n>")
            self._in_seq = False
            self._pos = 1
            self._entry += 1
            self._seq_chars = 0
            self._desc_chars = 0
            self._parsed_nl = False
            return
        if self._in_seq and ch == ">":
            raise FastaFormatError(f"character '>' not allowed in sequence data {entry_context(self._entry)}")
        self._put(ch)
        self._parsed_nl = False

    def write(self, data: Any) -> None:
        """Feed FASTA text to the writer.

        A one-character ``str`` or an ``int`` code point is fed as a single
        character with no line break added, so ``write("A")`` does not end
        the line. A longer ``str`` is fed character by character and then
        followed by a line break, so ``write("AC")`` does. Bytes and other
        iterables are fed item by item without a trailing line break.
        """
        if self.closed:
            raise ValueError("write to closed FastaWriter")
        if isinstance(data, str):
            if len(data) == 1:
                self._feed(data)
                return
            for ch in data:
                self._feed(ch)
            self._feed("\n")
            return
        if isinstance(data, int):
            self._feed(data)
            return
        for item in data:
            self._feed(item)

    def write_entry(self, description: Any, sequence: Iterable[Any]) -> None:
        """Write a complete entry, bypassing per-character sequence feeding."""
        if self.closed:
            raise ValueError("write to closed FastaWriter")
        upcoming = self._entry if self._at_start else self._entry + 1
        description = _clean_description(description, upcoming)
        if not self._at_start:
            self._feed("\n")
        self._feed(">")
        for ch in description:
            self._feed(ch)
        self._feed("\n")
        written = write_fasta_sequence(self._stream, sequence, self._entry, newline=False)
        self._seq_chars = written
        self._in_seq = True
        self._parsed_nl = False
        self._pos = (written - 1) % LINE_WIDTH + 1 if written else 0
        if not written:
            raise FastaFormatError(f"empty sequence data {entry_context(self._entry)}")

    def _finish(self) -> None:
        if self._at_start:
            return
        if self._pos:
            self._emit("\n")
            self._pos = 0
        self._parsed_nl = True
        if not self._in_seq:
            if self._desc_chars == 0:
                raise FastaFormatError(f"empty description {entry_context(self._entry)}")
            self._in_seq = True
        if self._seq_chars == 0:
            raise FastaFormatError(f"empty sequence data {entry_context(self._entry)}")

    def close(self) -> None:
        """Terminate the last line, check the last entry and release the stream."""
        if self.closed:
            return
        self.closed = True
        try:
            self._finish()
            try:
                self._stream.flush()
            except (EOFError, BrokenPipeError):
                if self._own_stream:
                    raise
        finally:
            if self._own_stream:
                self._stream.close()
                logger.debug("Closed %s", self.name)

    def __enter__(self) -> "FastaWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # the in-flight exception takes precedence over close-time checks
        try:
            self.close()
        except FastaFormatError:
            logger.debug("Ignoring format error on close after %s", exc_type.__name__)

    def __repr__(self) -> str:
        return f"FastaWriter(output={self.name!r}, entry={self._entry})"


def write_fasta(
    dest: Destination,
    entries: Iterable[Tuple[Any, Iterable[Any]]],
    mode: str = "w",
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> int:
    """Write ``(description, sequence)`` pairs and return the number written.

    ``dest`` is a path, an open stream or ``None`` for standard output.
    """
    if isinstance(dest, (str, Path)):
        with open_output(dest, mode, compress_level) as handle:
            return write_fasta(handle, entries)
    stream = default_output() if dest is None else dest
    emit = _output_function(stream)
    entry = 0
    for description, sequence in entries:
        entry += 1
        description = _clean_description(description, entry)
        if len(description) >= LINE_WIDTH:
            logger.warning("description line longer than 80 characters %s", entry_context(entry))
        emit(f">{description}\n")
        if not write_fasta_sequence(stream, sequence, entry):
            raise FastaFormatError(f"empty sequence data {entry_context(entry)}")
    stream.flush()
    return entry


__all__ = ["FastaWriter", "LINE_WIDTH", "write_fasta", "write_fasta_sequence"]
