"""Streaming FASTA reader."""

from __future__ import annotations

import logging
import string
from pathlib import Path
from typing import Any, BinaryIO, Callable, Generic, Iterator, List, Tuple, TypeVar, Union

from .config import DEFAULT_BUFFER_SIZE
from .errors import EmptyInputError, FastaFormatError, entry_context
from .io.linereader import StreamLineReader
from .io.streams import is_text_stream, open_input

logger = logging.getLogger(__name__)

T = TypeVar("T")

MARKER = ord(">")
WHITESPACE = string.whitespace.encode("ascii")

Source = Union[str, Path, BinaryIO]
Converter = Callable[[bytes], Any]


def _to_str(data: bytes) -> str:
    return data.decode("ascii")


def resolve_converter(out_type: Any) -> Converter:
    """Map an output type to the function that builds sequences from bytes."""

    if out_type is str:
        return _to_str
    if out_type is bytes:
        return bytes
    if out_type is bytearray:
        return bytearray
    if callable(out_type):
        return out_type
    raise TypeError(f"out_type must be str, bytes, bytearray or a callable, got {out_type!r}")


class FastaReader(Generic[T]):
    """Read ``(description, sequence)`` entries from a FASTA source.

    ``source`` is either a path (gzip input is detected and decompressed) or
    an open binary stream. Paths are opened and closed by the reader; streams
    are left open. ``out_type`` selects how sequences are returned: ``str``
    (default), ``bytes``, ``bytearray`` or any callable taking ``bytes``.

    Iterating a reader always starts from the beginning of the input.
    """

    def __init__(
        self,
        source: Source,
        out_type: Any = str,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._convert = resolve_converter(out_type)
        self.out_type = out_type
        if isinstance(source, (str, Path)):
            self.name = str(source)
            self._stream = open_input(source)
            self._own_stream = True
        else:
            if is_text_stream(source):
                raise TypeError("FastaReader needs a binary stream, got a text stream")
            self.name = getattr(source, "name", repr(source))
            self._stream = source
            self._own_stream = False
        try:
            self._lines = StreamLineReader(self._stream, buffer_size)
        except ValueError:
            if self._own_stream:
                self._stream.close()
            raise
        self._sequence = bytearray()
        self._lookahead = b""
        self._primed = False
        self._num_parsed = 0
        self.closed = False

    @property
    def num_parsed(self) -> int:
        """Number of entries returned since opening or the last rewind."""
        return self._num_parsed

    @property
    def eof(self) -> bool:
        """True once the input is exhausted and no entry is pending."""
        return self._lines.eof and not self._lookahead

    def rewind(self) -> None:
        """Seek back to the start of the input and forget all parser state."""
        self._stream.seek(0)
        self._lines.reset()
        del self._sequence[:]
        self._lookahead = b""
        self._primed = False
        self._num_parsed = 0
        logger.debug("Rewound %s", self.name)

    def _prime(self) -> None:
        line = self._lines.next_line()
        if not line and self._lines.eof:
            raise EmptyInputError(f"empty FASTA input: {self.name}")
        if not line:
            raise FastaFormatError(f"invalid FASTA input: description does not start with '>' {entry_context(1)}")
        self._lookahead = line
        self._primed = True

    def _next_step(self) -> str:
        entry = self._num_parsed + 1
        line = self._lookahead
        if not line or line[0] != MARKER:
            raise FastaFormatError(f"invalid FASTA input: description does not start with '>' {entry_context(entry)}")
        if len(line) == 1:
            raise FastaFormatError(f"invalid FASTA input: empty description {entry_context(entry)}")
        if not line.isascii():
            raise FastaFormatError(f"invalid non-ASCII description in FASTA input {entry_context(entry)}")
        description = line[1:].decode("ascii")

        sequence = self._sequence
        del sequence[:]
        while True:
            line = self._lines.next_line()
            if not line:
                if self._lines.eof:
                    break
                continue
            if line[0] == MARKER:
                break
            sequence += line.translate(None, WHITESPACE)
        self._lookahead = line
        return description

    def read_entry(self) -> Tuple[str, T]:
        """Return the next entry, or raise EOFError when none is left."""
        if not self._primed:
            self._prime()
        if not self._lookahead:
            raise EOFError(f"no more entries in {self.name}")
        description = self._next_step()
        try:
            sequence = self._convert(bytes(self._sequence))
        except UnicodeDecodeError as exc:
            raise FastaFormatError(
                f"invalid non-ASCII sequence data {entry_context(self._num_parsed + 1)}"
            ) from exc
        self._num_parsed += 1
        return description, sequence

    def __iter__(self) -> Iterator[Tuple[str, T]]:
        # untouched streams need no seek, so pipes can still be iterated once
        if self._primed:
            self.rewind()
        self._prime()
        while self._lookahead:
            yield self.read_entry()

    def read_all(self) -> List[Tuple[str, T]]:
        """Return every entry of the input, starting from the beginning."""
        return list(self)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._own_stream:
            self._stream.close()
            logger.debug("Closed %s", self.name)

    def __enter__(self) -> "FastaReader[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        out_name = getattr(self.out_type, "__name__", repr(self.out_type))
        return (
            f"FastaReader(input={self.name!r}, out_type={out_name}, "
            f"num_parsed={self._num_parsed}, eof={self.eof})"
        )


def read_fasta(source: Source, out_type: Any = str, buffer_size: int = DEFAULT_BUFFER_SIZE) -> List[Tuple[str, Any]]:
    """Read every entry of a FASTA path or binary stream into a list."""
    with FastaReader(source, out_type=out_type, buffer_size=buffer_size) as reader:
        return reader.read_all()


__all__ = ["FastaReader", "read_fasta", "resolve_converter"]
