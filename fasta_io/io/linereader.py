"""Chunked line reassembly over a binary stream."""

from __future__ import annotations

from typing import BinaryIO

from ..config import DEFAULT_BUFFER_SIZE

LF = 0x0A
CR = 0x0D


class StreamLineReader:
    """Split a binary stream into logical lines using a fixed-size chunk buffer.

    Lines may be longer than the chunk; partial lines are accumulated in a
    growable line buffer until a line feed or the end of the stream is seen.
    ``\\r\\n`` and ``\\n`` both terminate a line and are stripped.

    ``next_line`` returns ``b""`` both for a blank line and at the end of the
    stream; use :attr:`eof` to tell the two apart.
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self.stream = stream
        self.buffer_size = buffer_size
        self._chunk = bytearray(buffer_size)
        self._view = memoryview(self._chunk)
        self._size = 0
        self._pos = 0
        self._line = bytearray()
        self._eof = False

    @property
    def eof(self) -> bool:
        return self._eof

    def reset(self) -> None:
        """Forget buffered data and the end-of-stream flag (after a seek)."""
        self._size = 0
        self._pos = 0
        self._eof = False
        del self._line[:]

    def _fill(self) -> None:
        readinto = getattr(self.stream, "readinto", None)
        if readinto is not None:
            count = readinto(self._view)
        else:
            data = self.stream.read(self.buffer_size)
            count = None if data is None else len(data)
            if count:
                self._chunk[:count] = data
        if count is None or count < 0:
            raise OSError("read failure")
        self._size = count
        self._pos = 0
        if count == 0:
            self._eof = True

    def next_line(self) -> bytes:
        """Return the next line without its terminator."""
        line = self._line
        del line[:]
        while not self._eof:
            if self._pos >= self._size:
                self._fill()
                if self._eof:
                    break
            end = self._chunk.find(LF, self._pos, self._size)
            if end < 0:
                line += self._view[self._pos:self._size]
                self._pos = self._size
                continue
            line += self._view[self._pos:end]
            self._pos = end + 1
            break
        # the CR may have arrived at the tail of the previous chunk
        if line and line[-1] == CR:
            del line[-1]
        return bytes(line)
