"""Streaming LZSS decoder (11-bit positions, 4-bit lengths)."""

from __future__ import annotations

import enum
from typing import Callable, Iterator, Optional

LZSS_EOF = -1
LZSS_BUFFER_EMPTY = -2

EI = 11
EJ = 4
N = 1 << EI
F = (1 << EJ) + 1


class DecodeStatus(enum.Enum):
    """Outcome of a call to :meth:`LZSSDecoder.decompress`."""

    DONE = 0
    IN_PROGRESS = 1
    NOT_COMPLETED = 2


class _State(enum.Enum):
    FLAG = 1
    LITERAL = 8
    POSITION = EI
    LENGTH = EJ
    EOF = 0


class LZSSDecoder:
    """Incremental LZSS decoder.

    Decoded bytes go to ``putc``. Input is either handed to
    :meth:`decompress` in chunks, or pulled from ``getc``, which returns a
    byte, ``LZSS_EOF`` at the end of the stream, or ``LZSS_BUFFER_EMPTY``
    when no data is available yet.
    """

    def __init__(
        self,
        putc: Optional[Callable[[int], object]] = None,
        getc: Optional[Callable[[], int]] = None,
    ) -> None:
        self._putc = putc
        self._getc = getc
        self._window = bytearray(b" " * (N - F)) + bytearray(F)
        self._r = N - F
        self._position = 0
        self._state = _State.FLAG
        self._bits = 0
        self._bit_count = 0
        self._input: Iterator[int] = iter(())

    def decompress(self, data: bytes | bytearray | memoryview = b"") -> DecodeStatus:
        """Decode as much as possible and report whether the stream ended.

        Without ``getc``, ``data`` is consumed until exhausted, which yields
        ``NOT_COMPLETED``; the decoder resumes on the next call.
        """
        if self._state is _State.EOF:
            return DecodeStatus.DONE
        if self._getc is None:
            self._input = iter(bytes(data))
        while (status := self._step()) is DecodeStatus.IN_PROGRESS:
            pass
        self._input = iter(())
        return status

    def _next_byte(self) -> int:
        if self._getc is not None:
            return self._getc()
        return next(self._input, LZSS_BUFFER_EMPTY)

    def _read_bits(self, count: int) -> int:
        while self._bit_count < count:
            byte = self._next_byte()
            if byte in (LZSS_EOF, LZSS_BUFFER_EMPTY):
                return byte
            self._bits = (self._bits << 8) | (byte & 0xFF)
            self._bit_count += 8
        self._bit_count -= count
        value = self._bits >> self._bit_count
        self._bits &= (1 << self._bit_count) - 1
        return value

    def _emit(self, byte: int) -> None:
        if self._putc is not None:
            self._putc(byte)
        self._window[self._r] = byte
        self._r = (self._r + 1) & (N - 1)

    def _step(self) -> DecodeStatus:
        value = self._read_bits(self._state.value)
        if value == LZSS_BUFFER_EMPTY:
            return DecodeStatus.NOT_COMPLETED
        if value == LZSS_EOF:
            self._state = _State.EOF
            return DecodeStatus.DONE

        if self._state is _State.FLAG:
            self._state = _State.LITERAL if value else _State.POSITION
        elif self._state is _State.LITERAL:
            self._emit(value)
            self._state = _State.FLAG
        elif self._state is _State.POSITION:
            self._position = value
            self._state = _State.LENGTH
        elif self._state is _State.LENGTH:
            for offset in range(value + 2):
                self._emit(self._window[(self._position + offset) & (N - 1)])
            self._state = _State.FLAG
        return DecodeStatus.IN_PROGRESS


def lzss_decode(data: bytes | bytearray | memoryview) -> bytes:
    """Decode a complete LZSS stream held in memory."""
    output = bytearray()
    LZSSDecoder(output.append).decompress(data)
    return bytes(output)