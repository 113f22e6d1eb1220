"""Bit-level input for coded data sets."""

from __future__ import annotations

from .options import AecError, OutputBufferError


class IncompleteInput(AecError):
    """More input is needed before the requested bits can be read."""


class BitReader:
    """Reads bits most significant first from a growing byte buffer.

    Positions are absolute bit offsets counted from the first byte ever
    handed to the reader. A read that cannot be satisfied raises
    IncompleteInput and leaves the position unchanged.
    """

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)
        self._base = 0  # bytes already discarded from the front
        self._pos = 0  # bit position within self._data

    def feed(self, data: bytes) -> None:
        """Append more input; bytes already consumed are discarded."""
        drop = self._pos >> 3
        if drop:
            del self._data[:drop]
            self._base += drop
            self._pos -= drop * 8
        self._data += data

    def get(self, n: int) -> int:
        """Read ``n`` bits as an unsigned integer."""
        if n < 0:
            raise ValueError(f"bit count must not be negative, got {n}")
        if n == 0:
            return 0
        pos = self._pos
        end_bit = pos + n
        if end_bit > len(self._data) * 8:
            raise IncompleteInput(f"{n} bits requested, {self.bits_left()} available")
        start = pos >> 3
        end = (end_bit + 7) >> 3
        chunk = int.from_bytes(self._data[start:end], "big")
        value = (chunk >> (end * 8 - end_bit)) & ((1 << n) - 1)
        self._pos = end_bit
        return value

    def get_fs(self) -> int:
        """Read a fundamental sequence and return the number of its zero bits."""
        data = self._data
        pos = self._pos
        index = pos >> 3
        if index >= len(data):
            raise IncompleteInput("no input left for a fundamental sequence")
        current = data[index] & (0xFF >> (pos & 7))
        while current == 0:
            index += 1
            if index >= len(data):
                raise IncompleteInput("fundamental sequence is not terminated")
            current = data[index]
        one_at = index * 8 + 8 - current.bit_length()
        self._pos = one_at + 1
        return one_at - pos

    def seek(self, offset: int) -> None:
        """Move to the absolute bit ``offset``."""
        rel = offset - self._base * 8
        if rel < 0:
            raise ValueError(f"cannot seek to bit {offset}: input already discarded")
        if rel > len(self._data) * 8:
            raise OutputBufferError(
                f"cannot seek to bit {offset}: only {self.bit_position() + self.bits_left()} bits given"
            )
        self._pos = rel

    def align(self) -> None:
        """Skip to the next byte boundary unless already on one."""
        self._pos = (self._pos + 7) & ~7

    def bit_position(self) -> int:
        """Absolute number of bits consumed so far."""
        return self._base * 8 + self._pos

    def bits_left(self) -> int:
        """Number of bits that can still be read."""
        return len(self._data) * 8 - self._pos