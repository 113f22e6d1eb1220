"""Bit-level output for coded data sets."""

from __future__ import annotations

from collections.abc import Iterable

# Pending bits are moved to the byte buffer once this many have accumulated.
_FLUSH_THRESHOLD = 256


class BitWriter:
    """Accumulates bits most significant first and hands them out as bytes."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._acc = 0
        self._nbits = 0
        self._taken = 0

    def _flush(self) -> None:
        if self._nbits >= 8:
            rem = self._nbits & 7
            full = self._nbits >> 3
            self._buffer += (self._acc >> rem).to_bytes(full, "big")
            self._acc &= (1 << rem) - 1
            self._nbits = rem

    def emit(self, value: int, bits: int) -> None:
        """Append the ``bits`` least significant bits of ``value``."""
        if bits < 0:
            raise ValueError(f"bit count must not be negative, got {bits}")
        if bits == 0:
            return
        self._acc = (self._acc << bits) | (value & ((1 << bits) - 1))
        self._nbits += bits
        self._flush()

    def emit_fs(self, fs: int) -> None:
        """Append a fundamental sequence: ``fs`` zero bits and a one bit."""
        if fs < 0:
            raise ValueError(f"fundamental sequence must not be negative, got {fs}")
        self.emit(1, fs + 1)

    def emit_block_fs(self, block: Iterable[int], k: int) -> None:
        """Append the fundamental sequence of every sample shifted right by ``k``."""
        if k < 0:
            raise ValueError(f"splitting position must not be negative, got {k}")
        acc = self._acc
        nbits = self._nbits
        for value in block:
            fs = value >> k
            if fs < 0:
                self._acc, self._nbits = acc, nbits
                self._flush()
                raise ValueError(f"samples must not be negative, got {value}")
            acc = (acc << (fs + 1)) | 1
            nbits += fs + 1
            if nbits >= _FLUSH_THRESHOLD:
                self._acc, self._nbits = acc, nbits
                self._flush()
                acc, nbits = self._acc, self._nbits
        self._acc, self._nbits = acc, nbits
        self._flush()

    def emit_block(self, block: Iterable[int], k: int) -> None:
        """Append the ``k`` least significant bits of every sample."""
        if k < 0:
            raise ValueError(f"bit count must not be negative, got {k}")
        if k == 0:
            return
        mask = (1 << k) - 1
        acc = self._acc
        nbits = self._nbits
        for value in block:
            acc = (acc << k) | (value & mask)
            nbits += k
            if nbits >= _FLUSH_THRESHOLD:
                self._acc, self._nbits = acc, nbits
                self._flush()
                acc, nbits = self._acc, self._nbits
        self._acc, self._nbits = acc, nbits
        self._flush()

    def bit_length(self) -> int:
        """Number of bits written since creation, taken bytes included."""
        return (self._taken + len(self._buffer)) * 8 + self._nbits

    def pad_to_byte(self) -> None:
        """Fill the current byte with zero bits."""
        if self._nbits:
            self.emit(0, 8 - self._nbits)

    def take_complete_bytes(self) -> bytes:
        """Remove and return all complete bytes; a partial byte stays pending."""
        out = bytes(self._buffer)
        self._taken += len(out)
        self._buffer.clear()
        return out

    def getvalue(self) -> bytes:
        """Pending bytes, the last partial byte padded with zero bits."""
        out = bytes(self._buffer)
        if self._nbits:
            out += bytes([(self._acc << (8 - self._nbits)) & 0xFF])
        return out