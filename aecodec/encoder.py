"""Adaptive entropy encoder for blocks of integer samples."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .accessors import read_samples
from .bitwriter import BitWriter
from .options import Flags, OffsetsError, Params, StreamError
from .preprocess import (
    assess_second_extension,
    assess_splitting,
    preprocess_signed,
    preprocess_unsigned,
)

# Zero runs are closed at the end of every segment of this many blocks.
_SEGMENT_BLOCKS = 64

# Marker for a zero run that reaches the end of a segment or RSI.
_ROS = -1


class Encoder:
    """Incremental encoder.

    Input bytes are collected until a whole reference sample interval (RSI)
    is available; each call returns the complete bytes coded so far.
    """

    def __init__(self, params: Params) -> None:
        self.params = params.validate_for_encoding()
        self._width = params.bytes_per_sample
        self._msb = bool(params.flags & Flags.DATA_MSB)
        self._id_len = params.id_len
        self._kmax = (1 << self._id_len) - 3
        self._k = 0
        self._pending = bytearray()
        self._samples: list[int] = []
        self._writer = BitWriter()
        self._offsets: list[int] | None = None
        self._finished = False

    def enable_offsets(self) -> None:
        """Start recording the bit offset at which every RSI begins."""
        if self._offsets is not None:
            raise OffsetsError("RSI offsets are already enabled")
        self._offsets = [0]

    def offsets(self) -> list[int]:
        """Bit offsets of the RSIs coded so far."""
        if self._offsets is None:
            raise OffsetsError("RSI offsets were not enabled")
        return list(self._offsets)

    def encode(self, data: bytes = b"", flush: bool = False) -> bytes:
        """Code ``data`` and return the bytes that are complete.

        With ``flush`` the last partial RSI is padded with its last sample,
        the final byte is filled with zero bits and the stream is closed.
        """
        if self._finished:
            raise StreamError("the stream has already been flushed")
        self._pending += data
        usable = len(self._pending) - len(self._pending) % self._width
        if usable:
            self._samples.extend(
                read_samples(bytes(self._pending[:usable]), self._width, self._msb)
            )
            del self._pending[:usable]

        rsi_samples = self.params.rsi_samples
        whole = len(self._samples) // rsi_samples * rsi_samples
        for start in range(0, whole, rsi_samples):
            self._encode_rsi(
                self._samples[start : start + rsi_samples], self.params.rsi, True
            )
        del self._samples[:whole]

        if flush:
            self._flush_tail()
        return self._writer.take_complete_bytes()

    def finish(self) -> bytes:
        """Flush the stream if that has not happened yet; return the last bytes."""
        if self._finished:
            return b""
        return self.encode(b"", flush=True)

    def _flush_tail(self) -> None:
        if self._samples:
            block_size = self.params.block_size
            count = len(self._samples)
            nblocks = -(-count // block_size)
            padded = self._samples + [self._samples[-1]] * (
                self.params.rsi_samples - count
            )
            self._encode_rsi(padded, nblocks, False)
            self._samples.clear()
        if self._writer.bit_length() == 0:
            self._writer.emit(0, 8)
        self._writer.pad_to_byte()
        self._pending.clear()
        self._finished = True

    def _encode_rsi(self, samples: Sequence[int], nblocks: int, complete: bool) -> None:
        params = self.params
        block_size = params.block_size
        if params.flags & Flags.DATA_PREPROCESS:
            ref_sample = samples[0]
            if params.flags & Flags.DATA_SIGNED:
                residuals = preprocess_signed(
                    samples, params.bits_per_sample, params.xmin, params.xmax
                )
            else:
                residuals = preprocess_unsigned(samples, params.xmax)
            has_ref = True
        else:
            ref_sample = 0
            residuals = list(samples)
            has_ref = False

        zero_blocks = 0
        zero_ref = False
        last_index = nblocks - 1
        for index in range(nblocks):
            block = residuals[index * block_size : (index + 1) * block_size]
            ref = has_ref and index == 0
            if any(block):
                if zero_blocks:
                    self._emit_zero(zero_blocks, zero_ref, ref_sample)
                    zero_blocks = 0
                self._emit_block(block, ref, ref_sample)
            else:
                if not zero_blocks:
                    zero_ref = ref
                zero_blocks += 1
                if index != last_index and (index + 1) % _SEGMENT_BLOCKS:
                    continue
                if zero_blocks > 4:
                    zero_blocks = _ROS
                self._emit_zero(zero_blocks, zero_ref, ref_sample)
                zero_blocks = 0
            if index == last_index:
                self._end_rsi(complete)

    def _end_rsi(self, complete: bool) -> None:
        if self.params.flags & Flags.PAD_RSI:
            self._writer.pad_to_byte()
        if complete and self._offsets is not None:
            self._offsets.append(self._writer.bit_length())

    def _emit_block(self, block: list[int], ref: bool, ref_sample: int) -> None:
        bps = self.params.bits_per_sample
        uncomp_len = (len(block) - int(ref)) * bps
        split_len: float = math.inf
        if self._id_len > 1:
            length, self._k = assess_splitting(block, int(ref), self._k, self._kmax)
            split_len = length
        se = assess_second_extension(block, uncomp_len)
        se_len: float = math.inf if se is None else se

        if split_len < uncomp_len:
            if split_len < se_len:
                self._emit_splitting(block, ref, ref_sample, self._k)
            else:
                self._emit_second_extension(block, ref, ref_sample)
        elif uncomp_len <= se_len:
            self._emit_uncompressed(block, ref, ref_sample)
        else:
            self._emit_second_extension(block, ref, ref_sample)

    def _emit_splitting(
        self, block: list[int], ref: bool, ref_sample: int, k: int
    ) -> None:
        writer = self._writer
        writer.emit(k + 1, self._id_len)
        if ref:
            writer.emit(ref_sample, self.params.bits_per_sample)
        body = block[1:] if ref else block
        writer.emit_block_fs(body, k)
        if k:
            writer.emit_block(body, k)

    def _emit_uncompressed(self, block: list[int], ref: bool, ref_sample: int) -> None:
        writer = self._writer
        writer.emit((1 << self._id_len) - 1, self._id_len)
        values = [ref_sample, *block[1:]] if ref else block
        writer.emit_block(values, self.params.bits_per_sample)

    def _emit_second_extension(
        self, block: list[int], ref: bool, ref_sample: int
    ) -> None:
        writer = self._writer
        writer.emit(1, self._id_len + 1)
        if ref:
            writer.emit(ref_sample, self.params.bits_per_sample)
        for first, second in zip(block[::2], block[1::2]):
            total = first + second
            writer.emit_fs(total * (total + 1) // 2 + second)

    def _emit_zero(self, count: int, zero_ref: bool, ref_sample: int) -> None:
        writer = self._writer
        writer.emit(0, self._id_len + 1)
        if zero_ref:
            writer.emit(ref_sample, self.params.bits_per_sample)
        if count == _ROS:
            writer.emit_fs(4)
        elif count >= 5:
            writer.emit_fs(count)
        else:
            writer.emit_fs(count - 1)


def encode(data: bytes, params: Params) -> bytes:
    """Code a whole buffer of samples."""
    return Encoder(params).encode(data, flush=True)


def encode_with_offsets(data: bytes, params: Params) -> tuple[bytes, list[int]]:
    """Code a whole buffer and return the bit offsets of its RSIs as well."""
    encoder = Encoder(params)
    encoder.enable_offsets()
    coded = encoder.encode(data, flush=True)
    return coded, encoder.offsets()