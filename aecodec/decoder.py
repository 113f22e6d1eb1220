"""Adaptive entropy decoder for coded data sets."""

from __future__ import annotations

from collections.abc import Sequence

from .accessors import write_samples
from .bitreader import BitReader, IncompleteInput
from .options import (
    DataError,
    Flags,
    OffsetsError,
    OutputBufferError,
    Params,
)
from .postprocess import SE_TABLE_SIZE, Postprocessor, create_se_table

# Zero block count that stands for "remainder of segment".
_ROS = 5
_SEGMENT_BLOCKS = 64


class Decoder:
    """Incremental decoder.

    Input may arrive in pieces of any size; each call returns the whole
    samples decoded so far, limited to ``max_output`` bytes if given.
    """

    def __init__(self, params: Params) -> None:
        self.params = params.validate_for_decoding()
        self._width = params.bytes_per_sample
        self._msb = bool(params.flags & Flags.DATA_MSB)
        self._id_len = params.id_len
        self._uncomp_id = (1 << self._id_len) - 1
        self._pp = bool(params.flags & Flags.DATA_PREPROCESS)
        self._post = (
            Postprocessor(params.bits_per_sample, bool(params.flags & Flags.DATA_SIGNED))
            if self._pp
            else None
        )
        self._table = create_se_table()
        self._reader = BitReader()
        self._rsi_size = params.rsi_samples
        self._used = 0
        self._ref = self._pp
        self._pending: list[int] = []
        self._offsets: list[int] | None = None
        self._seek_to: int | None = None

    def enable_offsets(self) -> None:
        """Start recording the bit offset at which every RSI begins."""
        if self._offsets is not None:
            raise OffsetsError("RSI offsets are already enabled")
        self._offsets = [0]

    def offsets(self) -> list[int]:
        """Bit offsets of the RSIs decoded so far."""
        if self._offsets is None:
            raise OffsetsError("RSI offsets were not enabled")
        return list(self._offsets)

    def seek(self, offset: int) -> None:
        """Continue decoding at absolute bit ``offset`` of the input."""
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}")
        self._seek_to = offset

    def decode(self, data: bytes = b"", max_output: int | None = None) -> bytes:
        """Feed ``data`` and return the decoded bytes."""
        if max_output is not None and max_output < 0:
            raise ValueError(f"max_output must not be negative, got {max_output}")
        reader = self._reader
        reader.feed(data)
        if self._seek_to is not None:
            reader.seek(self._seek_to)
            self._seek_to = None

        limit = None if max_output is None else max_output // self._width
        while limit is None or len(self._pending) < limit:
            start = reader.bit_position()
            try:
                values = self._decode_block()
            except IncompleteInput:
                reader.seek(start)
                break
            count = len(values)
            if self._post is not None:
                values = self._post.apply(values, self._ref)
            self._pending.extend(values)
            self._used += count
            if self._used >= self._rsi_size:
                self._end_rsi()
            else:
                self._ref = False

        if limit is None:
            taken = self._pending
            self._pending = []
        else:
            taken = self._pending[:limit]
            del self._pending[:limit]
            if max_output % self._width and len(taken) == limit:
                raise OutputBufferError(
                    f"output space of {max_output} bytes is not a whole number "
                    f"of {self._width}-byte samples"
                )
        return write_samples(taken, self._width, self._msb)

    def _end_rsi(self) -> None:
        if self._offsets is not None:
            self._offsets.append(self._reader.bit_position())
        if self.params.flags & Flags.PAD_RSI:
            self._reader.align()
        self._used = 0
        self._ref = self._pp

    def _decode_block(self) -> list[int]:
        reader = self._reader
        params = self.params
        bps = params.bits_per_sample
        bs = params.block_size
        ref = int(self._ref)

        option = reader.get(self._id_len)
        if option == 0:
            second_extension = reader.get(1)
            out = [reader.get(bps)] if ref else []
            if second_extension:
                i = ref
                while i < bs:
                    m = reader.get_fs()
                    if m > SE_TABLE_SIZE:
                        raise DataError(f"second extension code {m} out of range")
                    beta, ms = self._table[m]
                    d1 = m - ms
                    if i % 2 == 0:
                        out.append(beta - d1)
                        i += 1
                    out.append(d1)
                    i += 1
            else:
                zero_blocks = reader.get_fs() + 1
                if zero_blocks == _ROS:
                    b = self._used // bs
                    zero_blocks = min(params.rsi - b, _SEGMENT_BLOCKS - b % _SEGMENT_BLOCKS)
                elif zero_blocks > _ROS:
                    zero_blocks -= 1
                if self._rsi_size - self._used < zero_blocks * bs:
                    raise DataError("zero block run exceeds the reference sample interval")
                out.extend([0] * (zero_blocks * bs - ref))
            return out

        if option == self._uncomp_id:
            return [reader.get(bps) for _ in range(bs)]

        k = option - 1
        out = [reader.get(bps)] if ref else []
        fs = [reader.get_fs() for _ in range(bs - ref)]
        if k:
            out.extend((f << k) + reader.get(k) for f in fs)
        else:
            out.extend(fs)
        return out


def decode(data: bytes, params: Params, max_output: int | None = None) -> bytes:
    """Decode a whole buffer."""
    return Decoder(params).decode(data, max_output)


def decode_with_offsets(
    data: bytes, params: Params, max_output: int | None = None
) -> tuple[bytes, list[int]]:
    """Decode a whole buffer and return the bit offsets of its RSIs as well."""
    decoder = Decoder(params)
    decoder.enable_offsets()
    out = decoder.decode(data, max_output)
    return out, decoder.offsets()


def decode_at(
    data: bytes, params: Params, offset: int, max_output: int | None = None
) -> bytes:
    """Decode starting at bit ``offset`` of ``data``."""
    decoder = Decoder(params)
    decoder.seek(offset)
    return decoder.decode(data, max_output)


def decode_range(
    data: bytes, params: Params, offsets: Sequence[int], pos: int, size: int
) -> bytes:
    """Decode ``size`` bytes of output starting at output byte ``pos``."""
    width = params.bytes_per_sample
    rsi_bytes = params.rsi_samples * width
    rsi_n = pos // rsi_bytes
    if rsi_n >= len(offsets):
        raise DataError(f"no RSI offset for output position {pos}")
    avail = size + pos % rsi_bytes + 1
    avail += width - avail % width
    out = decode_at(data, params, offsets[rsi_n], avail)
    start = pos - rsi_n * rsi_bytes
    chunk = out[start : start + size]
    if len(chunk) < size:
        raise DataError(f"only {len(chunk)} of {size} bytes could be decoded")
    return chunk