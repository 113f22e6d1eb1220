"""Conversion between byte buffers and integer samples."""

from __future__ import annotations

import struct
from collections.abc import Iterable

_STRUCT_CODES = {1: "B", 2: "H", 4: "I"}


def _check_width(width: int) -> None:
    if width not in (1, 2, 3, 4):
        raise ValueError(f"sample width must be 1, 2, 3 or 4 bytes, got {width}")


def _byteorder(msb: bool) -> str:
    return "big" if msb else "little"


def read_sample(data: bytes, offset: int, width: int, msb: bool) -> int:
    """Read one unsigned sample of ``width`` bytes starting at ``offset``."""
    _check_width(width)
    if offset < 0 or offset + width > len(data):
        raise ValueError(
            f"sample at offset {offset} with width {width} exceeds {len(data)} bytes"
        )
    return int.from_bytes(data[offset : offset + width], _byteorder(msb))


def read_samples(data: bytes, width: int, msb: bool) -> list[int]:
    """Read all unsigned samples of ``width`` bytes from ``data``."""
    _check_width(width)
    if len(data) % width:
        raise ValueError(
            f"buffer of {len(data)} bytes does not hold whole {width}-byte samples"
        )
    count = len(data) // width
    if width == 1:
        return list(data)
    if width == 3:
        order = _byteorder(msb)
        view = memoryview(data)
        return [
            int.from_bytes(view[pos : pos + 3], order)
            for pos in range(0, len(data), 3)
        ]
    prefix = ">" if msb else "<"
    return list(struct.unpack(f"{prefix}{count}{_STRUCT_CODES[width]}", data))


def write_samples(samples: Iterable[int], width: int, msb: bool) -> bytes:
    """Store samples in ``width`` bytes each, keeping only their low bits."""
    _check_width(width)
    mask = (1 << (8 * width)) - 1
    values = [value & mask for value in samples]
    if width == 1:
        return bytes(values)
    if width == 3:
        order = _byteorder(msb)
        return b"".join(value.to_bytes(3, order) for value in values)
    prefix = ">" if msb else "<"
    return struct.pack(f"{prefix}{len(values)}{_STRUCT_CODES[width]}", *values)