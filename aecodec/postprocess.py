"""Reconstruction of samples from prediction residuals for the decoder."""

from __future__ import annotations

from collections.abc import Iterable

from .options import MAX_BITS_PER_SAMPLE, ConfigError

SE_TABLE_SIZE = 90

_M32 = 0xFFFFFFFF


def _as_int32(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def create_se_table() -> tuple[tuple[int, int], ...]:
    """Table for decoding the second extension option.

    Entry ``m`` holds ``(beta, ms)``: the pair sum ``beta`` coded by ``m`` and
    the first index ``ms`` of that sum, so the second value of the pair is
    ``m - ms`` and the first is ``beta - (m - ms)``.
    """
    table: list[tuple[int, int]] = []
    for beta in range(13):
        ms = len(table)
        table.extend((beta, ms) for _ in range(beta + 1))
    return tuple(table)


class Postprocessor:
    """Inverts the prediction of the encoder across successive calls."""

    def __init__(self, bits_per_sample: int, signed: bool) -> None:
        if not 1 <= bits_per_sample <= MAX_BITS_PER_SAMPLE:
            raise ConfigError(
                f"bits_per_sample must be within 1..{MAX_BITS_PER_SAMPLE}, "
                f"got {bits_per_sample}"
            )
        self.bits_per_sample = bits_per_sample
        self.signed = signed
        if signed:
            self._xmax = (1 << (bits_per_sample - 1)) - 1
        else:
            self._xmax = (1 << bits_per_sample) - 1
        self._last = 0

    def reset(self) -> None:
        """Forget the previous sample."""
        self._last = 0

    def apply(self, values: Iterable[int], has_reference: bool) -> list[int]:
        """Turn residuals into samples.

        With ``has_reference`` the first value is a raw reference sample.
        Signed data comes back as negative or positive integers, unsigned
        data as non-negative ones.
        """
        it = iter(values)
        out: list[int] = []
        if has_reference:
            first = next(it, None)
            if first is None:
                return out
            ref = first & _M32
            if self.signed:
                m = 1 << (self.bits_per_sample - 1)
                ref = _as_int32(((ref ^ m) - m) & _M32)
            out.append(ref)
            self._last = ref

        data = self._last
        xmax = self._xmax
        if self.signed:
            for d in it:
                d &= _M32
                half = (d >> 1) + (d & 1)
                delta = -half if d & 1 else d >> 1
                if data < 0:
                    if half <= (xmax + data + 1) & _M32:
                        data += delta
                    else:
                        data = d - xmax - 1
                else:
                    if half <= (xmax - data) & _M32:
                        data += delta
                    else:
                        data = xmax - d
                data = _as_int32(data & _M32)
                out.append(data)
        else:
            med = xmax // 2 + 1
            data &= _M32
            for d in it:
                d &= _M32
                half = (d >> 1) + (d & 1)
                delta = -half if d & 1 else d >> 1
                mask = xmax if data & med else 0
                if half <= (mask ^ data):
                    data = (data + delta) & _M32
                else:
                    data = (mask ^ d) & _M32
                out.append(data)
        self._last = data
        return out