"""Prediction, residual mapping and code option assessment for the encoder."""

from __future__ import annotations

from collections.abc import Sequence

_M32 = 0xFFFFFFFF


def _as_int32(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def preprocess_unsigned(samples: Sequence[int], xmax: int) -> list[int]:
    """Map unsigned samples to non-negative prediction residuals.

    The first residual is 0; the first sample serves as reference.
    """
    xmax &= _M32
    if not samples:
        return []
    residuals = [0] * len(samples)
    prev = samples[0] & _M32
    for i in range(1, len(samples)):
        cur = samples[i] & _M32
        if cur >= prev:
            diff = cur - prev
            residuals[i] = (2 * diff) & _M32 if diff <= prev else cur
        else:
            diff = prev - cur
            if diff <= (xmax - prev) & _M32:
                residuals[i] = (2 * diff - 1) & _M32
            else:
                residuals[i] = (xmax - cur) & _M32
        prev = cur
    return residuals


def preprocess_signed(
    samples: Sequence[int], bits_per_sample: int, xmin: int, xmax: int
) -> list[int]:
    """Map two's complement samples of ``bits_per_sample`` bits to residuals.

    The first residual is 0; the first sample serves as reference.
    """
    xmax &= _M32
    xmin &= _M32
    m = 1 << (bits_per_sample - 1)
    extended = [(((value & _M32) ^ m) - m) & _M32 for value in samples]
    if not extended:
        return []
    residuals = [0] * len(extended)
    for i in range(1, len(extended)):
        prev = extended[i - 1]
        cur = extended[i]
        if _as_int32(cur) < _as_int32(prev):
            diff = (prev - cur) & _M32
            if diff <= (xmax - prev) & _M32:
                residuals[i] = (2 * diff - 1) & _M32
            else:
                residuals[i] = (xmax - cur) & _M32
        else:
            diff = (cur - prev) & _M32
            if diff <= (prev - xmin) & _M32:
                residuals[i] = (2 * diff) & _M32
            else:
                residuals[i] = (cur - xmin) & _M32
    return residuals


def block_fs(block: Sequence[int], k: int) -> int:
    """Total length of the fundamental sequences of a block split at ``k``."""
    return sum(value >> k for value in block)


def assess_splitting(
    block: Sequence[int], ref: int, k: int, kmax: int
) -> tuple[int, int]:
    """Find the splitting position with the shortest coded data set.

    The search starts at ``k`` (the previous block's choice). Returns the
    length in bits, without the option identifier, and the best ``k``.
    """
    this_bs = len(block) - ref
    len_min: int | None = None
    start_k = k
    k_min = k
    no_turn = k == 0
    increasing = True

    while True:
        fs_len = block_fs(block, k)
        length = fs_len + this_bs * (k + 1)

        if len_min is None or length < len_min:
            if len_min is not None:
                no_turn = True
            len_min = length
            k_min = k

            if increasing:
                if fs_len < this_bs or k >= kmax:
                    if no_turn:
                        break
                    k = start_k - 1
                    increasing = False
                    no_turn = True
                else:
                    k += 1
            else:
                if fs_len >= this_bs or k == 0:
                    break
                k -= 1
        else:
            if no_turn:
                break
            k = start_k - 1
            increasing = False
            no_turn = True

    return len_min, k_min


def assess_second_extension(block: Sequence[int], uncomp_len: int) -> int | None:
    """Length of the block coded with the second extension option.

    Returns None as soon as the length exceeds ``uncomp_len``.
    """
    if len(block) % 2:
        raise ValueError(
            f"second extension needs an even block length, got {len(block)}"
        )
    length = 1
    for first, second in zip(block[::2], block[1::2]):
        total = first + second
        length += total * (total + 1) // 2 + second + 1
        if length > uncomp_len:
            return None
    return length