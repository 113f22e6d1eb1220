"""Coding parameters, option flags and the errors raised by the codec."""

from __future__ import annotations

import enum
from dataclasses import dataclass

MAX_RSI = 4096
STANDARD_BLOCK_SIZES = frozenset({8, 16, 32, 64})
MAX_BITS_PER_SAMPLE = 32


class Flags(enum.IntFlag):
    """Options that describe the sample layout and the coding variant."""

    NONE = 0
    DATA_SIGNED = 1
    DATA_3BYTE = 2
    DATA_MSB = 4
    DATA_PREPROCESS = 8
    RESTRICTED = 16
    PAD_RSI = 32
    NOT_ENFORCE = 64


class AecError(Exception):
    """Base class of all codec errors."""


class ConfigError(AecError, ValueError):
    """The coding parameters are invalid."""


class DataError(AecError):
    """The compressed data is corrupt."""


class StreamError(AecError):
    """The stream could not be finished, e.g. the output did not fit."""


class OutputBufferError(AecError):
    """The output space is too small or not aligned to whole samples."""


class OffsetsError(AecError):
    """Reference sample interval offsets are unavailable or already enabled."""


@dataclass(frozen=True)
class Params:
    """Parameters shared by the encoder and the decoder."""

    bits_per_sample: int = 8
    block_size: int = 8
    rsi: int = 2
    flags: Flags = Flags.DATA_PREPROCESS

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", Flags(int(self.flags)))

    def _check_bits_per_sample(self) -> None:
        if not 1 <= self.bits_per_sample <= MAX_BITS_PER_SAMPLE:
            raise ConfigError(
                f"bits_per_sample must be within 1..{MAX_BITS_PER_SAMPLE}, "
                f"got {self.bits_per_sample}"
            )

    def validate_for_encoding(self) -> Params:
        """Raise ConfigError unless the parameters can be used to encode."""
        self._check_bits_per_sample()
        if self.flags & Flags.NOT_ENFORCE:
            if self.block_size <= 0 or self.block_size % 2:
                raise ConfigError(
                    f"block_size must be a positive even number, got {self.block_size}"
                )
        elif self.block_size not in STANDARD_BLOCK_SIZES:
            raise ConfigError(
                f"block_size must be one of {sorted(STANDARD_BLOCK_SIZES)}, "
                f"got {self.block_size}"
            )
        if not 1 <= self.rsi <= MAX_RSI:
            raise ConfigError(f"rsi must be within 1..{MAX_RSI}, got {self.rsi}")
        self.id_len  # raises for unsupported restricted settings
        return self

    def validate_for_decoding(self) -> Params:
        """Raise ConfigError unless the parameters can be used to decode."""
        self._check_bits_per_sample()
        if self.block_size <= 0:
            raise ConfigError(f"block_size must be positive, got {self.block_size}")
        if self.rsi <= 0:
            raise ConfigError(f"rsi must be positive, got {self.rsi}")
        self.id_len
        return self

    @property
    def bytes_per_sample(self) -> int:
        """Storage size of one sample in bytes."""
        if self.bits_per_sample > 16:
            if self.bits_per_sample <= 24 and self.flags & Flags.DATA_3BYTE:
                return 3
            return 4
        if self.bits_per_sample > 8:
            return 2
        return 1

    @property
    def id_len(self) -> int:
        """Bit length of the code option identifier."""
        if self.bits_per_sample > 16:
            return 5
        if self.bits_per_sample > 8:
            return 4
        if self.flags & Flags.RESTRICTED:
            if self.bits_per_sample <= 2:
                return 1
            if self.bits_per_sample <= 4:
                return 2
            raise ConfigError(
                "the restricted option set needs bits_per_sample of at most 4"
            )
        return 3

    @property
    def xmin(self) -> int:
        """Smallest representable sample value."""
        if self.flags & Flags.DATA_SIGNED:
            return -(1 << (self.bits_per_sample - 1))
        return 0

    @property
    def xmax(self) -> int:
        """Largest representable sample value."""
        if self.flags & Flags.DATA_SIGNED:
            return (1 << (self.bits_per_sample - 1)) - 1
        return (1 << self.bits_per_sample) - 1

    @property
    def rsi_samples(self) -> int:
        """Number of samples in one reference sample interval."""
        return self.rsi * self.block_size