"""Configuration for the triple-hash Bloom filter."""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BITS = 1024


@dataclass(frozen=True)
class BloomFilterConfig:
    """Construction parameters for :class:`~bf_triple.bloom_filter.BloomFilter`.

    Attributes:
        bits: Length of the bit array. Fixed for the lifetime of the filter.

    Raises:
        TypeError: If ``bits`` is not an integer.
        ValueError: If ``bits`` is not positive.
    """

    bits: int = DEFAULT_BITS

    def __post_init__(self) -> None:
        if isinstance(self.bits, bool) or not isinstance(self.bits, int):
            raise TypeError(f"bits must be an int, got {type(self.bits).__name__}")
        if self.bits <= 0:
            raise ValueError("bits must be positive")
