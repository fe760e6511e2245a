"""Bloom filter with a fixed triple of independent hash functions.

Each value is viewed as a byte sequence and hashed by FNV-1a, Fx and xxHash64
(see :mod:`bf_triple.hashers`). Every 64-bit digest is reduced modulo the bit
array length, giving exactly three positions per value. Queries answer with a
:class:`Membership` rather than a boolean since a set bit pattern can only
mean "possibly present".
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Generic, Iterable, Optional, Tuple, TypeVar, Union

from .config import BloomFilterConfig
from .hashers import HASHERS, NUM_HASHES

logger = logging.getLogger(__name__)

T = TypeVar("T")

BytesLike = Union[bytes, bytearray, memoryview]


class Membership(enum.Enum):
    """Answer to a membership query."""

    ABSENT = "absent"
    POSSIBLY_PRESENT = "possibly_present"

    def __bool__(self) -> bool:
        raise TypeError(
            "Membership is not a boolean; compare against Membership.ABSENT "
            "or Membership.POSSIBLY_PRESENT"
        )

    @property
    def possibly_present(self) -> bool:
        return self is Membership.POSSIBLY_PRESENT


def as_bytes(value: object) -> bytes:
    """Return the byte view of ``value``.

    ``str`` is encoded as UTF-8; anything exposing the buffer protocol is
    copied out as raw bytes.

    Raises:
        TypeError: If ``value`` has no byte view.
    """

    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    try:
        view = memoryview(value)  # type: ignore[arg-type]
    except TypeError:
        raise TypeError(
            f"cannot derive a byte view from {type(value).__name__}; "
            "pass an encoder to BloomFilter"
        ) from None
    return view.tobytes()


class BloomFilter(Generic[T]):
    """Insert-only Bloom filter backed by a bytearray bitset.

    Values of any type ``T`` are accepted as long as a byte view can be
    produced for them, either through :func:`as_bytes` or through the
    ``encoder`` given at construction.
    """

    def __init__(
        self,
        config: Optional[BloomFilterConfig] = None,
        *,
        encoder: Optional[Callable[[T], BytesLike]] = None,
    ) -> None:
        """Initialize an empty filter.

        Args:
            config: Filter configuration. Defaults to ``BloomFilterConfig()``
                (1024 bits).
            encoder: Optional conversion from ``T`` to bytes. When omitted,
                :func:`as_bytes` is used.

        Raises:
            ValueError: If the configured capacity is not positive.
        """
        if config is None:
            config = BloomFilterConfig()
        if config.bits <= 0:
            raise ValueError("bits must be positive")

        self._size = config.bits
        self._encoder = encoder
        self._bit_array = bytearray((self._size + 7) // 8)
        logger.debug("created bloom filter with %d bits, %d hashes", self._size, NUM_HASHES)

    @classmethod
    def new(cls) -> "BloomFilter[T]":
        """Create a filter with the default configuration."""
        return cls()

    @classmethod
    def with_config(
        cls,
        config: BloomFilterConfig,
        *,
        encoder: Optional[Callable[[T], BytesLike]] = None,
    ) -> "BloomFilter[T]":
        """Create a filter with ``config.bits`` bits."""
        return cls(config, encoder=encoder)

    @property
    def size(self) -> int:
        """Number of bits in the filter."""
        return self._size

    @property
    def num_hashes(self) -> int:
        return NUM_HASHES

    @property
    def bit_array(self) -> bytearray:
        """Expose the underlying bit array (primarily for inspection)."""
        return self._bit_array

    def insert(self, value: T) -> None:
        """Insert ``value`` into the filter."""
        for bit_index in self.hash_indices(value):
            self._bit_array[bit_index >> 3] |= 1 << (bit_index & 7)

    def update(self, items: Iterable[T]) -> None:
        """Insert all ``items`` into the filter."""
        for item in items:
            self.insert(item)

    def contains(self, value: T) -> Membership:
        """Return ``ABSENT`` if ``value`` was never inserted, else ``POSSIBLY_PRESENT``."""
        for bit_index in self.hash_indices(value):
            if not (self._bit_array[bit_index >> 3] & (1 << (bit_index & 7))):
                return Membership.ABSENT
        return Membership.POSSIBLY_PRESENT

    def hash_indices(self, value: T) -> Tuple[int, int, int]:
        """Return the three bit positions for ``value``.

        Duplicate positions are kept as-is.
        """
        data = self._to_bytes(value)
        m = self._size
        first, second, third = (hasher(data) % m for hasher in HASHERS)
        return first, second, third

    def bits_set(self) -> int:
        """Count the bits currently set."""
        return sum(bin(byte).count("1") for byte in self._bit_array)

    def _to_bytes(self, value: T) -> bytes:
        if self._encoder is None:
            return as_bytes(value)
        encoded = self._encoder(value)
        if not isinstance(encoded, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"encoder must return a bytes-like object, got {type(encoded).__name__}"
            )
        return bytes(encoded)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bits={self._size}, bits_set={self.bits_set()})"
