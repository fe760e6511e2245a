"""Fixed triple of 64-bit byte hashers used for index derivation.

Three independent, unseeded hash families:

* **FNV-1a 64** for small keys.
* **Fx hash** (word-at-a-time rotate/xor/multiply) for raw speed.
* **xxHash64** as the general-purpose default. The builtin ``hash()`` is salted
  per interpreter process, so it cannot give a stable index triple.
"""
from __future__ import annotations

from typing import Protocol, Tuple

import xxhash

_MASK64 = (1 << 64) - 1

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3

_FX_SEED64 = 0x517CC1B727220A95


class ByteHasher(Protocol):
    """Maps a byte sequence to an unsigned 64-bit digest."""

    def __call__(self, data: bytes) -> int:
        ...


def fnv1a_64(data: bytes) -> int:
    """FNV-1a 64-bit hash of ``data``."""

    h = _FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV64_PRIME) & _MASK64
    return h


def _fx_step(state: int, word: int) -> int:
    rotated = ((state << 5) | (state >> 59)) & _MASK64
    return ((rotated ^ word) * _FX_SEED64) & _MASK64


def fx_hash64(data: bytes) -> int:
    """Fx hash of ``data``.

    Consumes little-endian 8-byte words, then a single 4-byte word if at least
    four bytes remain, then the trailing bytes one at a time.
    """

    state = 0
    view = memoryview(data)
    offset = 0
    length = len(view)

    while length - offset >= 8:
        state = _fx_step(state, int.from_bytes(view[offset:offset + 8], "little"))
        offset += 8
    if length - offset >= 4:
        state = _fx_step(state, int.from_bytes(view[offset:offset + 4], "little"))
        offset += 4
    for byte in view[offset:]:
        state = _fx_step(state, byte)
    return state


def default_hash64(data: bytes) -> int:
    """General-purpose default hash: unseeded xxHash64."""

    return xxhash.xxh64(data, seed=0).intdigest()


HASHERS: Tuple[ByteHasher, ByteHasher, ByteHasher] = (fnv1a_64, fx_hash64, default_hash64)
NUM_HASHES = len(HASHERS)
