"""Unit tests for the triple-hash Bloom filter."""

import pytest

from bf_triple.bloom_filter import BloomFilter, Membership, as_bytes
from bf_triple.config import BloomFilterConfig


def test_bloom_filter_does_not_provide_false_negatives():
    """Inserted keys are always reported as possibly present."""
    bf = BloomFilter.new()
    keys = ["Test 1", "Other Test", "What about this long one?"]
    for key in keys:
        bf.insert(key)

    for key in keys:
        assert bf.contains(key) is Membership.POSSIBLY_PRESENT


def test_bloom_filter_empty_provides_absent():
    """A fresh filter answers absent for everything."""
    bf = BloomFilter.new()
    keys = ["This key ain't there", "Testing123", "What about this key right here?"]

    for key in keys:
        assert bf.contains(key) is Membership.ABSENT


def test_bloom_filter_default_size():
    bf = BloomFilter.new()
    assert bf.size == 1024
    assert bf.num_hashes == 3
    assert len(bf.bit_array) == 128
    assert bf.bits_set() == 0


def test_bloom_filter_with_config_size():
    bf = BloomFilter.with_config(BloomFilterConfig(bits=13))
    assert bf.size == 13
    # 13 bits need two bytes
    assert len(bf.bit_array) == 2


def test_bloom_filter_zero_bits_rejected():
    """Zero capacity fails at construction, not at first use."""
    with pytest.raises(ValueError, match="bits must be positive"):
        BloomFilter.with_config(BloomFilterConfig(bits=0))


def test_bloom_filter_no_false_negatives_many_keys():
    bf = BloomFilter.with_config(BloomFilterConfig(bits=10_000))
    keys = [f"key{i}".encode() for i in range(500)]
    bf.update(keys)

    for key in keys:
        assert bf.contains(key) is Membership.POSSIBLY_PRESENT, f"False negative for {key}"


def test_bloom_filter_hash_indices_deterministic():
    bf = BloomFilter.new()
    first = bf.hash_indices("determinism")
    second = bf.hash_indices("determinism")

    assert first == second
    assert len(first) == 3
    assert all(0 <= idx < bf.size for idx in first)


def test_bloom_filter_hash_indices_same_across_instances():
    """Indices depend only on the value and the capacity."""
    a = BloomFilter.with_config(BloomFilterConfig(bits=777))
    b = BloomFilter.with_config(BloomFilterConfig(bits=777))
    b.insert("unrelated")

    assert a.hash_indices(b"payload") == b.hash_indices(b"payload")


def test_bloom_filter_hash_indices_do_not_mutate():
    bf = BloomFilter.new()
    bf.hash_indices("value")
    bf.contains("value")
    assert bf.bits_set() == 0


def test_bloom_filter_insert_sets_hash_indices():
    bf = BloomFilter.with_config(BloomFilterConfig(bits=4096))
    bf.insert("value")

    indices = set(bf.hash_indices("value"))
    assert bf.bits_set() == len(indices)
    for idx in indices:
        assert bf.bit_array[idx >> 3] & (1 << (idx & 7))


def test_bloom_filter_duplicate_inserts_are_idempotent():
    bf = BloomFilter.new()
    bf.insert("duplicate_key")
    snapshot = bytes(bf.bit_array)

    bf.insert("duplicate_key")
    bf.insert("duplicate_key")

    assert bytes(bf.bit_array) == snapshot
    assert bf.contains("duplicate_key") is Membership.POSSIBLY_PRESENT


def test_bloom_filter_monotonic():
    """Once possibly present, a key stays possibly present."""
    bf = BloomFilter.with_config(BloomFilterConfig(bits=64))
    bf.insert("first")
    assert bf.contains("first") is Membership.POSSIBLY_PRESENT

    for i in range(200):
        bf.insert(f"other{i}")
        assert bf.contains("first") is Membership.POSSIBLY_PRESENT


def test_bloom_filter_single_bit_capacity():
    """With one bit every index collapses to zero."""
    bf = BloomFilter.with_config(BloomFilterConfig(bits=1))
    assert bf.hash_indices("anything") == (0, 0, 0)
    assert bf.contains("anything") is Membership.ABSENT

    bf.insert("anything")

    for key in ["anything", "something else", "", b"\x00\xff"]:
        assert bf.contains(key) is Membership.POSSIBLY_PRESENT


def test_bloom_filter_empty_value():
    bf = BloomFilter.new()
    assert bf.contains(b"") is Membership.ABSENT
    bf.insert(b"")
    assert bf.contains("") is Membership.POSSIBLY_PRESENT


def test_bloom_filter_binary_and_large_keys():
    bf = BloomFilter.with_config(BloomFilterConfig(bits=8192))
    keys = [
        b"\x00\x01\x02\x03",
        b"\xFF\xFE\xFD\xFC",
        b"\x00",
        b"x" * 1000,
        b"y" * 5003,
    ]
    bf.update(keys)

    for key in keys:
        assert bf.contains(key) is Membership.POSSIBLY_PRESENT


def test_bloom_filter_byte_views_agree():
    """str, bytes, bytearray and memoryview with equal bytes share indices."""
    bf = BloomFilter.new()
    expected = bf.hash_indices(b"same")

    assert bf.hash_indices("same") == expected
    assert bf.hash_indices(bytearray(b"same")) == expected
    assert bf.hash_indices(memoryview(b"same")) == expected


def test_bloom_filter_rejects_values_without_byte_view():
    bf = BloomFilter.new()
    with pytest.raises(TypeError, match="byte view"):
        bf.insert(12345)
    with pytest.raises(TypeError, match="byte view"):
        bf.contains(object())


def test_bloom_filter_custom_encoder():
    def encode(value: int) -> bytes:
        return value.to_bytes(8, "big", signed=True)

    bf = BloomFilter.with_config(BloomFilterConfig(bits=2048), encoder=encode)
    for i in range(-50, 50):
        bf.insert(i)

    for i in range(-50, 50):
        assert bf.contains(i) is Membership.POSSIBLY_PRESENT
    assert bf.hash_indices(7) == BloomFilter.with_config(BloomFilterConfig(bits=2048)).hash_indices(encode(7))


def test_bloom_filter_encoder_must_return_bytes():
    bf = BloomFilter(encoder=lambda value: str(value))
    with pytest.raises(TypeError, match="bytes-like"):
        bf.insert(1)


def test_membership_is_not_a_boolean():
    with pytest.raises(TypeError):
        bool(Membership.ABSENT)
    with pytest.raises(TypeError):
        if Membership.POSSIBLY_PRESENT:
            pass


def test_membership_possibly_present_property():
    assert Membership.POSSIBLY_PRESENT.possibly_present is True
    assert Membership.ABSENT.possibly_present is False


def test_as_bytes():
    assert as_bytes("héllo") == "héllo".encode("utf-8")
    assert as_bytes(b"raw") == b"raw"
    assert as_bytes(bytearray(b"raw")) == b"raw"
    assert as_bytes(memoryview(b"raw")) == b"raw"


def test_bloom_filter_false_positive_rate_reasonable():
    """10 bits per key with three hashes keeps the FPR low."""
    bf = BloomFilter.with_config(BloomFilterConfig(bits=10_000))
    for i in range(1000):
        bf.insert(f"key{i}")

    false_positives = sum(
        1 for i in range(1000, 3000) if bf.contains(f"key{i}") is Membership.POSSIBLY_PRESENT
    )
    assert false_positives / 2000 < 0.1


def test_bloom_filter_repr():
    bf = BloomFilter.with_config(BloomFilterConfig(bits=16))
    assert repr(bf) == "BloomFilter(bits=16, bits_set=0)"
