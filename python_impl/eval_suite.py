"""Empirical evaluation of the triple-hash Bloom filter.

Performs a deterministic 80/20 split of unique synthetic items, builds the
filter with the 80% training set, and runs five checks:

1. Membership on the training set (should be all present)
2. False positive rate on the held-out set
3. Collision analysis using simple modifications of held-out items
4. Filter properties and memory usage
5. Insertion and query throughput

Filter size defaults to 10x the number of training items. The hash count is
always 3 (FNV-1a, Fx, xxHash64).

Run with:

    python -m python_impl.eval_suite
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Optional, Tuple

from bf_triple.bloom_filter import BloomFilter, Membership
from bf_triple.config import BloomFilterConfig

logger = logging.getLogger(__name__)

BITS_PER_ITEM = 10


def generate_synthetic_data(n: int = 100_000) -> list[str]:
    """Generate n unique random strings."""
    logger.info("generating %d synthetic items", n)
    # UUIDs are virtually guaranteed to be unique
    return sorted(str(uuid.uuid4()) for _ in range(n))


def build_split(
    words: list[str], bits_per_item: int = BITS_PER_ITEM
) -> Tuple[BloomFilter[str], list[str], list[str]]:
    """Create deterministic 80/20 split and build the bloom filter.

    Returns (bloom_filter, training_words, test_words).
    """
    split = int(len(words) * 0.8)
    train = words[:split]
    test = words[split:]

    filter_size = max(1, len(train) * bits_per_item)
    bloom: BloomFilter[str] = BloomFilter.with_config(BloomFilterConfig(bits=filter_size))
    bloom.update(train)

    return bloom, train, test


def check_membership(bloom: BloomFilter[str], train: list[str]) -> int:
    """Verify all training items are present in the filter.

    Returns the number of missing items (expected 0).
    """
    print("CHECK A: Membership on training set")
    missing = [w for w in train if bloom.contains(w) is Membership.ABSENT]
    print(f"  Training items: {len(train)}")
    print(f"  Missing after insertion: {len(missing)} (expected 0)")
    if missing:
        print(f"  Example missing: {missing[:5]}")
    print()
    return len(missing)


def measure_false_positive_rate(
    bloom: BloomFilter[str], train: list[str], test: list[str]
) -> Optional[float]:
    """Measure empirical false positive rate on held-out items."""
    print("CHECK B: False positive rate on held-out items")
    train_set = set(train)
    held_out = [w for w in test if w not in train_set]

    if not held_out:
        print("  No held-out items available for testing.")
        print()
        return None

    false_positives = sum(1 for w in held_out if bloom.contains(w).possibly_present)
    fpr = false_positives / len(held_out)

    print(f"  Held-out items: {len(held_out)}")
    print(f"  False positives: {false_positives}")
    print(f"  Empirical FPR: {fpr:.6f} ({fpr*100:.4f}%)")
    print()
    return fpr


def collision_analysis(
    bloom: BloomFilter[str], train: list[str], test: list[str]
) -> Optional[float]:
    """Analyze collision rate using simple modifications of held-out items."""
    print("CHECK C: Collision analysis with modified held-out items")
    variants = []
    for word in test[:500]:
        variants.append(word + "x")
        if len(word) > 1:
            variants.append(word[:-1] + "z")
        variants.append("x" + word)

    known = set(train) | set(test)
    variants = [v for v in variants if v not in known]

    if not variants:
        print("  No variants available for testing.")
        print()
        return None

    false_positives = sum(1 for v in variants if bloom.contains(v).possibly_present)
    rate = false_positives / len(variants)

    print(f"  Variants tested: {len(variants)}")
    print(f"  False positives from variants: {false_positives}")
    print(f"  Collision rate: {rate:.6f} ({rate*100:.4f}%)")
    print()
    return rate


def show_properties(bloom: BloomFilter[str], train: list[str]) -> dict:
    """Display filter memory and configuration properties."""
    print("CHECK D: Filter properties")
    bytes_len = len(bloom.bit_array)
    fill_ratio = bloom.bits_set() / bloom.size

    print(f"  Filter size (bits): {bloom.size}")
    print(f"  Filter size (bytes): {bytes_len}")
    print(f"  Filter size (MB): {bytes_len / (1024 * 1024):.2f}")
    print(f"  Number of hash functions: {bloom.num_hashes}")
    print(f"  Bits set: {bloom.bits_set()} ({fill_ratio*100:.2f}%)")
    print(f"  Items inserted: {len(train)}")
    if train:
        print(f"  Bytes per item: {bytes_len / len(train):.4f}")
    print()

    return {
        "size_bits": bloom.size,
        "size_bytes": bytes_len,
        "num_hashes": bloom.num_hashes,
        "fill_ratio": fill_ratio,
    }


def measure_performance(bloom: BloomFilter[str], train: list[str], test: list[str], query_ops: int = 1_000_000) -> dict:
    """Measure insertion and query throughput (ops/sec)."""
    print("CHECK E: Performance benchmarking")

    bench_filter: BloomFilter[str] = BloomFilter.with_config(BloomFilterConfig(bits=bloom.size))

    start_time = time.perf_counter()
    for word in train:
        bench_filter.insert(word)
    insert_time = time.perf_counter() - start_time
    insert_ops = len(train) / insert_time if insert_time > 0 else float("inf")
    print(f"    - Inserted {len(train)} items in {insert_time:.4f} sec")
    print(f"    - Insertion throughput: {insert_ops:,.0f} ops/sec")

    queries = test or train
    if queries:
        repeats = (query_ops // len(queries)) + 1
        queries = (queries * repeats)[:query_ops]

    start_time = time.perf_counter()
    for word in queries:
        bench_filter.contains(word)
    query_time = time.perf_counter() - start_time
    query_ops_per_sec = len(queries) / query_time if query_time > 0 else float("inf")
    print(f"    - Performed {len(queries)} queries in {query_time:.4f} sec")
    print(f"    - Query throughput: {query_ops_per_sec:,.0f} ops/sec")
    print()

    return {
        "insert_count": len(train),
        "insert_time": insert_time,
        "insert_ops_per_sec": insert_ops,
        "query_count": len(queries),
        "query_time": query_time,
        "query_ops_per_sec": query_ops_per_sec,
    }


def run_all(n: int = 100_000, query_ops: int = 1_000_000) -> dict:
    """Run all checks and return the collected metrics."""
    words = generate_synthetic_data(n)

    print("=" * 60)
    print("Running Triple-Hash Bloom Filter Evaluation (80/20 split)")
    print("=" * 60)
    print()

    bloom, train, test = build_split(words)

    metrics = {
        "missing": check_membership(bloom, train),
        "fpr": measure_false_positive_rate(bloom, train, test),
        "collision_rate": collision_analysis(bloom, train, test),
        "properties": show_properties(bloom, train),
        "performance": measure_performance(bloom, train, test, query_ops=query_ops),
    }

    print("=" * 60)
    print("Evaluation completed successfully!")
    print("=" * 60)
    return metrics


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_all()
