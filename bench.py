"""Benchmark byte_pair_merge() scaling on synthetic inputs of doubling length.

Prints one row per input size:
  Length | Spans | Merge Time | Time / (n log n)

A roughly constant last column confirms O(n log n) behaviour.
"""

import argparse
import logging
import math
import random
import time

from ranktok import byte_pair_merge

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)

log = logging.getLogger("bench")


def build_ranks(rng: random.Random, alphabet: bytes, n_merges: int) -> dict[bytes, int]:
    """Return a rank table of single bytes plus random multi-byte tokens."""
    ranks = {bytes([b]): b for b in range(256)}
    next_rank = 256
    while len(ranks) < 256 + n_merges:
        length = rng.randint(2, 8)
        token = bytes(rng.choice(alphabet) for _ in range(length))
        if token not in ranks:
            ranks[token] = next_rank
            next_rank += 1
    return ranks


def time_merge(piece: bytes, ranks: dict[bytes, int], repeats: int) -> tuple[float, int]:
    """Return best-of-``repeats`` merge time in seconds and the span count."""
    best = math.inf
    n_spans = 0
    for _ in range(repeats):
        start = time.perf_counter()
        n_spans = len(byte_pair_merge(piece, ranks))
        best = min(best, time.perf_counter() - start)
    return best, n_spans


def main() -> None:
    """Run the scaling benchmark and print a table."""
    parser = argparse.ArgumentParser(description="Benchmark byte_pair_merge() scaling.")
    parser.add_argument("--min-len", type=int, default=1_000, help="smallest input length")
    parser.add_argument("--steps", type=int, default=8, help="number of doublings")
    parser.add_argument("--merges", type=int, default=5_000, help="multi-byte tokens in the table")
    parser.add_argument("--repeats", type=int, default=3, help="timed runs per size")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    alphabet = b"abcdefgh"
    ranks = build_ranks(rng, alphabet, args.merges)
    log.info(f"rank table holds {len(ranks):,} tokens")

    print(f"{'Length':>10} | {'Spans':>8} | {'Merge Time':>12} | {'Time / (n log n)':>16}")
    print("-" * 56)
    n = args.min_len
    for _ in range(args.steps):
        piece = bytes(rng.choice(alphabet) for _ in range(n))
        elapsed, n_spans = time_merge(piece, ranks, args.repeats)
        per_unit = elapsed / (n * math.log2(n))
        print(f"{n:>10,} | {n_spans:>8,} | {elapsed * 1000:>9.2f} ms | {per_unit * 1e9:>13.2f} ns")
        n *= 2


if __name__ == "__main__":
    main()
