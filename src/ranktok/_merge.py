"""
Core byte pair merge operations.

``byte_pair_merge`` partitions a byte sequence into the spans produced by
repeatedly applying the lowest-rank adjacent merge (ties broken leftmost)
until no adjacent pair of spans has a rank.

Naive algorithm: O(n^2), rescans every adjacent pair after each merge.
Current implementation: O(n log n)

Spans live in an arena (a list indexed by start offset) linked by index into
a doubly linked list. Pending merges sit in a ``heapq`` min-heap keyed on
``(rank, start)``. ``heapq`` cannot remove or re-key an arbitrary entry, so
nodes carry flags and entries are checked when popped instead:

- ``deleted``: the node was absorbed by its left neighbour, or can no longer
  merge rightward. Its entry is dropped on extraction.
- ``updated``: the node's merge rank grew since it was pushed. The entry is
  re-pushed with ``updated_rank`` on extraction.
- ``removed``: the node has no live entry in the heap.
"""

import heapq
from dataclasses import dataclass

from typing_extensions import deprecated

from .types import Rank, RankTable, Span


@dataclass(slots=True)
class _MergeNode:
    """Span of the input plus the rank of merging it with its right neighbour."""

    start: int
    end: int
    prev: int
    next: int
    rank: Rank | None = None
    updated_rank: Rank | None = None
    deleted: bool = False
    updated: bool = False
    removed: bool = True


def byte_pair_merge(piece: bytes, ranks: RankTable) -> list[Span]:
    """
    Split ``piece`` into maximal greedily merged spans.

    :param piece: Byte sequence to partition.
    :param ranks: Mapping of token bytes to rank; lower ranks merge first.
    :return: Ordered, non-overlapping ``(start, end)`` spans covering ``piece``.
    """
    n = len(piece)
    if n < 2:
        return [(0, n)] if n else []

    # node index == node start, starts never move
    nodes = [
        _MergeNode(start=i, end=i + 1, prev=i - 1, next=i + 1 if i + 1 < n else -1)
        for i in range(n)
    ]

    heap: list[tuple[Rank, int]] = []
    for i in range(n - 1):
        rank = ranks.get(piece[i : i + 2])
        if rank is None:
            continue
        node = nodes[i]
        node.rank = rank
        node.removed = False
        heap.append((rank, i))
    heapq.heapify(heap)

    while heap:
        rank, start = heapq.heappop(heap)
        node = nodes[start]

        # superseded by a fresher entry for the same node
        if node.removed or rank != node.rank:
            continue

        # lazy deletion
        if node.deleted:
            node.removed = True
            continue

        # lazy update
        if node.updated:
            node.rank = node.updated_rank
            node.updated = False
            heapq.heappush(heap, (node.rank, start))
            continue

        node.removed = True

        # absorb the right neighbour
        right = nodes[node.next]
        right.deleted = True
        node.end = right.end
        node.next = right.next
        node.rank = None

        if node.next != -1:
            nodes[node.next].prev = start
            new_rank = ranks.get(piece[start : nodes[node.next].end])
            if new_rank is not None:
                node.rank = new_rank
                node.removed = False
                heapq.heappush(heap, (new_rank, start))

        if node.prev != -1:
            _refresh_prev(nodes[node.prev], ranks.get(piece[node.prev : node.end]), heap)

    spans: list[Span] = []
    idx = 0
    while idx != -1:
        node = nodes[idx]
        spans.append((node.start, node.end))
        idx = node.next
    return spans


def _refresh_prev(
    prev: _MergeNode, new_rank: Rank | None, heap: list[tuple[Rank, int]]
) -> None:
    """Re-rank the node left of a merge against the merged span."""
    if new_rank is None:
        # cannot merge rightward anymore, dropped when its entry is popped
        prev.deleted = True
        return

    prev.deleted = False
    if prev.removed:
        prev.rank = new_rank
        prev.updated = False
        prev.removed = False
        heapq.heappush(heap, (new_rank, prev.start))
    elif new_rank == prev.rank:
        prev.updated = False
    elif new_rank > prev.rank:
        # pending entry pops early and is re-pushed with the real rank
        prev.updated = True
        prev.updated_rank = new_rank
    else:
        # pending entry would pop too late, push now and let it go stale
        prev.rank = new_rank
        prev.updated = False
        heapq.heappush(heap, (new_rank, prev.start))


def byte_pair_encode(piece: bytes, ranks: RankTable) -> list[Rank]:
    """
    Encode a byte sequence into ranks using ``byte_pair_merge``.

    Spans without a rank are left out of the result.

    :param piece: Byte sequence to encode.
    :param ranks: Mapping of token bytes to rank.
    :return: Ranks of the merged spans in input order.
    """
    if len(piece) == 1:
        rank = ranks.get(piece)
        return [] if rank is None else [rank]

    tokens: list[Rank] = []
    for start, end in byte_pair_merge(piece, ranks):
        rank = ranks.get(piece[start:end])
        if rank is not None:
            tokens.append(rank)
    return tokens


@deprecated(
    "Reference implementation for documentation only. Use `byte_pair_merge()` instead."
)
def slow_byte_pair_merge(piece: bytes, ranks: RankTable) -> list[Span]:
    """
    Partition ``piece`` by rescanning every adjacent pair after each merge.

    Naiive algorithm: O(n^2). Produces the same spans as ``byte_pair_merge``.
    """
    spans: list[Span] = [(i, i + 1) for i in range(len(piece))]

    while len(spans) > 1:
        best: tuple[Rank, int] | None = None
        for i in range(len(spans) - 1):
            rank = ranks.get(piece[spans[i][0] : spans[i + 1][1]])
            # strict comparison keeps the leftmost pair on ties
            if rank is not None and (best is None or rank < best[0]):
                best = (rank, i)
        if best is None:
            break
        i = best[1]
        spans[i : i + 2] = [(spans[i][0], spans[i + 1][1])]

    return spans
