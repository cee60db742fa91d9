"""anyOf branch matcher for json-schema-diff.

anyOf is unordered, so old and new branches are paired by how similar they
are rather than by position. The cost of pairing two branches is the number
of changes a full diff between them produces. A pair is only accepted when it
is cheaper than reporting the old branch as removed and the new one as added.

Pairs are chosen greedily: all candidate pairs are ranked by
(cost, old index, new index) and taken in that order whenever both branches
are still free. Identical branches (cost 0) are therefore always paired first,
and ties fall back to the original branch order.

This ranking is global on purpose. Scanning old branches in order and giving
each its cheapest free partner would let an early old branch take a new
branch that a later old branch matches exactly, so the result would depend on
where the branches sit in the list.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeAlias

from loguru import logger


# Given (old index, new index), returns the diff score of pairing those branches.
BranchCostFn: TypeAlias = Callable[[int, int], int]

# Cost of leaving a pair unmatched: one branch removal plus one branch addition.
UNMATCHED_PAIR_COST = 2


@dataclass
class BranchMatching:
    """Result of pairing old anyOf branches with new ones."""

    pairs: list[tuple[int, int]] = field(default_factory=list)  # (old index, new index)
    removed: list[int] = field(default_factory=list)  # old indexes with no partner
    added: list[int] = field(default_factory=list)  # new indexes with no partner


def build_cost_matrix(
    old_count: int,
    new_count: int,
    cost: BranchCostFn,
) -> list[list[int]]:
    """Probe every (old, new) combination."""
    return [[cost(old, new) for new in range(new_count)] for old in range(old_count)]


def match_branches(
    old_count: int,
    new_count: int,
    cost: BranchCostFn,
) -> BranchMatching:
    """Pair old and new branches.

    Args:
        old_count: Number of branches in the old anyOf.
        new_count: Number of branches in the new anyOf.
        cost: Returns the diff score between old branch i and new branch j.

    Returns:
        A BranchMatching with pairs sorted by new index and the unmatched
        indexes on each side in ascending order.
    """
    matrix = build_cost_matrix(old_count, new_count, cost)

    candidates = sorted(
        (matrix[old][new], old, new)
        for old in range(old_count)
        for new in range(new_count)
        if matrix[old][new] < UNMATCHED_PAIR_COST
    )

    matched_old: set[int] = set()
    matched_new: set[int] = set()
    result = BranchMatching()

    for pair_cost, old, new in candidates:
        if old in matched_old or new in matched_new:
            continue
        matched_old.add(old)
        matched_new.add(new)
        result.pairs.append((old, new))
        logger.debug(f"Matched anyOf branch {old} -> {new} (cost {pair_cost})")

    result.pairs.sort(key=lambda pair: pair[1])
    result.removed = [old for old in range(old_count) if old not in matched_old]
    result.added = [new for new in range(new_count) if new not in matched_new]
    return result
