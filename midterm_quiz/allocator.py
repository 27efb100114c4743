"""Proportional allocation of an exam's question budget across categories."""
from __future__ import annotations

import logging
import math
from typing import Sequence

_log = logging.getLogger("midterm_quiz.allocator")

# Smallest share any category gets, capped at the category's own size.
ALLOCATION_FLOOR = 8


class AllocationError(ValueError):
    """The allocator could not reach the requested total."""

    def __init__(self, counts: list[int], target: int):
        self.counts = counts
        self.target = target
        super().__init__(
            f"allocation sums to {sum(counts)}, cannot reach target {target}"
        )


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def allocate_question_counts(
    term_counts: Sequence[int],
    target: int,
    floor: int = ALLOCATION_FLOOR,
    strict: bool = False,
) -> list[int]:
    """Split *target* questions across categories in proportion to their size.

    Each category gets ``round(n / total * target)``, raised to at least
    ``min(floor, n)`` and never above ``n``.  A shortfall is topped up
    round-robin from the first category, skipping categories already asking
    for all their terms; an excess is trimmed from the first category still
    above its floor.  When the target cannot be met (every category at its
    floor, or the bank too small) the inexact counts are returned with a
    warning, or ``AllocationError`` is raised when *strict* is set.

    The capacity cap and the full-category skip only change the result when
    the bank holds fewer terms than *target*; an uncapped top-up would keep
    adding to categories past their size.
    """
    if not term_counts:
        return []
    total = sum(term_counts)
    if total == 0:
        return [0] * len(term_counts)

    minimums = [min(floor, n) for n in term_counts]
    counts = [
        min(max(round_half_up(n / total * target), lo), n)
        for n, lo in zip(term_counts, minimums)
    ]

    s = sum(counts)
    i = 0
    while s < target and any(c < n for c, n in zip(counts, term_counts)):
        j = i % len(counts)
        i += 1
        if counts[j] >= term_counts[j]:
            continue
        counts[j] += 1
        s += 1

    while s > target:
        idx = next((j for j, c in enumerate(counts) if c > minimums[j]), None)
        if idx is None:
            break
        counts[idx] -= 1
        s -= 1

    if s != target:
        if strict:
            raise AllocationError(counts, target)
        _log.warning("Allocation sums to %d, wanted %d", s, target)
    else:
        _log.debug("Allocated %d questions: %s", target, counts)
    return counts
