"""Uniform random permutations and subsets, behind a seedable interface."""
from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class Sampler:
    """Fisher-Yates shuffling over an injectable ``random.Random``.

    Pass ``seed`` (or a prepared ``rng``) to get reproducible draws in tests.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng if rng is not None else random.Random(seed)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a new list with *items* in uniformly random order."""
        a = list(items)
        for i in range(len(a) - 1, 0, -1):
            j = self._rng.randint(0, i)
            a[i], a[j] = a[j], a[i]
        return a

    def sample_without_replacement(self, items: Sequence[T], k: int) -> list[T]:
        """First *k* of a fresh shuffle; the whole shuffle if *k* is too large."""
        return self.shuffle(items)[:max(k, 0)]
