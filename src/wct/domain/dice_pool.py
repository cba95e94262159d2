"""Dice pool grouping helpers."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from wct.core.types import DICE_BUCKETS, DiceBucket

POOL_SIZE = 6
MIN_FACE = 1
MAX_FACE = 6

_BUCKET_WEIGHTS: Dict[DiceBucket, int] = {"singles": 1, "doubles": 2, "triples": 3, "quads": 4}


@dataclass(slots=True)
class DicePool:
    """Face values of a warband's roll, grouped by how many dice share them."""

    singles: List[int] = field(default_factory=list)
    doubles: List[int] = field(default_factory=list)
    triples: List[int] = field(default_factory=list)
    quads: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.singles or self.doubles or self.triples or self.quads)

    def bucket(self, name: DiceBucket) -> List[int]:
        if name not in _BUCKET_WEIGHTS:
            raise KeyError(name)
        return getattr(self, name)

    def dice_count(self) -> int:
        """
        Return how many dice the pool accounts for.

        Quads are weighted as four even when the face came up five or six
        times, so a roll like [4, 4, 4, 4, 4, 1] reports 5.
        """
        return sum(len(self.bucket(name)) * _BUCKET_WEIGHTS[name] for name in DICE_BUCKETS)

    def bucket_of(self, face: int) -> DiceBucket | None:
        for name in DICE_BUCKETS:
            if face in self.bucket(name):
                return name
        return None


def classify_dice(values: Iterable[int]) -> DicePool:
    """
    Group rolled faces by occurrence count.

    Every distinct face lands in exactly one bucket: seen once -> singles,
    twice -> doubles, three times -> triples, four or more -> quads.
    Buckets hold face values in ascending order.
    """
    counts: Counter[int] = Counter()
    for value in values:
        if not MIN_FACE <= value <= MAX_FACE:
            raise ValueError(f"Die face {value} is outside {MIN_FACE}-{MAX_FACE}.")
        counts[value] += 1

    pool = DicePool()
    for face in sorted(counts):
        count = counts[face]
        if count == 1:
            pool.singles.append(face)
        elif count == 2:
            pool.doubles.append(face)
        elif count == 3:
            pool.triples.append(face)
        else:
            pool.quads.append(face)
    return pool
