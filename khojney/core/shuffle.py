"""Random permutation helper for question and option order."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a new list with the items in uniformly random order.

    The input is never mutated. Pass a seeded ``random.Random`` to make the
    order reproducible.
    """
    result = list(items)
    if len(result) < 2:
        return result
    (rng or random).shuffle(result)
    return result
