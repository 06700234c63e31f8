"""Random phrase helpers for chatter reactions."""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

WOOTS = [
    "woot",
    "w00t",
    "WOOT!",
    "wooooot",
    "yeah!",
    "hooray",
    "wahoo",
    "yippee",
    "\\o/",
    "huzzah",
    "booyah",
    "cowabunga",
]


def from_list(options: Sequence[T], rng: Optional[random.Random] = None) -> T:
    return (rng or random).choice(options)


def woot(rng: Optional[random.Random] = None) -> str:
    return from_list(WOOTS, rng)
