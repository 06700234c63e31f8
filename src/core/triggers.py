"""Trigger registry (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Awaitable, Callable, Iterable, Iterator, List, Tuple

from core.models import Message

Action = Callable[[Message], Awaitable[None]]


@dataclass(frozen=True)
class Trigger:
    """Compiled trigger: a human-readable label, a pattern, and its reaction."""

    label: str
    pattern: re.Pattern
    action: Action


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a trigger pattern; every trigger matches case-insensitively.

    Anchored patterns end in ``\\Z``: ``$`` would also accept a trailing newline.
    """

    return re.compile(pattern, re.IGNORECASE)


def synonyms_pattern(words: Iterable[str]) -> re.Pattern:
    """Return a pattern matching the whole text against any of the given words.

    Words are regex fragments (``"next[!]*"``), so callers escape literal
    input themselves.
    """

    return compile_pattern("^(" + "|".join(words) + ")\\Z")


class TriggerRegistry:
    """Ordered, read-only sequence of triggers.

    Order only matters for ``labels()`` (the help listing); matching is
    evaluated independently for every entry.
    """

    def __init__(self, triggers: Iterable[Trigger]) -> None:
        self._triggers: Tuple[Trigger, ...] = tuple(triggers)

    def __iter__(self) -> Iterator[Trigger]:
        return iter(self._triggers)

    def __len__(self) -> int:
        return len(self._triggers)

    def __getitem__(self, index: int) -> Trigger:
        return self._triggers[index]

    def labels(self) -> List[str]:
        return [trigger.label for trigger in self._triggers]
