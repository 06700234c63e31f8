"""Watermark filtering and persistence (core domain).

The watermark is the highest message timestamp already processed. A message
is eligible for dispatch only when its timestamp is strictly above it, which
keeps every message from being reacted to twice across polling cycles and
restarts.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import AbstractSet, Iterable, Sequence, Tuple

from core.models import Message
from core.ports import KeyValueStorePort

LOGGER = logging.getLogger(__name__)

PERSISTED_KEY = "persisted"


def channel_key(channel_id: int) -> str:
    """Storage key of one chat's watermark; message ids are only ordered within a chat."""

    return f"{PERSISTED_KEY}:{channel_id}"


# Messages the bot (or the platform) authored itself must never re-trigger.
SYNTHETIC_SUBTYPES = frozenset({"bot_message", "service"})


@dataclass(frozen=True)
class FilterResult:
    """Eligible messages (oldest first) and the advanced watermark."""

    eligible: Tuple[Message, ...]
    watermark: float


def filter_new(
    messages: Sequence[Message],
    watermark: float,
    newest_first: bool = True,
    excluded_subtypes: AbstractSet[str] = SYNTHETIC_SUBTYPES,
) -> FilterResult:
    """Return messages newer than ``watermark`` and the new watermark.

    The new watermark is the highest eligible timestamp. With a newest-first
    feed that is the first eligible message; taking the maximum keeps the
    result correct for either ordering.
    """

    eligible = [
        message
        for message in messages
        if message.timestamp > watermark and message.subtype not in excluded_subtypes
    ]
    if newest_first:
        eligible.reverse()

    new_watermark = max((message.timestamp for message in eligible), default=watermark)
    return FilterResult(eligible=tuple(eligible), watermark=new_watermark)


class OffsetTracker:
    """Owns the watermark and its persisted record ``{"timestamp": float}``."""

    def __init__(self, store: KeyValueStorePort, key: str = PERSISTED_KEY) -> None:
        self._store = store
        self._key = key
        self.watermark = 0.0

    def load(self) -> bool:
        """Load the persisted watermark; return False when none was stored."""

        record = self._store.get_item(self._key)
        if not record:
            self.watermark = 0.0
            return False
        self.watermark = float(record.get("timestamp", 0.0))
        return True

    def _persist(self, watermark: float) -> None:
        self._store.set_item(self._key, {"timestamp": watermark})
        self.watermark = watermark

    def advance(self, messages: Sequence[Message], newest_first: bool = True) -> Tuple[Message, ...]:
        """Filter a fetched batch, persist the new watermark, return eligible messages.

        The record is written on every call, even when nothing is eligible,
        so storage always holds the canonical shape.
        """

        result = filter_new(messages, self.watermark, newest_first=newest_first)
        self._persist(result.watermark)
        return result.eligible

    def seed(self, messages: Iterable[Message]) -> None:
        """Skip existing history: move the watermark past every message given."""

        newest = max((message.timestamp for message in messages), default=self.watermark)
        self._persist(max(newest, self.watermark))
        LOGGER.info("Watermark seeded at %s; existing history will not trigger reactions", self.watermark)
