"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Message:
    """One chat message as seen by the trigger engine."""

    id: int
    text: str
    timestamp: float
    subtype: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """Rich attachment posted next to a notification."""

    title: str
    image_url: Optional[str] = None
    fallback: Optional[str] = None


@dataclass(frozen=True)
class Track:
    """Track currently loaded on the speaker."""

    artist: str
    title: str

    @property
    def display(self) -> str:
        return f"{self.artist} - {self.title}"


@dataclass(frozen=True)
class SentimentScore:
    """Positive and negative scores, both reported as non-negative numbers."""

    positive: float
    negative: float


class ReactionError(Exception):
    """Expected, user-facing failure raised by a reaction after it notified the chat."""
