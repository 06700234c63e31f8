"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for chat, storage, and media adapters so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import Attachment, Message, SentimentScore, Track


class HistoryPort(Protocol):
    """Recent channel history.

    ``newest_first`` is part of the provider contract: it states the order of
    the list returned by ``fetch_history``.
    """

    newest_first: bool

    async def fetch_history(self, count: int) -> list[Message]:
        ...


class NotifierPort(Protocol):
    """Outbound chat notifications."""

    async def post_message(self, text: str) -> None:
        ...

    async def post_message_with_attachment(self, text: str, attachment: Attachment) -> None:
        ...


class KeyValueStorePort(Protocol):
    """Durable, process-local key-value storage."""

    def get_item(self, key: str) -> Optional[dict]:
        ...

    def set_item(self, key: str, value: dict) -> None:
        ...


class PlaybackPort(Protocol):
    """Speaker transport controls."""

    async def play_uri(self, uri: str) -> None:
        ...

    async def next_track(self) -> None:
        ...

    async def previous_track(self) -> None:
        ...

    async def pause(self) -> None:
        ...

    async def play(self) -> None:
        ...

    async def set_volume(self, volume: int) -> None:
        ...

    async def get_volume(self) -> int:
        ...

    async def current_track(self) -> Track:
        ...


class ImageSearchPort(Protocol):
    """Phrase-to-image lookup. Returns an image URL or None on a miss."""

    async def translate(self, phrase: str) -> Optional[str]:
        ...


class LyricsPort(Protocol):
    """Lyrics lookup. Returns the lyric lines or None on a miss."""

    async def get_lyrics(self, artist: str, title: str) -> Optional[list[str]]:
        ...


class SentimentPort(Protocol):
    def analyze(self, text: str) -> SentimentScore:
        ...
