"""lyrics.ovh lookup adapter."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.lyrics.ovh/v1"


class LyricsOvhClient:
    """LyricsPort backed by the public lyrics.ovh API."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 15) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _url(self, artist: str, title: str) -> str:
        return f"{self._base_url}/{quote(artist, safe='')}/{quote(title, safe='')}"

    async def get_lyrics(self, artist: str, title: str) -> Optional[list[str]]:
        """Return the lyric lines, or None when the song is unknown."""

        if not artist or not title:
            return None

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(self._url(artist, title))
        if response.status_code == 404:
            LOGGER.info("No lyrics for %s - %s", artist, title)
            return None
        response.raise_for_status()

        lyrics = (response.json().get("lyrics") or "").replace("\r\n", "\n").strip()
        if not lyrics:
            return None
        return lyrics.split("\n")
