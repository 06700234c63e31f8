"""Giphy translate adapter."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

LOGGER = logging.getLogger(__name__)

TRANSLATE_URL = "https://api.giphy.com/v1/gifs/translate"


class GiphyClient:
    """ImageSearchPort backed by Giphy's phrase-to-GIF endpoint."""

    def __init__(self, api_key: str, timeout: float = 10, rating: str = "pg-13") -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._rating = rating

    async def translate(self, phrase: str) -> Optional[str]:
        """Return the original-size GIF URL for a phrase, or None when Giphy has nothing."""

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                TRANSLATE_URL,
                params={"api_key": self._api_key, "s": phrase, "rating": self._rating},
            )
            response.raise_for_status()
            payload = response.json()

        # An empty translation comes back as {"data": []}.
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            return None
        original = (data.get("images") or {}).get("original") or {}
        url = original.get("url")
        if not url:
            LOGGER.info("Giphy has no translation for %r", phrase)
        return url or None
