"""Sonos playback adapter.

SoCo talks to the speaker with blocking UPnP requests, so every call runs in a
worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import soco
from soco.discovery import by_name

from core.models import Track

LOGGER = logging.getLogger(__name__)


def find_speaker(speaker_ip: Optional[str] = None, speaker_name: Optional[str] = None) -> soco.SoCo:
    """Return the configured speaker, by address or by zone name."""

    if speaker_ip:
        return soco.SoCo(speaker_ip)
    if speaker_name:
        speaker = by_name(speaker_name)
        if speaker is None:
            raise RuntimeError(f"No Sonos speaker named {speaker_name!r} found on the network")
        return speaker
    raise RuntimeError("sonos.speaker_ip or sonos.speaker_name is required")


class SonosPlayback:
    """PlaybackPort backed by a single SoCo speaker."""

    def __init__(self, speaker: soco.SoCo) -> None:
        self._speaker = speaker

    async def play_uri(self, uri: str) -> None:
        LOGGER.info("Playing %s", uri)
        await asyncio.to_thread(self._speaker.play_uri, uri)

    async def next_track(self) -> None:
        await asyncio.to_thread(self._speaker.next)

    async def previous_track(self) -> None:
        await asyncio.to_thread(self._speaker.previous)

    async def pause(self) -> None:
        await asyncio.to_thread(self._speaker.pause)

    async def play(self) -> None:
        await asyncio.to_thread(self._speaker.play)

    async def set_volume(self, volume: int) -> None:
        def _set() -> None:
            self._speaker.volume = volume

        await asyncio.to_thread(_set)

    async def get_volume(self) -> int:
        return await asyncio.to_thread(lambda: int(self._speaker.volume))

    async def current_track(self) -> Track:
        info = await asyncio.to_thread(self._speaker.get_current_track_info)
        return Track(artist=info.get("artist") or "", title=info.get("title") or "")
