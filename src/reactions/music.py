"""Reactions of the office music bot.

Every reaction announces what it does in the channel itself; the dispatcher
never posts on a reaction's behalf.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import random
import re
from typing import Awaitable, Mapping, Optional, Sequence

from core.models import Attachment, Message, ReactionError
from core.ports import ImageSearchPort, LyricsPort, NotifierPort, PlaybackPort, SentimentPort
from reactions.phrases import woot
from reactions.sentiment import describe_sentiment

LOGGER = logging.getLogger(__name__)

INVALID_VOLUME = 'Invalid volume value: the number should be between 0 and 100. Example: "volume 25"'

_VOLUME_PREFIX = re.compile(r"^vol(ume)* ", re.IGNORECASE)
_LEADING_INT = re.compile(r"^[+-]?\d+")
# "(feat. Bob Marley)"-style suffixes confuse the GIF lookup.
_TITLE_SUFFIX = re.compile(r" \(.*\)")


@dataclass(frozen=True)
class BotContext:
    """Startup-resolved state shared by reactions."""

    bot_name: str
    users: Mapping[int, str]
    media_base_url: Optional[str] = None


@dataclass(frozen=True)
class Services:
    """External clients the reactions drive."""

    chat: NotifierPort
    playback: PlaybackPort
    images: ImageSearchPort
    lyrics: LyricsPort
    sentiment: SentimentPort


def parse_volume(text: str) -> Optional[int]:
    """Return the integer following "vol"/"volume", or None if there is none."""

    argument = _VOLUME_PREFIX.sub("", text, count=1).split(" ")[0]
    match = _LEADING_INT.match(argument)
    return int(match.group(0)) if match else None


class MusicReactions:
    """Reaction callables bound to the bot context and services."""

    def __init__(self, context: BotContext, services: Services, rng: Optional[random.Random] = None) -> None:
        self._context = context
        self._services = services
        self._rng = rng or random.Random()

    def user_name(self, user_id: int) -> str:
        return self._context.users.get(user_id) or str(user_id)

    async def _announce(self, message: Message, request: str) -> None:
        await self._services.chat.post_message(f"{self.user_name(message.id)} requested to {request}.")

    async def _announced(self, message: Message, request: str, command: Awaitable[None]) -> None:
        """Run a speaker command alongside its announcement.

        The command's result is the reaction's outcome; a failed announcement
        is only logged.
        """

        announced, outcome = await asyncio.gather(
            self._announce(message, request), command, return_exceptions=True
        )
        if isinstance(announced, BaseException):
            LOGGER.warning("Could not announce request to %s: %s", request, announced)
        if isinstance(outcome, BaseException):
            raise outcome

    async def failsauce(self, message: Message) -> None:
        if not self._context.media_base_url:
            reason = "The file server is disabled, so wahwahwah.mp3 cannot be played."
            await self._services.chat.post_message(reason)
            raise ReactionError(reason)
        await self._services.playback.play_uri(f"{self._context.media_base_url}/wahwahwah.mp3")

    async def skip_with_prejudice(self, message: Message) -> None:
        await self._announced(
            message, "skip to the next track with great prejudice", self._services.playback.next_track()
        )

    async def previous(self, message: Message) -> None:
        await self._announced(message, "skip to the previous track", self._services.playback.previous_track())

    async def next(self, message: Message) -> None:
        await self._announced(message, "skip to the next track", self._services.playback.next_track())

    async def pause(self, message: Message) -> None:
        await self._announced(message, "pause this track", self._services.playback.pause())

    async def play(self, message: Message) -> None:
        await self._announced(message, "continue playing music", self._services.playback.play())

    async def volume(self, message: Message) -> None:
        volume = parse_volume(message.text)
        if volume is None or not 0 <= volume <= 100:
            await self._services.chat.post_message(INVALID_VOLUME)
            raise ReactionError(INVALID_VOLUME)
        await self._announced(message, f"set the volume to {volume}", self._services.playback.set_volume(volume))

    async def loudness(self, message: Message) -> None:
        volume = await self._services.playback.get_volume()
        await self._services.chat.post_message(f"Playback volume is {volume}.")

    async def whats_playing(self, message: Message) -> None:
        track = await self._services.playback.current_track()
        image_url = await self._services.images.translate(_TITLE_SUFFIX.sub("", track.title))
        if image_url:
            LOGGER.info("GIF for %s: %s", track.display, image_url)
            await self._services.chat.post_message_with_attachment(
                f"`{track.display}`",
                Attachment(title=track.display, image_url=image_url, fallback=track.display),
            )
            return
        await self._services.chat.post_message_with_attachment(
            f"`{track.display}`\nGiphy couldn't translate this track into a GIF :(",
            Attachment(title=track.display),
        )

    async def help(self, labels: Sequence[str]) -> None:
        await self._services.chat.post_message(f"available commands: {', '.join(labels)}")

    async def woot(self, message: Message) -> None:
        text = woot(self._rng)
        if self._rng.random() > 0.2:
            text = f"{text} {woot(self._rng)}"
        await self._services.chat.post_message(text)

    async def lyrics(self, message: Message) -> None:
        track = await self._services.playback.current_track()
        lines = await self._services.lyrics.get_lyrics(track.artist, track.title)
        if not lines:
            # A miss is not a failure: the channel is told and the reaction succeeds.
            await self._services.chat.post_message(
                f"{self._context.bot_name} couldn't find any lyrics for {track.display}"
            )
            return

        text = "\n".join(lines)
        score = self._services.sentiment.analyze(text)
        verdict = describe_sentiment(score, self._context.bot_name, self._rng)
        await self._services.chat.post_message_with_attachment(
            f"**{track.display}**\n```\n{text}\n```\n{verdict}",
            Attachment(title=track.display),
        )
