"""Trigger set of the office music bot."""

from __future__ import annotations

import re

from core.models import Message
from core.triggers import Trigger, TriggerRegistry, compile_pattern, synonyms_pattern
from reactions.music import BotContext, MusicReactions, Services

__all__ = ["BotContext", "MusicReactions", "Services", "build_registry"]


def build_registry(reactions: MusicReactions, bot_name: str) -> TriggerRegistry:
    """Build the registry in help-listing order."""

    async def show_help(message: Message) -> None:
        await reactions.help(registry.labels())

    registry = TriggerRegistry(
        [
            Trigger("failsauce", compile_pattern(r"^failsauce\Z"), reactions.failsauce),
            Trigger("ugh no", compile_pattern(r"^(ugh)*(\s)*(n)+(o)+(!)*\Z"), reactions.skip_with_prejudice),
            Trigger("previous", synonyms_pattern(["prev", "previous"]), reactions.previous),
            Trigger("whats playing", compile_pattern(r"what(')*s playing|giphy.*"), reactions.whats_playing),
            Trigger("next", synonyms_pattern(["next[!]*", "skip[!]*"]), reactions.next),
            Trigger("pause", compile_pattern(r"^pause[!]*\Z"), reactions.pause),
            Trigger("play", compile_pattern(r"^play[!]*\Z"), reactions.play),
            Trigger("volume 0 - 100", compile_pattern(r"^vol(ume)* [0-9]{1,3}.*\Z"), reactions.volume),
            Trigger("shut up", compile_pattern(r"^shut (up|it).*\Z"), reactions.pause),
            Trigger("loudness", compile_pattern(r"^(loudness|how loud).*\Z"), reactions.loudness),
            Trigger("woot", compile_pattern(r"^woo+t.*\Z"), reactions.woot),
            Trigger(
                f"{bot_name} help",
                synonyms_pattern([re.escape(f"{bot_name} help"), "help me", "help"]),
                show_help,
            ),
            Trigger("lyrics", compile_pattern(r"lyrics"), reactions.lyrics),
        ]
    )
    return registry
