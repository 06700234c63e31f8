"""Trigger matching (core domain)."""

from __future__ import annotations

from typing import Iterable, List

from core.models import Message
from core.triggers import Trigger


def matches(message: Message, trigger: Trigger) -> bool:
    """Return True when the trigger's pattern matches the message text.

    Compiled patterns carry no search position between calls, so the same
    pattern object can be shared by every message and every cycle.
    """

    return trigger.pattern.search(message.text) is not None


def matching_triggers(message: Message, triggers: Iterable[Trigger]) -> List[Trigger]:
    """Return every trigger matching the message (not first-match-wins)."""

    return [trigger for trigger in triggers if matches(message, trigger)]
