"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from telethon.tl.custom import Message as TelegramMessage

from core.models import Message

LOGGER = logging.getLogger(__name__)


def display_name(user: Any) -> Optional[str]:
    """Return a human-friendly name for a Telegram user entity."""

    username = getattr(user, "username", None)
    if isinstance(username, str) and username:
        return username
    first = getattr(user, "first_name", None)
    last = getattr(user, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    return None


class UserDirectory:
    """User id -> display name lookup, with a cache filled as senders appear."""

    def __init__(self) -> None:
        self.names: dict[int, str] = {}

    def remember(self, user: Any) -> None:
        user_id = getattr(user, "id", None)
        name = display_name(user)
        if user_id is not None and name:
            self.names[user_id] = name

    async def load(self, client, entity) -> None:
        """Prefill names from the channel's participants."""

        try:
            participants = await client.get_participants(entity)
        except Exception:
            # Broadcast channels hide their members from non-admins.
            LOGGER.warning("Could not list channel participants; names are learned from senders")
            return
        for user in participants:
            self.remember(user)
        LOGGER.info("%s channel members are known", len(self.names))


def subtype_for(message: TelegramMessage) -> Optional[str]:
    """Classify messages that must never trigger reactions."""

    if getattr(message, "action", None) is not None:
        return "service"
    sender = getattr(message, "sender", None)
    # Our own posts come back as outgoing messages on the next fetch.
    if getattr(message, "out", False) or getattr(sender, "bot", False) or getattr(message, "via_bot_id", None):
        return "bot_message"
    return None


def build_message(message: TelegramMessage, users: Optional[UserDirectory] = None) -> Message:
    """Build a core Message from a Telethon Message.

    Telegram dates only have one-second resolution, while message ids are
    strictly increasing per chat, so the id is used as the ordering timestamp.
    """

    sender = getattr(message, "sender", None)
    if users is not None and sender is not None:
        users.remember(sender)

    return Message(
        id=message.sender_id,
        text=message.raw_text or "",
        timestamp=float(message.id),
        subtype=subtype_for(message),
    )
