"""Telegram channel adapter.

Reads recent channel history and posts the bot's messages back to the same
channel through the Telethon client.
"""

from __future__ import annotations

import logging

from adapters.notification_formatting import MESSAGE_LIMIT, clip, format_attachment_post, format_code_block
from adapters.telegram_mapper import UserDirectory, build_message
from core.models import Attachment, Message

LOGGER = logging.getLogger(__name__)


class TelegramChat:
    """HistoryPort and NotifierPort for a single Telegram channel."""

    # Telethon's get_messages returns the most recent message first.
    newest_first = True

    def __init__(self, client, channel, users: UserDirectory) -> None:
        self._client = client
        self._channel = channel
        self._users = users

    async def fetch_history(self, count: int) -> list[Message]:
        """Return the ``count`` most recent channel messages, newest first."""

        messages = await self._client.get_messages(self._channel, limit=count)
        return [build_message(message, self._users) for message in messages]

    async def post_message(self, text: str) -> None:
        """Post plain bot chatter as a code block."""

        await self._client.send_message(
            self._channel,
            clip(format_code_block(text), MESSAGE_LIMIT),
            parse_mode="md",
        )

    async def post_message_with_attachment(self, text: str, attachment: Attachment) -> None:
        """Post Markdown text, sending the attachment image as media when present."""

        body, image_url = format_attachment_post(text, attachment)
        if image_url:
            LOGGER.debug("Sending %s as media", image_url)
            await self._client.send_file(self._channel, image_url, caption=body, parse_mode="md")
            return
        await self._client.send_message(self._channel, body, parse_mode="md", link_preview=False)
