"""Shared notification formatting helpers.

Keeping formatting here prevents drift between the text and attachment posts
and keeps Telegram's size limits in one place.
"""

from __future__ import annotations

from typing import Optional

from core.models import Attachment

# Telegram limits (characters) for text messages and media captions.
MESSAGE_LIMIT = 4096
CAPTION_LIMIT = 1024

FENCE = "```"
ELLIPSIS = "…"


def format_code_block(text: str) -> str:
    """Wrap plain bot chatter in a monospace block."""

    return f"{FENCE}\n{text}\n{FENCE}"


def clip(text: str, limit: int) -> str:
    """Clip text to ``limit`` characters without leaving a code block open."""

    if len(text) <= limit:
        return text
    # Room for the ellipsis and a closing fence.
    clipped = text[: limit - len(ELLIPSIS) - len(FENCE) - 1] + ELLIPSIS
    if clipped.count(FENCE) % 2:
        clipped += f"\n{FENCE}"
    return clipped


def format_attachment_post(text: str, attachment: Attachment) -> tuple[str, Optional[str]]:
    """Return (body, image_url) for an attachment post.

    With an image the body becomes the media caption; without one the
    attachment title is added under the text when it is not already there.
    """

    if attachment.image_url:
        return clip(text, CAPTION_LIMIT), attachment.image_url

    body = text
    if attachment.title and attachment.title not in text:
        body = f"{text}\n{attachment.title}"
    return clip(body, MESSAGE_LIMIT), None
