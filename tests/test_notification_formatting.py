from __future__ import annotations

from adapters.notification_formatting import (
    CAPTION_LIMIT,
    MESSAGE_LIMIT,
    clip,
    format_attachment_post,
    format_code_block,
)
from core.models import Attachment


def test_code_block_wraps_text() -> None:
    assert format_code_block("hi") == "```\nhi\n```"


def test_clip_keeps_short_text() -> None:
    assert clip("short", 10) == "short"


def test_clip_closes_open_code_block() -> None:
    text = "**A - B**\n```\n" + "la la la\n" * 1000 + "```"
    clipped = clip(text, MESSAGE_LIMIT)
    assert len(clipped) <= MESSAGE_LIMIT
    assert clipped.count("```") % 2 == 0
    assert "…" in clipped


def test_attachment_without_image_appends_missing_title() -> None:
    body, image_url = format_attachment_post("Now playing", Attachment(title="A - B"))
    assert image_url is None
    assert body == "Now playing\nA - B"


def test_attachment_title_not_repeated() -> None:
    body, _ = format_attachment_post("`A - B`", Attachment(title="A - B"))
    assert body == "`A - B`"


def test_image_caption_is_clipped_to_caption_limit() -> None:
    body, image_url = format_attachment_post("x" * 5000, Attachment(title="t", image_url="https://x/y.gif"))
    assert image_url == "https://x/y.gif"
    assert len(body) <= CAPTION_LIMIT
