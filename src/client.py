"""Telethon client for the account jukebot posts as.

The session file lives next to ``jukebot.db`` in the project root, so the
login survives no matter which directory the bot is started from.
"""

from __future__ import annotations

import logging
import os
from typing import Tuple

from dotenv import load_dotenv
from telethon import TelegramClient

import settings

LOGGER = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "jukebot"


def session_path(name: str) -> str:
    """Anchor a relative session name at the project root."""

    if os.path.isabs(name):
        return name
    return os.path.join(settings.PROJECT_ROOT, name)


def read_credentials() -> Tuple[int, str]:
    api_id = os.getenv("API_ID", "").strip()
    api_hash = os.getenv("API_HASH", "").strip()
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")
    if not api_id.isdigit():
        raise RuntimeError(f"API_ID must be numeric, got {api_id!r}")
    return int(api_id), api_hash


def build_client() -> TelegramClient:
    load_dotenv()
    api_id, api_hash = read_credentials()
    path = session_path(os.getenv("SESSION_NAME") or DEFAULT_SESSION_NAME)
    LOGGER.info("Using Telegram session %s.session", path)
    return TelegramClient(path, api_id, api_hash)
