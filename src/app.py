"""Application entry point for the jukebot channel poller."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.afinn_sentiment import AfinnSentiment
from adapters.file_server import MediaFileServer
from adapters.giphy import GiphyClient
from adapters.lyrics_ovh import LyricsOvhClient
from adapters.sonos_playback import SonosPlayback, find_speaker
from adapters.sqlite_storage import SQLiteStorage
from adapters.telegram_chat import TelegramChat
from adapters.telegram_mapper import UserDirectory
from client import build_client
from core.config import PollConfig
from core.dispatcher import Dispatcher
from core.offsets import OffsetTracker, channel_key
from core.poll_loop import PollLoop
from get_session import authorize
from reactions import BotContext, MusicReactions, Services, build_registry

NAME = "JUKEBOT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/jukebot.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # Telethon is chatty at INFO about its own connection handling.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))


def _channel_ref(raw: Any) -> Any:
    """Accept "@name", a numeric id, or a numeric id given as a string."""

    if isinstance(raw, str) and raw.lstrip("-").isdigit():
        return int(raw)
    return raw


async def _resolve_channel(client) -> Any:
    if not settings.CHANNEL:
        raise RuntimeError("config.json must set 'channel'")
    try:
        return await client.get_entity(_channel_ref(settings.CHANNEL))
    except (ValueError, TypeError) as exc:
        raise RuntimeError(f"Cannot resolve channel {settings.CHANNEL!r}") from exc


def _build_services(chat: TelegramChat) -> Services:
    giphy_key = os.getenv("GIPHY_API_KEY")
    if not giphy_key:
        raise RuntimeError("GIPHY_API_KEY is required in environment")

    speaker = find_speaker(settings.SONOS_SPEAKER_IP, settings.SONOS_SPEAKER_NAME)
    logging.getLogger(__name__).info("Using Sonos speaker at %s", speaker.ip_address)

    return Services(
        chat=chat,
        playback=SonosPlayback(speaker),
        images=GiphyClient(giphy_key, timeout=settings.GIPHY_TIMEOUT_SECONDS, rating=settings.GIPHY_RATING),
        lyrics=LyricsOvhClient(settings.LYRICS_BASE_URL, timeout=settings.LYRICS_TIMEOUT_SECONDS),
        sentiment=AfinnSentiment(),
    )


async def _serve(client) -> None:
    logger = logging.getLogger(__name__)

    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()

    channel = await _resolve_channel(client)
    users = UserDirectory()
    await users.load(client, channel)
    chat = TelegramChat(client, channel, users)
    services = _build_services(chat)

    file_server = None
    media_base_url = None
    if settings.FILE_SERVER_ENABLED:
        os.makedirs(settings.MEDIA_DIR, exist_ok=True)
        file_server = MediaFileServer(settings.MEDIA_DIR, settings.FILE_SERVER_HOST, settings.FILE_SERVER_PORT)
        await file_server.start()
        media_base_url = file_server.base_url()

    context = BotContext(bot_name=settings.BOT_NAME, users=users.names, media_base_url=media_base_url)
    registry = build_registry(MusicReactions(context, services), settings.BOT_NAME)
    logger.info("%s triggers are registered", len(registry))

    dispatcher = Dispatcher(registry)
    poll_loop = PollLoop(
        history=chat,
        tracker=OffsetTracker(storage, key=channel_key(channel.id)),
        dispatcher=dispatcher,
        config=PollConfig(
            interval_seconds=settings.POLL_INTERVAL_SECONDS,
            history_count=settings.HISTORY_COUNT,
            replay_history_on_first_run=settings.REPLAY_HISTORY_ON_FIRST_RUN,
        ),
    )
    await poll_loop.start()

    await chat.post_message(f"{settings.BOT_NAME} has entered the building")
    logger.info("Connected to Telegram. Polling every %ss...", settings.POLL_INTERVAL_SECONDS)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    poll_task = asyncio.create_task(poll_loop.run_forever())
    await stop.wait()
    poll_task.cancel()

    # Reactions still in flight are not awaited; only the farewell is.
    try:
        await chat.post_message(f"{settings.BOT_NAME} has left the building")
    except Exception:
        logger.exception("Failed to post farewell message")

    if file_server is not None:
        await file_server.stop()
    logger.info("Stopped with watermark %s and %s reaction(s) in flight", poll_loop.watermark, dispatcher.pending)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting jukebot")

    client = build_client()
    client.loop.run_until_complete(client.connect())
    client.loop.run_until_complete(authorize(client))
    try:
        client.loop.run_until_complete(_serve(client))
    finally:
        client.loop.run_until_complete(client.disconnect())


def _login() -> None:
    _print_banner()
    _configure_logging()
    client = build_client()

    async def _run_login() -> None:
        await client.connect()
        await authorize(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_login())


def _dialog_key(dialog: Any) -> str:
    entity = getattr(dialog, "entity", None)
    username = getattr(entity, "username", None)
    if username:
        return f"@{str(username).lower()}"
    return str(getattr(dialog, "id", None) or getattr(entity, "id", None))


async def _list_channels(client) -> None:
    dialogs = []
    async for dialog in client.iter_dialogs():
        # Only group contexts can host a shared music channel.
        if dialog.is_user:
            continue
        dialogs.append(dialog)

    if not dialogs:
        print("No group or channel dialogs found.")
        return

    for index, dialog in enumerate(dialogs, start=1):
        print(f"{index}. {dialog.name} | {_dialog_key(dialog)}")


def _channels() -> None:
    _print_banner()
    client = build_client()

    async def _run_channels() -> None:
        await client.connect()
        if not await client.is_user_authorized():
            print("Authorization required. Starting login...")
            await authorize(client)
        await _list_channels(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_channels())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="jukebot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start polling the configured channel")
    subparsers.add_parser("login", help="Log in to Telegram and store the session")
    subparsers.add_parser("channels", help="List groups and channels with the key to put in config.json")

    args = parser.parse_args(argv)
    if args.command == "login":
        _login()
        return
    if args.command == "channels":
        _channels()
        return
    _run()


if __name__ == "__main__":
    main()
