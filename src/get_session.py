"""Interactive Telegram login for the account the bot posts as.

``LOGIN_METHOD`` (``qr`` or ``phone``) skips the menu; ``PHONE`` and ``2FA``
skip the matching prompts.
"""

from __future__ import annotations

import asyncio
import logging
import os
from getpass import getpass
from typing import Awaitable, Callable, Dict, Tuple

import qrcode
from telethon import TelegramClient, errors

LOGGER = logging.getLogger(__name__)

QR_ATTEMPTS = 3
QR_TIMEOUT_SECONDS = 60


def _print_qr(url: str) -> None:
    code = qrcode.QRCode(border=1)
    code.add_data(url)
    code.make(fit=True)
    code.print_ascii(invert=True)


async def _login_with_qr(client: TelegramClient) -> None:
    login = await client.qr_login()
    for attempt in range(1, QR_ATTEMPTS + 1):
        print(f"Scan with Telegram > Settings > Devices > Link Desktop Device ({attempt}/{QR_ATTEMPTS})")
        _print_qr(login.url)
        try:
            await login.wait(timeout=QR_TIMEOUT_SECONDS)
            return
        except asyncio.TimeoutError:
            await login.recreate()
    raise RuntimeError("QR code was not scanned in time")


async def _login_with_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    await client.sign_in(phone=phone, code=input("Login code: ").strip())


Login = Callable[[TelegramClient], Awaitable[None]]

# Menu key -> (method name, menu label, login coroutine).
METHODS: Dict[str, Tuple[str, str, Login]] = {
    "1": ("qr", "QR code", _login_with_qr),
    "2": ("phone", "Phone code", _login_with_phone),
}


def choose_login() -> Login:
    by_name = {name: login for name, _, login in METHODS.values()}
    preset = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if preset in by_name:
        return by_name[preset]
    if preset:
        LOGGER.warning("Ignoring unknown LOGIN_METHOD %r", preset)

    while True:
        print("\nLogin methods:")
        for key, (_, label, _) in METHODS.items():
            print(f"[{key}] {label}")
        print("[q] Exit")
        choice = input("jukebot > ").strip().lower()
        if choice == "q":
            raise SystemExit(0)
        if choice in METHODS:
            return METHODS[choice][2]
        print(f"Invalid option. Please choose {', '.join(METHODS)} or q.")


async def authorize(client: TelegramClient) -> None:
    """Log the client in unless its session is already authorized."""

    if await client.is_user_authorized():
        return

    login = choose_login()
    try:
        await login(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=os.getenv("2FA") or getpass("2FA password: "))

    me = await client.get_me()
    LOGGER.info("Logged in as %s", getattr(me, "username", None) or getattr(me, "first_name", "?"))
