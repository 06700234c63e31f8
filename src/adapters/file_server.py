"""Static file server for playable assets.

The speaker fetches clips like wahwahwah.mp3 over HTTP, so the bot serves its
media directory on the LAN address the speaker can reach.
"""

from __future__ import annotations

import logging
import socket
from pathlib import Path
from typing import Optional

from aiohttp import web

LOGGER = logging.getLogger(__name__)


def get_network_ip() -> str:
    """Return the LAN address of the interface used for outbound traffic."""

    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # UDP connect sends nothing; it only selects a route.
        probe.connect(("10.255.255.255", 1))
        return probe.getsockname()[0]
    except OSError:
        return "127.0.0.1"
    finally:
        probe.close()


class MediaFileServer:
    """Serve a directory of media files with aiohttp."""

    def __init__(self, media_dir: str, host: str = "0.0.0.0", port: int = 8181) -> None:
        self.media_dir = Path(media_dir)
        self.host = host
        self.port = port
        self.app = web.Application()
        self.app.router.add_static("/", path=self.media_dir, name="media")
        self.runner: Optional[web.AppRunner] = None

    def base_url(self, network_ip: Optional[str] = None) -> str:
        return f"http://{network_ip or get_network_ip()}:{self.port}"

    async def start(self) -> None:
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        LOGGER.info("Serving %s at http://%s:%s", self.media_dir, self.host, self.port)

    async def stop(self) -> None:
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            LOGGER.info("File server stopped")
