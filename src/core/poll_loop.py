"""Fixed-interval polling loop.

Each cycle runs in a strict order:
1) Fetch recent history from the channel
2) Filter through the watermark and persist it
3) Dispatch eligible messages to the triggers

Cycles are serialized: a slow cycle delays the next one instead of
overlapping it, so two cycles never race on the watermark.
"""

from __future__ import annotations

import asyncio
import logging

from core.config import PollConfig
from core.dispatcher import Dispatcher
from core.offsets import OffsetTracker
from core.ports import HistoryPort

LOGGER = logging.getLogger(__name__)


class PollLoop:
    """Drive fetch -> filter -> dispatch on a fixed interval."""

    def __init__(
        self,
        history: HistoryPort,
        tracker: OffsetTracker,
        dispatcher: Dispatcher,
        config: PollConfig,
    ) -> None:
        self._history = history
        self._tracker = tracker
        self._dispatcher = dispatcher
        self._config = config

    @property
    def watermark(self) -> float:
        return self._tracker.watermark

    async def start(self) -> None:
        """Load the watermark and, on a first run, skip existing history if configured."""

        if self._tracker.load():
            LOGGER.info("Resuming from watermark %s", self._tracker.watermark)
            return
        if self._config.replay_history_on_first_run:
            LOGGER.info("No watermark stored; replaying available history")
            return

        # Seeding is part of startup, so a failing fetch here is fatal.
        messages = await self._history.fetch_history(self._config.history_count)
        self._tracker.seed(messages)

    async def run_cycle(self) -> int:
        """Run one poll cycle and return the number of eligible messages."""

        try:
            messages = await self._history.fetch_history(self._config.history_count)
        except Exception:
            LOGGER.exception("History fetch failed; skipping cycle")
            return 0

        try:
            eligible = self._tracker.advance(messages, newest_first=self._history.newest_first)
            if eligible:
                await self._dispatcher.dispatch(eligible)
        except Exception:
            LOGGER.exception("Poll cycle failed; watermark stays at %s", self._tracker.watermark)
            return 0
        return len(eligible)

    async def run_forever(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.interval_seconds
        while True:
            started = loop.time()
            await self.run_cycle()
            await asyncio.sleep(max(0.0, interval - (loop.time() - started)))
