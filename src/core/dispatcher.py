"""Trigger dispatch (core domain).

This module is integration-agnostic. Reactions perform their own
notifications; the dispatcher only schedules them, contains their failures,
and logs one summary line per batch.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Iterable, Sequence, Set

from core.matcher import matching_triggers
from core.models import Message, ReactionError
from core.triggers import Trigger

LOGGER = logging.getLogger(__name__)

TALLY_MARK = "!"


class Dispatcher:
    """Run every matching trigger for every message in a batch."""

    def __init__(self, triggers: Iterable[Trigger]) -> None:
        self._triggers = list(triggers)
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def dispatch(self, messages: Sequence[Message]) -> int:
        """Schedule reactions for a batch and return the number of firings.

        Actions start as independent tasks; none is awaited before the next
        one is scheduled.
        """

        firings = [
            (message, trigger)
            for message in messages
            for trigger in matching_triggers(message, self._triggers)
        ]
        for message, trigger in firings:
            task = asyncio.create_task(self._react(trigger, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        if messages:
            date_string = datetime.now().strftime("%x, %X")
            LOGGER.info(
                "%s incoming message(s) on %s%s",
                len(messages),
                date_string,
                TALLY_MARK * len(firings),
            )

        return len(firings)

    async def drain(self) -> None:
        """Wait for every scheduled reaction to settle."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _react(self, trigger: Trigger, message: Message) -> None:
        # Error boundary: one failing reaction must not affect its siblings.
        try:
            await trigger.action(message)
        except ReactionError as exc:
            LOGGER.error("[ERROR]  %s: %s", trigger.label, exc)
        except Exception:
            LOGGER.exception("[ERROR]  %s failed for message %s", trigger.label, message.timestamp)
