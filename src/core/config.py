"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PollConfig:
    """Polling settings for the history loop."""

    interval_seconds: float
    history_count: int
    replay_history_on_first_run: bool = False
