"""Turn sentiment scores into the bot's one-line verdict on a song."""

from __future__ import annotations

import random
from typing import Optional

from core.models import SentimentScore
from reactions.phrases import from_list

SLIGHT = ["a slightly", "a somewhat", "a lightly", "a marginally"]
FAIR = ["a fairly", "a rather", "a reasonably", "a pretty"]
STRONG = ["an exceptionally", "a highly", "an abnormally", "a particularly", "an especially"]

POSITIVE = ["positive", "upbeat", "joyful", "cheery", "happy"]
NEGATIVE = ["negative", "depressing", "pale", "sad", "gloomy"]


def intensity(amplitude: float, rng: Optional[random.Random] = None) -> str:
    """Pick the article and adverb for a score difference."""

    if amplitude < 1:
        return "a"
    if amplitude < 3:
        return from_list(SLIGHT, rng)
    if amplitude < 6:
        return from_list(FAIR, rng)
    return from_list(STRONG, rng)


def describe_sentiment(score: SentimentScore, bot_name: str, rng: Optional[random.Random] = None) -> str:
    """Return the verdict line plus a code block with the raw scores."""

    amplitude = abs(score.positive - score.negative)
    mood = from_list(POSITIVE if score.positive > score.negative else NEGATIVE, rng)
    verdict = f"`{bot_name} believes this is {intensity(amplitude, rng)} {mood} song.`"
    return (
        f"{verdict}\n"
        "```\n"
        f"Positivity score: {score.positive:g}\n"
        f"Negativity score: {score.negative:g}\n"
        "```"
    )
