"""AFINN sentiment adapter."""

from __future__ import annotations

from afinn import Afinn

from core.models import SentimentScore


class AfinnSentiment:
    """SentimentPort scoring text against the AFINN word list.

    Positive and negative word scores are summed separately so a song can be
    both; the negative total is reported as a positive number.
    """

    def __init__(self, language: str = "en") -> None:
        self._afinn = Afinn(language=language)

    def analyze(self, text: str) -> SentimentScore:
        scores = self._afinn.scores_with_pattern(text.lower())
        positive = sum(score for score in scores if score > 0)
        negative = -sum(score for score in scores if score < 0)
        return SentimentScore(positive=float(positive), negative=float(negative))
