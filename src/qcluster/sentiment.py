"""
Keyword sentiment scoring for clustered questions.

Case-insensitive substring matching (no word boundaries), so "issues"
counts for "issue" and "goodness" counts for "good".
"""

from enum import Enum
from typing import Iterable

from .models import SentimentBreakdown

POSITIVE_WORDS = ('good', 'great', 'love', 'amazing', 'excellent', 'perfect')
NEGATIVE_WORDS = ('bad', 'terrible', 'hate', 'awful', 'horrible', 'worst', 'problem', 'issue')


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


def classify_text(text: str) -> Sentiment:
    text = text.lower()
    positive_count = sum(1 for word in POSITIVE_WORDS if word in text)
    negative_count = sum(1 for word in NEGATIVE_WORDS if word in text)

    if positive_count > negative_count:
        return Sentiment.POSITIVE
    if negative_count > positive_count:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def score_sentiment(texts: Iterable[str]) -> SentimentBreakdown:
    """
    Count positive, neutral and negative texts.

    The three counts always sum to the number of texts.
    """
    counts = {sentiment: 0 for sentiment in Sentiment}
    for text in texts:
        counts[classify_text(text)] += 1

    return SentimentBreakdown(
        positive=counts[Sentiment.POSITIVE],
        neutral=counts[Sentiment.NEUTRAL],
        negative=counts[Sentiment.NEGATIVE],
    )
