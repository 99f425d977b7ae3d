"""
Question filter and text cleanup for harvested forum posts.

Two modes:
- Default: title-only heuristic (question mark or interrogative lead word)
- Strict: body-aware heuristic that also accepts help/advice requests
"""

import logging
import re
from typing import Iterable, List

from .models import FilteredItem, Item

logger = logging.getLogger(__name__)

LEAD_WORDS = (
    'what', 'why', 'how', 'should', 'is', 'are', 'can', 'could',
    'would', 'does', 'do', 'anyone', 'where', 'when', 'which',
)

REQUEST_WORDS = ('anyone', 'help', 'advice', 'thoughts', 'opinion')

_LEAD_WORD_RE = re.compile(r"^(" + "|".join(LEAD_WORDS) + r")\s", re.IGNORECASE)
_REQUEST_WORD_RE = re.compile(r"\b(" + "|".join(REQUEST_WORDS) + r")\b", re.IGNORECASE)

_URL_RE = re.compile(r"http\S+")
_USER_MENTION_RE = re.compile(r"u/[A-Za-z0-9_-]+")
_SUBREDDIT_MENTION_RE = re.compile(r"r/[A-Za-z0-9_-]+")
_MARKDOWN_EMPHASIS_RE = re.compile(r"\*+")
_WHITESPACE_RE = re.compile(r"\s+")


def is_question(item: Item, strict: bool = False) -> bool:
    """
    Decide whether a post reads like a question.

    Args:
        item: Post to classify
        strict: Use the body-aware heuristic

    Returns:
        True if the post should be clustered
    """
    if strict:
        text = f"{item.title} {item.body}".lower()
        return (
            '?' in text
            or _LEAD_WORD_RE.search(text) is not None
            or _REQUEST_WORD_RE.search(text) is not None
        )

    title = item.title.lower()
    # Literal prefix match: "isolated" starts with "is" and passes
    return '?' in title or title.startswith(LEAD_WORDS)


def filter_questions(items: Iterable[Item], strict: bool = False) -> List[Item]:
    """
    Keep the posts that look like questions, preserving input order.

    Pure and idempotent; returns an empty list for empty input.
    """
    items = list(items)
    questions = [item for item in items if is_question(item, strict=strict)]
    logger.info(f"Question filter kept {len(questions)}/{len(items)} posts (strict={strict})")
    return questions


def clean_text(text: str) -> str:
    """Remove URLs, user/subreddit mentions and markdown emphasis; collapse whitespace."""
    text = _URL_RE.sub('', text)
    text = _USER_MENTION_RE.sub('', text)
    text = _SUBREDDIT_MENTION_RE.sub('', text)
    text = _MARKDOWN_EMPHASIS_RE.sub(' ', text)
    return _WHITESPACE_RE.sub(' ', text).strip()


def to_filtered_items(items: Iterable[Item]) -> List[FilteredItem]:
    """Attach the embedding text: the title, or the body for untitled posts."""
    return [
        FilteredItem(item=item, text=clean_text(item.title or item.body))
        for item in items
    ]
