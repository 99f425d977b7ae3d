"""
Deterministic mock clustering.

Used when the embedding service is not configured or the semantic run
fails: questions are split into even slices across canned themes.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

from ..models import MAX_SAMPLE_QUESTIONS, Cluster, FilteredItem, SentimentBreakdown

logger = logging.getLogger(__name__)

MOCK_SENTIMENT_RATIOS = (0.5, 0.3, 0.2)
DEFAULT_BRAND = "brand"


@dataclass(frozen=True)
class ThemeTemplate:
    name: str
    sample_questions: Sequence[str]

    def questions_for(self, brand: str) -> List[str]:
        return [question.format(brand=brand) for question in self.sample_questions]


THEME_TEMPLATES = (
    ThemeTemplate(
        name="Price & Value",
        sample_questions=(
            "Is {brand} worth the price?",
            "How does {brand} compare in value?",
            "Will {brand} price drop?",
        ),
    ),
    ThemeTemplate(
        name="Features & Specifications",
        sample_questions=(
            "What are {brand} key features?",
            "How long is {brand} battery life?",
            "What specs does {brand} have?",
        ),
    ),
    ThemeTemplate(
        name="User Experience & Comfort",
        sample_questions=(
            "Is {brand} comfortable to use?",
            "How is the {brand} user experience?",
            "Is {brand} easy to set up?",
        ),
    ),
    ThemeTemplate(
        name="Compatibility & Integration",
        sample_questions=(
            "Is {brand} compatible with my device?",
            "What does {brand} work with?",
            "Can {brand} integrate with X?",
        ),
    ),
)


def generate_mock_clusters(items: Sequence[FilteredItem], brand: str) -> List[Cluster]:
    """
    Distribute questions evenly across the canned themes.

    Slice i covers items [floor(i*n/T), floor((i+1)*n/T)) for T themes.
    Empty slices are dropped and the remaining clusters are re-indexed.

    Args:
        items: Filtered questions in input order
        brand: Brand substituted into the sample questions

    Returns:
        Up to len(THEME_TEMPLATES) clusters whose counts sum to len(items)
    """
    brand = brand.strip() or DEFAULT_BRAND
    n = len(items)
    n_themes = len(THEME_TEMPLATES)

    clusters: List[Cluster] = []
    for index, theme in enumerate(THEME_TEMPLATES):
        start = math.floor(index * n / n_themes)
        end = math.floor((index + 1) * n / n_themes)
        slice_items = items[start:end]
        if not slice_items:
            continue

        count = len(slice_items)
        clusters.append(Cluster(
            id=len(clusters),
            name=theme.name,
            count=count,
            sample_questions=theme.questions_for(brand),
            top_questions=[item.item.title for item in slice_items[:MAX_SAMPLE_QUESTIONS]],
            sentiment=SentimentBreakdown.from_ratios(count, *MOCK_SENTIMENT_RATIOS),
        ))

    logger.info(f"Generated {len(clusters)} mock clusters for {n} questions")
    return clusters
