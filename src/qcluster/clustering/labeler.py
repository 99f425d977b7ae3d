"""
Cluster naming via the text-generation capability.

Success path: LLM theme name + keyword sentiment.
Failure path: "Theme N" + synthetic 40/40/20 sentiment split.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence

from ..llm import BaseLLMClient, EmptyResponseError, GenerationConfig
from ..models import MAX_SAMPLE_QUESTIONS, MAX_TOP_QUESTIONS, Cluster, EmbeddedItem, SentimentBreakdown
from ..sentiment import score_sentiment

logger = logging.getLogger(__name__)

PROMPT_SAMPLE_SIZE = 5

FALLBACK_SENTIMENT_RATIOS = (0.4, 0.4, 0.2)

SYSTEM_PROMPT_TEMPLATE = (
    "You are analyzing customer questions about {brand}. Generate a concise, "
    "2-4 word theme name for a cluster of similar questions. Focus on the main "
    "topic or concern."
)

USER_PROMPT_TEMPLATE = "Analyze these questions and provide a short theme name:\n\n{questions}"

LABEL_GENERATION_CONFIG = GenerationConfig(temperature=0.3, max_output_tokens=20)


def fallback_name(index: int) -> str:
    return f"Theme {index + 1}"


class ClusterLabeler:
    """
    Names clusters and attaches a sentiment breakdown.

    Args:
        llm_client: Text-generation client; None forces the fallback path
        scorer: Sentiment scorer used on the success path
    """

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient],
        scorer: Callable[[Iterable[str]], SentimentBreakdown] = score_sentiment,
    ):
        self.llm_client = llm_client
        self.scorer = scorer

    def build_prompts(self, group: Sequence[EmbeddedItem], brand: str) -> tuple[str, str]:
        """Return (system_prompt, user_prompt) for a cluster."""
        sample_texts = "\n".join(item.text for item in group[:PROMPT_SAMPLE_SIZE])
        return (
            SYSTEM_PROMPT_TEMPLATE.format(brand=brand),
            USER_PROMPT_TEMPLATE.format(questions=sample_texts),
        )

    def _generate_name(self, group: Sequence[EmbeddedItem], brand: str, index: int) -> str:
        if self.llm_client is None:
            raise RuntimeError("No text-generation client configured")

        system_prompt, user_prompt = self.build_prompts(group, brand)
        try:
            response = self.llm_client.generate(
                user_prompt,
                config=LABEL_GENERATION_CONFIG,
                system_prompt=system_prompt,
            )
        except EmptyResponseError as e:
            logger.warning(f"Empty name for cluster {index}, using fallback name: {e}")
            return fallback_name(index)

        return (response.text or "").strip() or fallback_name(index)

    def label(self, group: Sequence[EmbeddedItem], brand: str, index: int) -> Cluster:
        """
        Build the Cluster record for one group.

        Args:
            group: Non-empty group of embedded items
            brand: Brand the questions are about
            index: Position of the group (becomes the cluster id)

        Returns:
            Cluster with name, counts, sample/top questions and sentiment
        """
        texts = [item.text for item in group]

        try:
            name = self._generate_name(group, brand, index)
            sentiment = self.scorer(texts)
            logger.info(f"  Cluster {index}: '{name}' ({len(texts)} questions)")

        except Exception as e:
            logger.warning(f"Failed to generate name for cluster {index}: {e}")
            name = fallback_name(index)
            sentiment = SentimentBreakdown.from_ratios(len(texts), *FALLBACK_SENTIMENT_RATIOS)

        return Cluster(
            id=index,
            name=name,
            count=len(texts),
            sample_questions=texts[:MAX_SAMPLE_QUESTIONS],
            top_questions=texts[:MAX_TOP_QUESTIONS],
            sentiment=sentiment,
        )
