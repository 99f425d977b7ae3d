"""
Clustering engine: questions in, labeled clusters out.

Pipeline:
    filter -> embed (batched) -> choose k -> K-Means -> label + sentiment

Any failure of the semantic path is turned into a SemanticClusteringFailed
outcome and the run falls back to deterministic mock clustering, flagged
with ``using_mock=True``. Only input errors reach the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..config import ClusteringConfig
from ..embed import BaseEmbeddingClient, EmbeddingError, VertexEmbeddingClient, embed_items
from ..embed.batcher import DEFAULT_BATCH_SIZE
from ..filters import filter_questions, to_filtered_items
from ..llm import BaseLLMClient, get_client
from ..models import Cluster, ClusteringResult, EmbeddedItem, FilteredItem, Item
from ..rate_limit import RateLimiter
from .kmeans import MAX_CLUSTERS, MAX_ITERATIONS, KMeansPartitioner, choose_k, compute_quality_metrics
from .labeler import ClusterLabeler
from .mock import generate_mock_clusters

logger = logging.getLogger(__name__)

NOT_CONFIGURED_NOTE = "Embedding service not configured, using mock data"
FAILED_NOTE_PREFIX = "Semantic clustering failed, using mock data"


class ClusteringInputError(ValueError):
    """Raised for input the engine cannot cluster. Reported to the caller as-is."""
    pass


class NoItemsProvided(ClusteringInputError):
    pass


class NoQuestionsFound(ClusteringInputError):
    pass


@dataclass
class SemanticClusteringSucceeded:
    clusters: List[Cluster]
    quality: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SemanticClusteringFailed:
    reason: str


SemanticClusteringOutcome = Union[SemanticClusteringSucceeded, SemanticClusteringFailed]


class ClusteringEngine:
    """
    Groups forum questions into labeled, sentiment-scored clusters.

    Holds only configuration and capability clients; every run builds its
    own partitioner, so concurrent runs share no mutable state.

    Args:
        embedding_client: Embedding capability; None means unconfigured
        llm_client: Text-generation capability for naming; None means every
            cluster gets a fallback name
        batch_size: Texts per embedding request
        max_clusters: Upper bound for k
        max_iterations: K-Means iteration cap
        seed: Centroid seed for reproducible runs
        strict_filter: Use the body-aware question filter
        partitioner_factory: Builds the partitioner for each run
    """

    def __init__(
        self,
        embedding_client: Optional[BaseEmbeddingClient] = None,
        llm_client: Optional[BaseLLMClient] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_clusters: int = MAX_CLUSTERS,
        max_iterations: int = MAX_ITERATIONS,
        seed: Optional[int] = None,
        strict_filter: bool = False,
        partitioner_factory: Optional[Callable[[], KMeansPartitioner]] = None,
    ):
        self.embedding_client = embedding_client
        self.labeler = ClusterLabeler(llm_client)
        self.batch_size = batch_size
        self.max_clusters = max_clusters
        self.strict_filter = strict_filter
        self.partitioner_factory = partitioner_factory or (
            lambda: KMeansPartitioner(max_iterations=max_iterations, seed=seed)
        )

    @property
    def embeddings_available(self) -> bool:
        return self.embedding_client is not None and self.embedding_client.is_available()

    def cluster(
        self,
        items: Iterable[Union[Item, Mapping[str, Any]]],
        brand: str,
    ) -> ClusteringResult:
        """
        Run one clustering pass.

        Args:
            items: Items or raw post mappings with id/title/body
            brand: Brand the posts are about

        Returns:
            ClusteringResult; ``using_mock`` tells real clustering apart
            from the mock fallback

        Raises:
            NoItemsProvided: If items is empty
            NoQuestionsFound: If no item passes the question filter
            ValueError: If an item is not a mapping or is missing id or title
        """
        logger.info("[Step 1/4] Filtering questions...")
        items = [item if isinstance(item, Item) else Item.from_dict(item) for item in items]
        if not items:
            raise NoItemsProvided("No posts provided for clustering")

        questions = filter_questions(items, strict=self.strict_filter)
        if not questions:
            raise NoQuestionsFound("No questions found in posts")

        filtered = to_filtered_items(questions)
        n_questions = len(filtered)

        if not self.embeddings_available:
            logger.warning("No embedding service configured, falling back to mock clustering")
            return self._mock_result(filtered, brand, NOT_CONFIGURED_NOTE)

        outcome = self._attempt_semantic_clustering(filtered, brand)

        if isinstance(outcome, SemanticClusteringFailed):
            logger.warning(f"Semantic clustering failed ({outcome.reason}), falling back to mock clustering")
            return self._mock_result(filtered, brand, f"{FAILED_NOTE_PREFIX}: {outcome.reason}")

        result = ClusteringResult(
            clusters=outcome.clusters,
            questions_found=n_questions,
            using_mock=False,
            quality=outcome.quality,
        )
        logger.info(
            f"Clustering complete: {result.total_clusters} clusters, "
            f"average size {result.average_cluster_size}"
        )
        return result

    def _mock_result(self, filtered: Sequence[FilteredItem], brand: str, note: str) -> ClusteringResult:
        return ClusteringResult(
            clusters=generate_mock_clusters(filtered, brand),
            questions_found=len(filtered),
            using_mock=True,
            note=note,
        )

    def _attempt_semantic_clustering(
        self,
        filtered: Sequence[FilteredItem],
        brand: str,
    ) -> SemanticClusteringOutcome:
        """Embed, partition and label; every failure becomes SemanticClusteringFailed."""
        try:
            logger.info(f"[Step 2/4] Generating embeddings for {len(filtered)} questions...")
            embedded = embed_items(filtered, self.embedding_client, batch_size=self.batch_size)
        except EmbeddingError as e:
            return SemanticClusteringFailed(reason=str(e))
        except Exception as e:
            logger.error(f"Unexpected embedding failure: {e}", exc_info=True)
            return SemanticClusteringFailed(reason=f"{type(e).__name__}: {e}")

        if not embedded:
            return SemanticClusteringFailed(reason="no question text to embed")

        try:
            k = choose_k(len(embedded), self.max_clusters)
            logger.info(f"[Step 3/4] Partitioning {len(embedded)} embeddings into k={k} clusters...")
            partitioner = self.partitioner_factory()
            groups = partitioner.partition(embedded, k)

            quality = self._quality_metrics(embedded, partitioner)

            logger.info(f"[Step 4/4] Labeling {len(groups)} clusters...")
            clusters = [
                self.labeler.label(group, brand, index)
                for index, group in enumerate(groups)
            ]
        except Exception as e:
            logger.error(f"Semantic clustering error: {e}", exc_info=True)
            return SemanticClusteringFailed(reason=f"{type(e).__name__}: {e}")

        return SemanticClusteringSucceeded(clusters=clusters, quality=quality)

    def _quality_metrics(self, embedded: Sequence[EmbeddedItem], partitioner: KMeansPartitioner) -> Dict[str, Any]:
        """Optional partition metrics; a failure here leaves them empty."""
        if partitioner.last_result is None:
            return {}

        try:
            vectors = np.vstack([item.vector for item in embedded])
            quality = compute_quality_metrics(vectors, partitioner.last_result.assignments)
        except Exception as e:
            logger.warning(f"Failed to compute quality metrics: {e}")
            return {}

        logger.info(f"Quality metrics: {quality}")
        return quality


def build_engine(config: Optional[ClusteringConfig] = None) -> ClusteringEngine:
    """
    Wire an engine from configuration.

    External clients are built with ``max_retries=1``: a failed call is not
    retried in place and triggers the mock fallback (embedding) or the
    per-cluster fallback name (labeling) instead.
    """
    config = config or ClusteringConfig.from_env()

    embedding_client = None
    llm_client = None

    if config.embeddings_configured:
        embedding_client = VertexEmbeddingClient(
            project_id=config.gcp_project,
            region=config.gcp_region,
            model_name=config.embedding_model,
            dimensions=config.embedding_dimensions,
            max_retries=1,
            rate_limiter=RateLimiter.per_minute(config.requests_per_minute),
        )
        try:
            llm_client = get_client(
                config.llm_model,
                project_id=config.gcp_project,
                max_retries=1,
                rate_limiter=RateLimiter.per_minute(config.requests_per_minute),
            )
        except ValueError as e:
            logger.warning(f"Labeling model unavailable, clusters will use fallback names: {e}")
    else:
        logger.info("GCP_PROJECT not set; engine will use mock clustering")

    return ClusteringEngine(
        embedding_client=embedding_client,
        llm_client=llm_client,
        batch_size=config.batch_size,
        max_clusters=config.max_clusters,
        max_iterations=config.max_iterations,
        seed=config.seed,
        strict_filter=config.strict_filter,
    )
