"""
Configuration for the question clustering engine.

All settings come from environment variables; see ClusteringConfig.from_env().
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    value = env.get(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {value!r}, using default {default}")
        return default


@dataclass
class ClusteringConfig:
    """
    Engine settings.

    Attributes:
        gcp_project: GCP project for Vertex AI; None leaves the embedding
            client unconfigured and every run uses mock clustering
        gcp_region: Vertex AI region
        embedding_model: Vertex AI embedding model name
        embedding_dimensions: Output dimensionality of the embeddings
        batch_size: Texts per embedding request
        max_clusters: Upper bound for k
        max_iterations: K-Means iteration cap
        seed: Centroid seed (None for fresh entropy)
        requests_per_minute: Rate limit applied to each external client
        strict_filter: Use the body-aware question filter
        llm_model: Labeling model name or alias (None uses LLM_MODEL/default)
    """
    gcp_project: Optional[str] = None
    gcp_region: str = 'europe-west4'
    embedding_model: str = 'gemini-embedding-001'
    embedding_dimensions: int = 768
    batch_size: int = 10
    max_clusters: int = 5
    max_iterations: int = 20
    seed: Optional[int] = None
    requests_per_minute: int = 60
    strict_filter: bool = False
    llm_model: Optional[str] = None

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if not 1 <= self.max_clusters <= 5:
            raise ValueError(f"max_clusters must be between 1 and 5, got {self.max_clusters}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.requests_per_minute < 1:
            raise ValueError(f"requests_per_minute must be >= 1, got {self.requests_per_minute}")

    @property
    def embeddings_configured(self) -> bool:
        return bool(self.gcp_project)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ClusteringConfig":
        """
        Build configuration from environment variables.

        Environment variables:
            GCP_PROJECT, GCP_REGION, EMBEDDING_MODEL, EMBEDDING_DIMENSIONS,
            EMBEDDING_BATCH_SIZE, MAX_CLUSTERS, KMEANS_MAX_ITERATIONS,
            KMEANS_SEED, REQUESTS_PER_MINUTE, STRICT_QUESTION_FILTER, LLM_MODEL
        """
        env = os.environ if env is None else env
        defaults = cls()

        return cls(
            gcp_project=env.get('GCP_PROJECT') or None,
            gcp_region=env.get('GCP_REGION', defaults.gcp_region),
            embedding_model=env.get('EMBEDDING_MODEL', defaults.embedding_model),
            embedding_dimensions=_env_int(env, 'EMBEDDING_DIMENSIONS', defaults.embedding_dimensions),
            batch_size=_env_int(env, 'EMBEDDING_BATCH_SIZE', defaults.batch_size),
            max_clusters=_env_int(env, 'MAX_CLUSTERS', defaults.max_clusters),
            max_iterations=_env_int(env, 'KMEANS_MAX_ITERATIONS', defaults.max_iterations),
            seed=_env_int(env, 'KMEANS_SEED', None),
            requests_per_minute=_env_int(env, 'REQUESTS_PER_MINUTE', defaults.requests_per_minute),
            strict_filter=env.get('STRICT_QUESTION_FILTER', '').strip().lower() in _TRUE_VALUES,
            llm_model=env.get('LLM_MODEL') or None,
        )
