"""
Embedding capability clients.

Uses Vertex AI gemini-embedding-001 with a fixed output dimensionality so
every vector in a run has the same length.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from google.api_core.exceptions import InternalServerError, ResourceExhausted, ServiceUnavailable

from ..rate_limit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-embedding-001"
DEFAULT_DIMENSIONS = 768

# Retry configuration
MAX_RETRIES = 3
INITIAL_BACKOFF = 1  # seconds
MAX_BACKOFF = 32  # seconds


class EmbeddingError(Exception):
    """Raised when embeddings cannot be produced. Aborts the semantic clustering attempt."""
    pass


class BaseEmbeddingClient(ABC):
    """Turns a batch of texts into fixed-length vectors, same order as input."""

    def is_available(self) -> bool:
        """Whether the client is configured well enough to be called."""
        return True

    @abstractmethod
    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed a batch of texts.

        Raises:
            EmbeddingError: If the service call fails
        """
        pass


class VertexEmbeddingClient(BaseEmbeddingClient):
    """
    Vertex AI text embedding client (lazy model initialization).

    Args:
        project_id: GCP project ID; the client is unavailable without one
        region: GCP region
        model_name: Vertex AI embedding model
        dimensions: Output dimensionality requested from the model
        max_retries: Attempts per batch (1 disables retries)
        rate_limiter: Optional limiter acquired before every request
    """

    def __init__(
        self,
        project_id: Optional[str],
        region: str = "europe-west4",
        model_name: str = DEFAULT_MODEL,
        dimensions: int = DEFAULT_DIMENSIONS,
        max_retries: int = MAX_RETRIES,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")

        self.project_id = project_id
        self.region = region
        self.model_name = model_name
        self.dimensions = dimensions
        self.max_retries = max_retries
        self.rate_limiter = rate_limiter
        self._sleep = sleep
        self._model = None

    def is_available(self) -> bool:
        return bool(self.project_id)

    def _get_model(self):
        """Get or create the Vertex AI embedding model (cached)."""
        if self._model is None:
            from google.cloud import aiplatform
            from vertexai.language_models import TextEmbeddingModel

            logger.info(f"Initializing Vertex AI in project={self.project_id}, region={self.region}")
            aiplatform.init(project=self.project_id, location=self.region)

            logger.info(f"Loading {self.model_name} model...")
            self._model = TextEmbeddingModel.from_pretrained(self.model_name)
            logger.info("Embedding model loaded successfully")

        return self._model

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        if not self.is_available():
            raise EmbeddingError("Embedding client not configured (GCP_PROJECT unset)")

        model = self._get_model()
        backoff = INITIAL_BACKOFF

        for attempt in range(self.max_retries):
            if self.rate_limiter is not None:
                self.rate_limiter.acquire()

            try:
                embeddings = model.get_embeddings(
                    list(texts), output_dimensionality=self.dimensions
                )
                return [list(embedding.values) for embedding in embeddings]

            except (ResourceExhausted, InternalServerError, ServiceUnavailable) as e:
                if attempt < self.max_retries - 1:
                    logger.warning(
                        f"Embedding request failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying after {backoff}s"
                    )
                    self._sleep(backoff)
                    backoff = min(backoff * 2, MAX_BACKOFF)
                else:
                    logger.error(f"Embedding request failed after {attempt + 1} attempts: {e}")
                    raise EmbeddingError(f"Embedding service error: {e}") from e

            except Exception as e:
                logger.error(f"Unexpected error generating embeddings: {e}")
                raise EmbeddingError(f"Embedding generation failed: {e}") from e

        raise EmbeddingError("Failed to generate embeddings after maximum retries")

    def __repr__(self) -> str:
        return f"VertexEmbeddingClient(model={self.model_name}, region={self.region})"
