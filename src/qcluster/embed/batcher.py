"""
Embedding batcher: filtered questions -> EmbeddedItems.

Batches are issued sequentially and order is preserved within and across
batches. Capability failures are not retried here; they propagate.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..models import EmbeddedItem, FilteredItem
from .client import BaseEmbeddingClient, EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


def embed_items(
    items: Sequence[FilteredItem],
    client: BaseEmbeddingClient,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> List[EmbeddedItem]:
    """
    Embed filtered items in bounded batches.

    Items with empty text are skipped; a batch with nothing left to embed
    makes no external call.

    Args:
        items: Filtered items in input order
        client: Embedding capability
        batch_size: Maximum texts per request (default: 10)

    Returns:
        One EmbeddedItem per non-empty text, in input order

    Raises:
        EmbeddingError: On capability failure, a vector count mismatch,
            or vectors of differing dimension
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    embedded: List[EmbeddedItem] = []
    dimension: Optional[int] = None
    n_batches = 0

    for start in range(0, len(items), batch_size):
        batch = [item for item in items[start:start + batch_size] if item.text]
        if not batch:
            logger.debug(f"Skipping empty batch at offset {start}")
            continue

        texts = [item.text for item in batch]
        vectors = client.embed(texts)
        n_batches += 1

        if len(vectors) != len(batch):
            raise EmbeddingError(
                f"Embedding service returned {len(vectors)} vectors for {len(batch)} texts"
            )

        for item, vector in zip(batch, vectors):
            vector = np.asarray(vector, dtype=np.float64)
            if dimension is None:
                dimension = vector.shape[0]
            elif vector.shape[0] != dimension:
                raise EmbeddingError(
                    f"Inconsistent embedding dimension: expected {dimension}, got {vector.shape[0]}"
                )
            embedded.append(EmbeddedItem(text=item.text, vector=vector, source=item))

    logger.info(f"Generated {len(embedded)} embeddings in {n_batches} batches (dim={dimension})")
    return embedded
