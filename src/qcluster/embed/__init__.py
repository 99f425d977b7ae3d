"""
Embedding capability and batcher for question texts.
"""

from .batcher import DEFAULT_BATCH_SIZE, embed_items
from .client import BaseEmbeddingClient, EmbeddingError, VertexEmbeddingClient

__all__ = [
    'BaseEmbeddingClient',
    'DEFAULT_BATCH_SIZE',
    'EmbeddingError',
    'VertexEmbeddingClient',
    'embed_items',
]
