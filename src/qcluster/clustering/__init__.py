"""
Semantic clustering of forum questions.

Groups question embeddings with a seeded cosine K-Means, names each group
through the text-generation capability, and falls back to canned mock
themes whenever embeddings are unavailable.
"""

from .engine import (
    ClusteringEngine,
    ClusteringInputError,
    NoItemsProvided,
    NoQuestionsFound,
    SemanticClusteringFailed,
    SemanticClusteringSucceeded,
    build_engine,
)
from .kmeans import KMeansPartitioner, choose_k
from .labeler import ClusterLabeler
from .mock import generate_mock_clusters

__all__ = [
    'ClusterLabeler',
    'ClusteringEngine',
    'ClusteringInputError',
    'KMeansPartitioner',
    'NoItemsProvided',
    'NoQuestionsFound',
    'SemanticClusteringFailed',
    'SemanticClusteringSucceeded',
    'build_engine',
    'choose_k',
    'generate_mock_clusters',
]
