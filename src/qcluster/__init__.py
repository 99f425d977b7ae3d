"""
qcluster: semantic clustering of brand questions harvested from forums.

Usage:
    from qcluster import build_engine
    engine = build_engine()            # reads GCP_PROJECT, LLM_MODEL, ...
    result = engine.cluster(posts, brand="Vision Pro")
    print(result.to_dict())

Without GCP_PROJECT the engine runs the deterministic mock clustering.
"""

from .clustering import (
    ClusteringEngine,
    ClusteringInputError,
    NoItemsProvided,
    NoQuestionsFound,
    build_engine,
)
from .config import ClusteringConfig
from .models import Cluster, ClusteringResult, Item, SentimentBreakdown

__version__ = "0.1.0"

__all__ = [
    'Cluster',
    'ClusteringConfig',
    'ClusteringEngine',
    'ClusteringInputError',
    'ClusteringResult',
    'Item',
    'NoItemsProvided',
    'NoQuestionsFound',
    'SentimentBreakdown',
    'build_engine',
]
