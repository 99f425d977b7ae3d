"""
K-Means partitioning of question embeddings under cosine distance.

Centroids are seeded uniformly in [-0.5, 0.5) from an explicit random
generator, refined for at most 20 iterations, and centroids that lose all
members keep their previous coordinates.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import silhouette_score

from ..models import EmbeddedItem

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 20
MAX_CLUSTERS = 5
ITEMS_PER_CLUSTER = 5


def choose_k(n_items: int, max_clusters: int = MAX_CLUSTERS) -> int:
    """k = min(max_clusters, ceil(n / 5)); 0 when there is nothing to cluster."""
    if n_items <= 0:
        return 0
    return min(max_clusters, math.ceil(n_items / ITEMS_PER_CLUSTER))


def cosine_distances(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Pairwise cosine distance (1 - cosine similarity).

    Args:
        vectors: Array of shape (n_samples, dim)
        centroids: Array of shape (k, dim)

    Returns:
        Array of shape (n_samples, k). Pairs involving a zero-magnitude
        vector are undefined and reported as +inf, so they are never the
        nearest centroid.
    """
    dots = vectors @ centroids.T
    norms = np.outer(np.linalg.norm(vectors, axis=1), np.linalg.norm(centroids, axis=1))

    with np.errstate(divide='ignore', invalid='ignore'):
        distances = 1.0 - dots / norms

    distances[~np.isfinite(distances)] = np.inf
    return distances


def init_centroids(k: int, dim: int, rng: np.random.Generator) -> np.ndarray:
    """Data-independent seed: every coordinate uniform in [-0.5, 0.5)."""
    return rng.random((k, dim)) - 0.5


@dataclass
class KMeansResult:
    """Final state of a K-Means run."""
    assignments: np.ndarray
    centroids: np.ndarray
    iterations: int
    converged: bool


def run_kmeans(
    vectors: np.ndarray,
    centroids: np.ndarray,
    max_iterations: int = MAX_ITERATIONS,
) -> KMeansResult:
    """
    Iterative assignment/update refinement.

    Every item starts assigned to centroid 0. Each iteration assigns items
    to the nearest centroid (ties go to the lowest index) and stops when no
    assignment changed; otherwise centroids with members move to the mean
    of their members and empty centroids are left where they are.

    Args:
        vectors: Array of shape (n_samples, dim)
        centroids: Initial centroids, shape (k, dim); not modified
        max_iterations: Iteration cap

    Returns:
        KMeansResult with final assignments and centroids
    """
    centroids = np.array(centroids, dtype=np.float64, copy=True)
    k = centroids.shape[0]
    assignments = np.zeros(vectors.shape[0], dtype=int)

    iterations = 0
    converged = False

    while iterations < max_iterations:
        iterations += 1

        # np.argmin returns the first minimum, so ties resolve to the lowest index
        new_assignments = np.argmin(cosine_distances(vectors, centroids), axis=1)
        changed = not np.array_equal(new_assignments, assignments)
        assignments = new_assignments

        if not changed:
            converged = True
            break

        for j in range(k):
            members = vectors[assignments == j]
            if len(members) > 0:
                centroids[j] = members.mean(axis=0)

    logger.debug(f"K-Means finished after {iterations} iterations (converged={converged})")
    return KMeansResult(
        assignments=assignments,
        centroids=centroids,
        iterations=iterations,
        converged=converged,
    )


class KMeansPartitioner:
    """
    Partition EmbeddedItems into at most k non-empty groups.

    Args:
        max_iterations: Iteration cap (default: 20)
        seed: Seed for centroid initialization; None draws fresh entropy
    """

    def __init__(self, max_iterations: int = MAX_ITERATIONS, seed: Optional[int] = None):
        self.max_iterations = max_iterations
        self.seed = seed
        self.rng = np.random.default_rng(seed)

        # Set after partition()
        self.last_result: Optional[KMeansResult] = None

        logger.info(f"Initialized KMeansPartitioner: max_iterations={max_iterations}, seed={seed}")

    def partition(
        self,
        items: Sequence[EmbeddedItem],
        k: int,
        centroids: Optional[np.ndarray] = None,
    ) -> List[List[EmbeddedItem]]:
        """
        Cluster items and group them by final assignment.

        Args:
            items: Embedded items, all of the same dimension
            k: Number of centroids, 1 <= k <= len(items)
            centroids: Explicit initial centroids of shape (k, dim)

        Returns:
            Non-empty groups in centroid order; may be fewer than k

        Raises:
            ValueError: If k is out of range or dimensions disagree
        """
        if not items:
            raise ValueError("Cannot partition an empty item list")
        if not 1 <= k <= len(items):
            raise ValueError(f"k must be between 1 and {len(items)}, got {k}")

        vectors = np.vstack([item.vector for item in items])
        dim = vectors.shape[1]

        if centroids is None:
            centroids = init_centroids(k, dim, self.rng)
        elif np.shape(centroids) != (k, dim):
            raise ValueError(f"Expected centroids of shape {(k, dim)}, got {np.shape(centroids)}")

        logger.info(f"Partitioning {len(items)} embeddings (dim={dim}) into k={k} clusters")

        result = run_kmeans(vectors, centroids, self.max_iterations)
        self.last_result = result

        groups: List[List[EmbeddedItem]] = [[] for _ in range(k)]
        for item, label in zip(items, result.assignments):
            groups[label].append(item)

        non_empty = [group for group in groups if group]
        logger.info(
            f"Partition complete: {len(non_empty)}/{k} non-empty clusters after "
            f"{result.iterations} iterations (converged={result.converged})"
        )
        return non_empty


def compute_quality_metrics(vectors: np.ndarray, assignments: np.ndarray) -> Dict[str, Any]:
    """
    Compute partition quality metrics.

    Args:
        vectors: Embeddings used for clustering
        assignments: Cluster index per embedding

    Returns:
        Dictionary with silhouette_score (None with fewer than two clusters)
        and cluster size statistics
    """
    labels = np.asarray(assignments)
    sizes = [int(np.sum(labels == label)) for label in np.unique(labels)]

    metrics: Dict[str, Any] = {'n_clusters': len(sizes), 'silhouette_score': None}

    # Silhouette needs 2 <= n_clusters <= n_samples - 1
    if 2 <= len(sizes) < len(labels):
        try:
            metrics['silhouette_score'] = float(silhouette_score(vectors, labels, metric='cosine'))
        except ValueError as e:
            logger.warning(f"Failed to compute silhouette score: {e}")
    else:
        logger.debug("Too few clusters for silhouette score")

    if sizes:
        metrics['min_cluster_size'] = min(sizes)
        metrics['max_cluster_size'] = max(sizes)
        metrics['mean_cluster_size'] = float(np.mean(sizes))

    return metrics
