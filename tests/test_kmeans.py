"""
Unit tests for the K-Means partitioner.

Tests cover k selection, cosine distance guards, the refinement loop
(including stale centroids), seeded determinism and quality metrics.
"""

import os
import sys
import unittest

import numpy as np

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from qcluster.clustering.kmeans import (
    KMeansPartitioner,
    choose_k,
    compute_quality_metrics,
    cosine_distances,
    init_centroids,
    run_kmeans,
)
from qcluster.models import EmbeddedItem, FilteredItem, Item


def _embedded(vectors):
    items = []
    for i, vector in enumerate(vectors):
        text = f"Question {i}?"
        source = FilteredItem(item=Item(id=str(i), title=text), text=text)
        items.append(EmbeddedItem(text=text, vector=vector, source=source))
    return items


class TestChooseK(unittest.TestCase):

    def test_bounds_for_all_sizes(self):
        for n in range(1, 101):
            k = choose_k(n)
            self.assertGreaterEqual(k, 1)
            self.assertLessEqual(k, 5)
            self.assertLessEqual(k, n)

    def test_values(self):
        self.assertEqual(choose_k(0), 0)
        self.assertEqual(choose_k(1), 1)
        self.assertEqual(choose_k(5), 1)
        self.assertEqual(choose_k(6), 2)
        self.assertEqual(choose_k(12), 3)
        self.assertEqual(choose_k(500), 5)

    def test_max_clusters_override(self):
        self.assertEqual(choose_k(500, max_clusters=3), 3)


class TestCosineDistances(unittest.TestCase):

    def test_known_angles(self):
        vectors = np.array([[1.0, 0.0]])
        centroids = np.array([[2.0, 0.0], [0.0, 3.0], [-1.0, 0.0]])

        distances = cosine_distances(vectors, centroids)

        np.testing.assert_allclose(distances, [[0.0, 1.0, 2.0]], atol=1e-12)

    def test_zero_magnitude_is_infinite(self):
        vectors = np.array([[0.0, 0.0], [1.0, 0.0]])
        centroids = np.array([[0.0, 0.0], [1.0, 1.0]])

        distances = cosine_distances(vectors, centroids)

        self.assertTrue(np.isinf(distances[0]).all())
        self.assertTrue(np.isinf(distances[1, 0]))
        self.assertFalse(np.isnan(distances).any())


class TestInitCentroids(unittest.TestCase):

    def test_range_and_shape(self):
        centroids = init_centroids(5, 64, np.random.default_rng(0))

        self.assertEqual(centroids.shape, (5, 64))
        self.assertTrue((centroids >= -0.5).all())
        self.assertTrue((centroids < 0.5).all())


class TestRunKMeans(unittest.TestCase):

    def test_stale_centroid_stays_frozen(self):
        """7 items, k=2: centroid 0 attracts nothing and keeps its coordinates."""
        vectors = np.array([[1.0, 0.1 * i] for i in range(7)])
        initial = np.array([[-1.0, 0.0], [1.0, 0.0]])

        result = run_kmeans(vectors, initial)

        # Iteration 1 moves everything to centroid 1, iteration 2 confirms it
        self.assertEqual(result.iterations, 2)
        self.assertTrue(result.converged)
        self.assertTrue((result.assignments == 1).all())
        np.testing.assert_array_equal(result.centroids[0], [-1.0, 0.0])
        np.testing.assert_allclose(result.centroids[1], vectors.mean(axis=0))
        # Input centroids are not mutated
        np.testing.assert_array_equal(initial, [[-1.0, 0.0], [1.0, 0.0]])

    def test_ties_go_to_lowest_index(self):
        vectors = np.array([[1.0, 0.1], [1.0, -0.1]])
        centroids = np.array([[1.0, 0.0], [1.0, 0.0]])

        result = run_kmeans(vectors, centroids)

        self.assertTrue((result.assignments == 0).all())
        self.assertEqual(result.iterations, 1)
        self.assertTrue(result.converged)

    def test_zero_vector_never_wins_and_never_breaks(self):
        vectors = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        centroids = np.array([[1.0, 0.0], [0.0, 1.0]])

        result = run_kmeans(vectors, centroids)

        np.testing.assert_array_equal(result.assignments, [0, 0, 1])
        self.assertFalse(np.isnan(result.centroids).any())

    def test_zero_centroid_never_selected(self):
        vectors = np.array([[1.0, 0.0], [0.0, 1.0]])
        centroids = np.array([[0.0, 0.0], [1.0, 1.0]])

        result = run_kmeans(vectors, centroids)

        self.assertTrue((result.assignments == 1).all())

    def test_iteration_cap(self):
        vectors = np.array([[0.1, 1.0], [-0.1, 1.0]])
        centroids = np.array([[1.0, 0.0], [0.0, 1.0]])

        result = run_kmeans(vectors, centroids, max_iterations=1)

        self.assertEqual(result.iterations, 1)
        self.assertFalse(result.converged)


class TestKMeansPartitioner(unittest.TestCase):
    """Test KMeansPartitioner class."""

    def setUp(self):
        """Three well separated groups of 5 embeddings each."""
        rng = np.random.default_rng(42)
        groups = []
        for axis in range(3):
            group = rng.normal(scale=0.05, size=(5, 16))
            group[:, axis] += 1.0
            groups.append(group)
        self.vectors = np.vstack(groups)
        self.items = _embedded(self.vectors)

    def test_partition_preserves_every_item(self):
        partitioner = KMeansPartitioner(seed=7)
        groups = partitioner.partition(self.items, 3)

        self.assertEqual(sum(len(group) for group in groups), len(self.items))
        self.assertTrue(all(len(group) > 0 for group in groups))

        texts = [item.text for group in groups for item in group]
        self.assertEqual(sorted(texts), sorted(item.text for item in self.items))

    def test_seeded_runs_are_identical(self):
        first = KMeansPartitioner(seed=123).partition(self.items, 3)
        second = KMeansPartitioner(seed=123).partition(self.items, 3)

        self.assertEqual(
            [[item.text for item in group] for group in first],
            [[item.text for item in group] for group in second],
        )

    def test_explicit_centroids_recover_groups(self):
        centroids = np.eye(3, 16)
        groups = KMeansPartitioner().partition(self.items, 3, centroids=centroids)

        self.assertEqual(len(groups), 3)
        for axis, group in enumerate(groups):
            ids = sorted(int(item.source.item.id) for item in group)
            self.assertEqual(ids, list(range(axis * 5, axis * 5 + 5)))

    def test_stale_centroid_group_dropped(self):
        items = _embedded([[1.0, 0.1 * i] for i in range(7)])
        partitioner = KMeansPartitioner()

        groups = partitioner.partition(items, 2, centroids=np.array([[-1.0, 0.0], [1.0, 0.0]]))

        self.assertEqual(len(groups), 1)
        self.assertEqual(len(groups[0]), 7)
        np.testing.assert_array_equal(partitioner.last_result.centroids[0], [-1.0, 0.0])

    def test_invalid_k(self):
        partitioner = KMeansPartitioner()
        with self.assertRaises(ValueError):
            partitioner.partition(self.items, 0)
        with self.assertRaises(ValueError):
            partitioner.partition(self.items, len(self.items) + 1)

    def test_empty_items(self):
        with self.assertRaises(ValueError):
            KMeansPartitioner().partition([], 1)

    def test_wrong_centroid_shape(self):
        with self.assertRaises(ValueError):
            KMeansPartitioner().partition(self.items, 3, centroids=np.zeros((3, 8)))


class TestQualityMetrics(unittest.TestCase):

    def test_separated_groups(self):
        rng = np.random.default_rng(0)
        vectors = np.vstack([
            rng.normal(scale=0.01, size=(4, 4)) + [1, 0, 0, 0],
            rng.normal(scale=0.01, size=(4, 4)) + [0, 1, 0, 0],
        ])
        labels = np.array([0] * 4 + [1] * 4)

        metrics = compute_quality_metrics(vectors, labels)

        self.assertEqual(metrics['n_clusters'], 2)
        self.assertGreater(metrics['silhouette_score'], 0.5)
        self.assertEqual(metrics['min_cluster_size'], 4)
        self.assertEqual(metrics['max_cluster_size'], 4)

    def test_single_cluster_has_no_silhouette(self):
        metrics = compute_quality_metrics(np.ones((3, 2)), np.zeros(3, dtype=int))

        self.assertEqual(metrics['n_clusters'], 1)
        self.assertIsNone(metrics['silhouette_score'])


if __name__ == '__main__':
    unittest.main()
