"""
Unit tests for the deterministic mock clustering.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from qcluster.clustering.mock import THEME_TEMPLATES, generate_mock_clusters
from qcluster.filters import to_filtered_items
from qcluster.models import Item


def _questions(n):
    return to_filtered_items([Item(id=str(i), title=f"Question {i}?") for i in range(n)])


class TestGenerateMockClusters(unittest.TestCase):

    def test_twelve_questions_split_evenly(self):
        clusters = generate_mock_clusters(_questions(12), "Vision Pro")

        self.assertEqual(
            [c.name for c in clusters],
            ["Price & Value", "Features & Specifications",
             "User Experience & Comfort", "Compatibility & Integration"],
        )
        self.assertEqual([c.count for c in clusters], [3, 3, 3, 3])
        for cluster in clusters:
            self.assertEqual(cluster.sentiment.to_dict(), {"positive": 1, "neutral": 0, "negative": 0})

    def test_brand_substituted_in_sample_questions(self):
        clusters = generate_mock_clusters(_questions(4), "Vision Pro")

        self.assertEqual(clusters[0].sample_questions[0], "Is Vision Pro worth the price?")
        self.assertEqual(len(clusters[0].sample_questions), 3)

    def test_blank_brand_uses_placeholder(self):
        clusters = generate_mock_clusters(_questions(4), "  ")

        self.assertEqual(clusters[0].sample_questions[0], "Is brand worth the price?")

    def test_top_questions_come_from_slice(self):
        clusters = generate_mock_clusters(_questions(20), "X")

        self.assertEqual(clusters[1].top_questions, ["Question 5?", "Question 6?", "Question 7?"])

    def test_top_questions_use_raw_titles(self):
        items = to_filtered_items([
            Item(id=str(i), title=f"**Is** it good? https://example.com/{i}") for i in range(4)
        ])

        clusters = generate_mock_clusters(items, "X")

        self.assertEqual(clusters[0].top_questions, ["**Is** it good? https://example.com/0"])

    def test_counts_preserved_for_uneven_sizes(self):
        for n in range(1, 30):
            with self.subTest(n=n):
                clusters = generate_mock_clusters(_questions(n), "X")
                self.assertEqual(sum(c.count for c in clusters), n)
                self.assertLessEqual(len(clusters), len(THEME_TEMPLATES))
                self.assertTrue(all(c.count > 0 for c in clusters))
                self.assertEqual([c.id for c in clusters], list(range(len(clusters))))

    def test_small_input_drops_empty_slices(self):
        clusters = generate_mock_clusters(_questions(2), "X")

        # floor(i*2/4) slices: [0,0), [0,1), [1,1), [1,2)
        self.assertEqual([c.name for c in clusters], ["Features & Specifications", "Compatibility & Integration"])
        self.assertEqual([c.id for c in clusters], [0, 1])

    def test_sentiment_scaled_by_slice_size(self):
        clusters = generate_mock_clusters(_questions(40), "X")

        # 10 per slice: floor(5.0), floor(3.0), floor(2.0)
        self.assertEqual(clusters[0].sentiment.to_dict(), {"positive": 5, "neutral": 3, "negative": 2})

    def test_empty_input(self):
        self.assertEqual(generate_mock_clusters([], "X"), [])


if __name__ == '__main__':
    unittest.main()
