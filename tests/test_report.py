"""
Unit tests for cluster insights and recommendations.
"""

from qcluster.models import Cluster, SentimentBreakdown
from qcluster.report import generate_insights, generate_recommendations, summarize


def _cluster(cluster_id, name, count, positive=0, neutral=0, negative=0):
    return Cluster(
        id=cluster_id,
        name=name,
        count=count,
        sample_questions=[],
        top_questions=[],
        sentiment=SentimentBreakdown(positive=positive, neutral=neutral, negative=negative),
    )


class TestInsights:

    def test_no_clusters(self):
        assert generate_insights([]) == ['No question clusters were identified in this analysis']

    def test_top_cluster_and_positive_sentiment(self):
        clusters = [
            _cluster(0, "Battery Life", 3, positive=3),
            _cluster(1, "Price", 5, positive=4, neutral=1),
        ]

        insights = generate_insights(clusters)

        assert insights[0] == 'The most discussed topic is "Price" with 5 questions'
        assert insights[1] == 'Overall sentiment is positive (88% positive)'
        assert insights[2] == 'Low question volume (8 questions) suggests limited discussion'

    def test_first_cluster_wins_ties(self):
        clusters = [_cluster(0, "A", 4, neutral=4), _cluster(1, "B", 4, neutral=4)]

        assert '"A"' in generate_insights(clusters)[0]

    def test_negative_sentiment_and_high_volume(self):
        clusters = [_cluster(0, "Problems", 60, negative=30, neutral=30)]

        insights = generate_insights(clusters)

        assert insights[1] == 'Significant negative sentiment detected (50% negative)'
        assert insights[2] == 'High question volume (60 questions) indicates strong user interest'

    def test_mixed_sentiment(self):
        clusters = [_cluster(0, "Setup", 20, positive=8, neutral=8, negative=4)]

        insights = generate_insights(clusters)

        assert insights[1] == 'Mixed sentiment with 40% positive and 20% negative'
        assert len(insights) == 2


class TestRecommendations:

    def test_no_clusters(self):
        assert generate_recommendations([]) == ['Increase brand visibility to generate more user discussions']

    def test_negative_feedback(self):
        clusters = [_cluster(0, "Problems", 10, negative=4, neutral=6)]

        recommendations = generate_recommendations(clusters)

        assert recommendations[0] == 'Address "Problems" concerns through targeted content or FAQ updates'
        assert 'Proactively address negative feedback and pain points' in recommendations
        assert 'Expand product information to address broader user concerns' in recommendations

    def test_many_clusters(self):
        clusters = [_cluster(i, f"Theme {i + 1}", 5, neutral=5) for i in range(5)]

        recommendations = generate_recommendations(clusters)

        assert recommendations[-1] == 'Create comprehensive documentation addressing diverse user questions'

    def test_summarize(self):
        summary = summarize([_cluster(0, "Price", 3, positive=3)])

        assert set(summary) == {'insights', 'recommendations'}
