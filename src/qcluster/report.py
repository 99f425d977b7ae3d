"""
Plain-language insights and recommendations for a set of clusters.
"""

import math
from typing import Dict, List, Optional, Sequence

from .models import Cluster

HIGH_VOLUME = 50
LOW_VOLUME = 10


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def _top_cluster(clusters: Sequence[Cluster]) -> Optional[Cluster]:
    # First cluster wins ties
    top = None
    for cluster in clusters:
        if top is None or cluster.count > top.count:
            top = cluster
    return top


def generate_insights(clusters: Sequence[Cluster]) -> List[str]:
    if not clusters:
        return ['No question clusters were identified in this analysis']

    insights = []
    top = _top_cluster(clusters)
    insights.append(f'The most discussed topic is "{top.name}" with {top.count} questions')

    total = sum(cluster.count for cluster in clusters)
    positive = _percent(sum(c.sentiment.positive for c in clusters), total)
    negative = _percent(sum(c.sentiment.negative for c in clusters), total)

    if positive > 60:
        insights.append(f'Overall sentiment is positive ({_round(positive)}% positive)')
    elif negative > 40:
        insights.append(f'Significant negative sentiment detected ({_round(negative)}% negative)')
    else:
        insights.append(
            f'Mixed sentiment with {_round(positive)}% positive and {_round(negative)}% negative'
        )

    if total > HIGH_VOLUME:
        insights.append(f'High question volume ({total} questions) indicates strong user interest')
    elif total < LOW_VOLUME:
        insights.append(f'Low question volume ({total} questions) suggests limited discussion')

    return insights


def generate_recommendations(clusters: Sequence[Cluster]) -> List[str]:
    if not clusters:
        return ['Increase brand visibility to generate more user discussions']

    recommendations = []
    top = _top_cluster(clusters)
    recommendations.append(f'Address "{top.name}" concerns through targeted content or FAQ updates')

    total = sum(cluster.count for cluster in clusters)
    negative = _percent(sum(c.sentiment.negative for c in clusters), total)
    if negative > 30:
        recommendations.append('Proactively address negative feedback and pain points')
        recommendations.append('Consider customer support improvements or product enhancements')

    if len(clusters) > 4:
        recommendations.append('Create comprehensive documentation addressing diverse user questions')
    elif len(clusters) <= 2:
        recommendations.append('Expand product information to address broader user concerns')

    return recommendations


def summarize(clusters: Sequence[Cluster]) -> Dict[str, List[str]]:
    return {
        'insights': generate_insights(clusters),
        'recommendations': generate_recommendations(clusters),
    }
