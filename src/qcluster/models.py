"""
Record types for the question clustering pipeline.

Data flow:
    Item -> FilteredItem -> EmbeddedItem -> Cluster -> ClusteringResult

Constraints:
    - Item.id and Item.title are required (validated at ingestion)
    - Cluster.count >= 1 (empty clusters are never emitted)
    - Cluster.sample_questions holds at most 3 texts, top_questions at most 5
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

MAX_SAMPLE_QUESTIONS = 3
MAX_TOP_QUESTIONS = 5


@dataclass(frozen=True)
class Item:
    """
    Raw forum post as handed to the engine.

    Attributes:
        id: Post identifier
        title: Post title (may be empty for body-only posts)
        body: Post body text
    """
    id: str
    title: str
    body: str = ""

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError(f"Item id must be a non-empty string, got {self.id!r}")
        if not isinstance(self.title, str):
            raise ValueError(f"Item {self.id} title must be a string, got {type(self.title).__name__}")
        if not isinstance(self.body, str):
            raise ValueError(f"Item {self.id} body must be a string, got {type(self.body).__name__}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """
        Build an Item from a raw post mapping.

        Numeric ids are accepted and converted; a missing or null body
        becomes an empty string. Missing id or title raises ValueError.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Item must be a mapping, got {type(data).__name__}")

        for key in ("id", "title"):
            if data.get(key) is None:
                raise ValueError(f"Item missing required field '{key}': {dict(data)}")

        item_id = data["id"]
        if isinstance(item_id, int):
            item_id = str(item_id)

        return cls(id=item_id, title=data["title"], body=data.get("body") or "")


@dataclass(frozen=True)
class FilteredItem:
    """Item that passed the question filter, with the text used for embedding."""
    item: Item
    text: str


@dataclass
class EmbeddedItem:
    """Filtered item paired with its embedding vector."""
    text: str
    vector: np.ndarray
    source: FilteredItem

    def __post_init__(self):
        self.vector = np.asarray(self.vector, dtype=np.float64)
        if self.vector.ndim != 1:
            raise ValueError(f"Embedding must be 1D, got shape {self.vector.shape}")

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


@dataclass(frozen=True)
class SentimentBreakdown:
    """Per-cluster counts of positive / neutral / negative questions."""
    positive: int = 0
    neutral: int = 0
    negative: int = 0

    def __post_init__(self):
        for name in ("positive", "neutral", "negative"):
            if getattr(self, name) < 0:
                raise ValueError(f"Sentiment count '{name}' cannot be negative")

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative

    @classmethod
    def from_ratios(
        cls,
        count: int,
        positive: float,
        neutral: float,
        negative: float
    ) -> "SentimentBreakdown":
        """Synthetic split: each share is floored, so the total may be below count."""
        return cls(
            positive=math.floor(count * positive),
            neutral=math.floor(count * neutral),
            negative=math.floor(count * negative),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"positive": self.positive, "neutral": self.neutral, "negative": self.negative}


@dataclass(frozen=True)
class Cluster:
    """
    Labeled question cluster returned to callers.

    Immutable once created; consumed by report generation and storage.
    """
    id: int
    name: str
    count: int
    sample_questions: List[str]
    top_questions: List[str]
    sentiment: SentimentBreakdown

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Cluster {self.id} must contain at least one question")
        if len(self.sample_questions) > MAX_SAMPLE_QUESTIONS:
            raise ValueError(
                f"Cluster {self.id} has {len(self.sample_questions)} sample questions, "
                f"max {MAX_SAMPLE_QUESTIONS}"
            )
        if len(self.top_questions) > MAX_TOP_QUESTIONS:
            raise ValueError(
                f"Cluster {self.id} has {len(self.top_questions)} top questions, "
                f"max {MAX_TOP_QUESTIONS}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "count": self.count,
            "sampleQuestions": list(self.sample_questions),
            "topQuestions": list(self.top_questions),
            "sentiment": self.sentiment.to_dict(),
        }


@dataclass
class ClusteringResult:
    """
    Outcome of one clustering run.

    Attributes:
        clusters: Ordered clusters (ids 0..m-1)
        questions_found: Number of items that passed the question filter
        using_mock: True when the canned mock clustering was used
        note: Why the run was downgraded to mock clustering (if it was)
        quality: Partition quality metrics (semantic runs only)
    """
    clusters: List[Cluster]
    questions_found: int
    using_mock: bool
    note: Optional[str] = None
    quality: Optional[Dict[str, Any]] = field(default=None)

    @property
    def total_clusters(self) -> int:
        return len(self.clusters)

    @property
    def average_cluster_size(self) -> int:
        if self.total_clusters == 0:
            return 0
        # Half-up rounding; built-in round() would round 2.5 down to 2
        return math.floor(self.questions_found / self.total_clusters + 0.5)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": True,
            "questionsFound": self.questions_found,
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "stats": {
                "totalClusters": self.total_clusters,
                "averageClusterSize": self.average_cluster_size,
            },
            "usingMock": self.using_mock,
        }
        if self.note:
            data["note"] = self.note
        if self.quality is not None:
            data["quality"] = self.quality
        return data
