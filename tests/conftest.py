"""Shared fixtures: an in-memory ranking store and model builders."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from rankiro.models import RankingFactors, RankingScore, Video, VideoMetrics
from rankiro.store import RankingStore

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


class InMemoryRankingStore(RankingStore):
    """Appends every saved batch; queries read the flattened history."""

    def __init__(self) -> None:
        self.batches: list[list[RankingScore]] = []

    @property
    def all_scores(self) -> list[RankingScore]:
        return [score for batch in self.batches for score in batch]

    def save_ranking_scores(self, scores: list[RankingScore]) -> None:
        self.batches.append(list(scores))

    def get_rankings_by_category(
        self, category: str, limit: int, offset: int = 0
    ) -> list[RankingScore]:
        matching = [s for s in self.all_scores if s.category == category]
        return sorted(matching, key=lambda s: s.rank)[offset : offset + limit]

    def get_video_ranking_history(
        self,
        video_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[RankingScore]:
        return [
            s
            for s in self.all_scores
            if s.video_id == video_id
            and (start_date is None or s.timestamp >= start_date)
            and (end_date is None or s.timestamp <= end_date)
        ]

    def get_top_ranked_videos(self, limit: int) -> list[RankingScore]:
        return sorted(self.all_scores, key=lambda s: s.rank)[:limit]


@pytest.fixture
def store() -> InMemoryRankingStore:
    return InMemoryRankingStore()


@pytest.fixture
def default_factors() -> RankingFactors:
    return make_factors(0.4, 0.3, 0.1, 0.1, 0.1)


def make_factors(
    views: float, engagement: float, recency: float, quality: float, trending: float
) -> RankingFactors:
    return RankingFactors(
        views_weight=views,
        engagement_weight=engagement,
        recency_weight=recency,
        quality_weight=quality,
        trending_weight=trending,
    )


def make_video(video_id: str, category: str = "music", uploaded: datetime | None = None) -> Video:
    return Video(
        id=video_id,
        title=f"Video {video_id}",
        upload_date=uploaded or datetime(2024, 1, 1, tzinfo=UTC),
        creator_id="creator-1",
        duration=300,
        category=category,
    )


def make_metrics(video_id: str = "v1", timestamp: datetime | None = NOW, **overrides: float) -> VideoMetrics:
    return VideoMetrics(video_id=video_id, timestamp=timestamp, **overrides)
