"""Contract for the storage layer that persists ranking scores.

rankiro does not ship a storage engine; applications plug one in by
implementing ``RankingStore``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from rankiro.models import RankingScore


class RankingStore(ABC):
    """Persistence and query side of the ranking pipeline."""

    @abstractmethod
    def save_ranking_scores(self, scores: list[RankingScore]) -> None:
        """Persist one ranked batch. Overwrite vs. append is up to the store."""

    @abstractmethod
    def get_rankings_by_category(
        self, category: str, limit: int, offset: int = 0
    ) -> list[RankingScore]:
        """Return ranked scores for *category*, paged by *limit* / *offset*."""

    @abstractmethod
    def get_video_ranking_history(
        self,
        video_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[RankingScore]:
        """Return every stored score for *video_id*, optionally within a date range."""

    @abstractmethod
    def get_top_ranked_videos(self, limit: int) -> list[RankingScore]:
        """Return the best-ranked scores across all categories."""
