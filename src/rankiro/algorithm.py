"""Pluggable ranking algorithms.

The orchestrator in ``rankiro.rank`` only talks to the ``RankingAlgorithm``
interface, so strategies can be swapped without touching ranking logic.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from rankiro import config
from rankiro.models import RankingFactors, Video, VideoMetrics

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class RankingAlgorithm(ABC):
    """Interface every scoring strategy implements."""

    @abstractmethod
    def calculate_score(self, video: Video, metrics: VideoMetrics, factors: RankingFactors) -> float:
        """Raw weighted score. Must be deterministic in its three inputs."""

    def normalize_score(self, score: float, min_score: float, max_score: float) -> float:
        """Map *score* onto [0, 1] relative to the batch range.

        Raises ``ValueError`` when the range is empty.
        """
        if max_score == min_score:
            raise ValueError(f"Cannot normalize against an empty range [{min_score}, {max_score}]")
        return (score - min_score) / (max_score - min_score)

    @abstractmethod
    def apply_trending_boost(self, score: float, video: Video, metrics: VideoMetrics) -> float:
        """Adjust *score* for recently published content."""


# ── Component scaling (tuneable) ───────────────────────────────────────────
VIEW_SATURATION = 10_000_000
VELOCITY_SATURATION = 100_000  # views per hour
RECENCY_HALF_LIFE_HOURS = 72.0


class WeightedRankingAlgorithm(RankingAlgorithm):
    """Weighted sum of five components, each scaled into [0, 1]."""

    def __init__(
        self,
        clock: Clock = utcnow,
        trending_window: timedelta | None = None,
        trending_boost: float | None = None,
    ) -> None:
        self._clock = clock
        if trending_window is None:
            trending_window = timedelta(hours=config.TRENDING_WINDOW_HOURS)
        self._trending_window = trending_window
        self._trending_boost = config.TRENDING_BOOST if trending_boost is None else trending_boost

    # ── public ──────────────────────────────────────────────────────────

    def calculate_score(self, video: Video, metrics: VideoMetrics, factors: RankingFactors) -> float:
        components = self.components(video, metrics)
        return (
            factors.views_weight * components["views"]
            + factors.engagement_weight * components["engagement"]
            + factors.recency_weight * components["recency"]
            + factors.quality_weight * components["quality"]
            + factors.trending_weight * components["trending"]
        )

    def apply_trending_boost(self, score: float, video: Video, metrics: VideoMetrics) -> float:
        # "now" is read per call, not once per batch.
        age = _as_utc(self._clock()) - _as_utc(video.upload_date)
        if age < self._trending_window:
            return score * self._trending_boost
        return score

    def components(self, video: Video, metrics: VideoMetrics) -> dict[str, float]:
        """Per-component values before weighting; useful for explaining a score."""
        age_hours = self._snapshot_age_hours(video, metrics)
        return {
            "views": self._views_component(metrics.views),
            "engagement": min(max(metrics.engagement_rate, 0.0), 1.0),
            "recency": self._recency_component(age_hours),
            "quality": self._quality_component(video, metrics),
            "trending": self._trending_component(metrics.views, age_hours),
        }

    # ── private ─────────────────────────────────────────────────────────

    @staticmethod
    def _snapshot_age_hours(video: Video, metrics: VideoMetrics) -> float | None:
        if metrics.timestamp is None:
            return None
        delta = _as_utc(metrics.timestamp) - _as_utc(video.upload_date)
        return max(delta.total_seconds() / 3600, 0.0)

    @staticmethod
    def _views_component(views: float) -> float:
        if views <= 0:
            return 0.0
        return min(math.log1p(views) / math.log1p(VIEW_SATURATION), 1.0)

    @staticmethod
    def _recency_component(age_hours: float | None) -> float:
        if age_hours is None:
            return 0.0
        return 0.5 ** (age_hours / RECENCY_HALF_LIFE_HOURS)

    @staticmethod
    def _quality_component(video: Video, metrics: VideoMetrics) -> float:
        if video.duration <= 0:
            return 0.0
        return min(max(metrics.average_view_duration / video.duration, 0.0), 1.0)

    @staticmethod
    def _trending_component(views: float, age_hours: float | None) -> float:
        if age_hours is None or views <= 0:
            return 0.0
        velocity = views / max(age_hours, 1.0)
        return min(math.log1p(velocity) / math.log1p(VELOCITY_SATURATION), 1.0)
