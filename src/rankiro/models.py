"""Domain models used across the metrics and ranking pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Rank carried by a score that has not been through a batch ranking pass.
UNRANKED = 0


class Granularity(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Video(BaseModel):
    """Item catalog record. Read-only input to scoring."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str = ""
    upload_date: datetime
    creator_id: str = ""
    duration: float = 0.0  # seconds
    thumbnail_url: str | None = None
    tags: tuple[str, ...] = ()
    category: str = ""


class VideoMetrics(BaseModel):
    """One engagement snapshot for a video.

    ``timestamp`` is ``None`` when the source value was missing or could not
    be parsed; the validator reports it.
    """

    model_config = ConfigDict(frozen=True)

    video_id: str
    timestamp: datetime | None
    views: float = 0
    likes: float = 0
    dislikes: float = 0
    comments: float = 0
    shares: float = 0
    watch_time: float = 0  # total seconds
    average_view_duration: float = 0  # seconds
    engagement_rate: float = 0.0


class RankingFactors(BaseModel):
    """Weights for the five score components.

    Not checked on construction; ``rank.validate_ranking_factors`` is the
    only place the sum and range rules are enforced.
    """

    model_config = ConfigDict(frozen=True)

    views_weight: float
    engagement_weight: float
    recency_weight: float
    quality_weight: float
    trending_weight: float

    def weights(self) -> dict[str, float]:
        return {
            "views_weight": self.views_weight,
            "engagement_weight": self.engagement_weight,
            "recency_weight": self.recency_weight,
            "quality_weight": self.quality_weight,
            "trending_weight": self.trending_weight,
        }

    @property
    def total_weight(self) -> float:
        return sum(self.weights().values())


class RankingScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    video_id: str
    score: float
    rank: int = UNRANKED
    category: str = ""
    timestamp: datetime
    factors: RankingFactors

    @property
    def is_ranked(self) -> bool:
        return self.rank != UNRANKED


class AggregatedMetrics(BaseModel):
    """Roll-up of one video's metrics inside one time bucket."""

    model_config = ConfigDict(frozen=True)

    period: datetime  # bucket start
    video_id: str
    total_views: float = 0
    total_likes: float = 0
    total_comments: float = 0
    total_shares: float = 0
    total_watch_time: float = 0
    average_engagement_rate: float = 0.0


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    value: Any = None


class ValidationError(ValidationIssue):
    """Blocks validity."""


class ValidationWarning(ValidationIssue):
    """Suspicious but legal value."""


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: tuple[ValidationError, ...] = Field(default_factory=tuple)
    warnings: tuple[ValidationWarning, ...] = Field(default_factory=tuple)
