"""Pipeline orchestration — wires build → validate → derive → aggregate / rank."""

from __future__ import annotations

import logging
import sys
from typing import Any

from pydantic import BaseModel, Field

from rankiro import config
from rankiro.aggregate import aggregate_metrics
from rankiro.derive import calculate_derived_metrics
from rankiro.ingest import process_metrics
from rankiro.models import (
    AggregatedMetrics,
    Granularity,
    RankingFactors,
    RankingScore,
    ValidationResult,
    Video,
    VideoMetrics,
)
from rankiro.rank import RankingService
from rankiro.validate import validate_metrics

logger = logging.getLogger(__name__)


class PreparedMetrics(BaseModel):
    metrics: list[VideoMetrics] = Field(default_factory=list)
    validation: ValidationResult
    rejected: list[int] = Field(default_factory=list)  # raw input indices


class RankingRun(BaseModel):
    scores: list[RankingScore] = Field(default_factory=list)
    validation: ValidationResult
    rejected: list[int] = Field(default_factory=list)
    skipped_video_ids: list[str] = Field(default_factory=list)


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def prepare_metrics(raw_metrics: list[Any]) -> PreparedMetrics:
    """Build, validate and derive metric records.

    Validation is advisory: problems are logged and reported, but every
    built record is passed on.
    """
    # ── 1. Build records ──────────────────────────────────────────────
    rejected: list[int] = []
    metrics = process_metrics(raw_metrics, rejected=rejected)

    # ── 2. Validate ───────────────────────────────────────────────────
    validation = validate_metrics(metrics)
    for error in validation.errors:
        logger.warning("Invalid %s (%r): %s", error.field, error.value, error.message)
    for warning in validation.warnings:
        logger.info("Suspicious %s (%r): %s", warning.field, warning.value, warning.message)

    # ── 3. Fill derived fields ────────────────────────────────────────
    derived = calculate_derived_metrics(metrics)

    return PreparedMetrics(metrics=derived, validation=validation, rejected=rejected)


def rank_videos(
    raw_metrics: list[Any],
    videos: list[Video],
    service: RankingService,
    factors: RankingFactors | None = None,
) -> RankingRun:
    """Prepare raw metrics and rank *videos* with them."""
    logger.info("=== ranking run start [%d videos, %d raw metrics] ===", len(videos), len(raw_metrics))
    prepared = prepare_metrics(raw_metrics)

    skipped: list[str] = []
    scores = service.calculate_batch_ranking_scores(
        videos, prepared.metrics, factors=factors, skipped=skipped
    )
    if skipped:
        logger.info("Skipped %d videos without metrics", len(skipped))

    logger.info("=== ranking run done — %d ranked ===", len(scores))
    return RankingRun(
        scores=scores,
        validation=prepared.validation,
        rejected=prepared.rejected,
        skipped_video_ids=skipped,
    )


def aggregate_report(
    raw_metrics: list[Any], granularity: Granularity | str = Granularity.DAY
) -> list[AggregatedMetrics]:
    """Prepare raw metrics and roll them up into time buckets."""
    prepared = prepare_metrics(raw_metrics)
    return aggregate_metrics(prepared.metrics, granularity)
