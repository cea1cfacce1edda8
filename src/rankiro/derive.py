"""Fill in engagement rate and average view duration where they are missing."""

from __future__ import annotations

from rankiro.models import VideoMetrics

MAX_ENGAGEMENT_RATE = 1.0


def derive_missing(metric: VideoMetrics) -> VideoMetrics:
    """Fill zero-valued derived fields; non-zero values are never overwritten."""
    if metric.views <= 0:
        return metric

    update: dict[str, float] = {}
    if metric.engagement_rate == 0:
        total_engagement = metric.likes + metric.comments + metric.shares
        update["engagement_rate"] = min(total_engagement / metric.views, MAX_ENGAGEMENT_RATE)
    if metric.average_view_duration == 0:
        update["average_view_duration"] = metric.watch_time / metric.views

    return metric.model_copy(update=update) if update else metric


def calculate_derived_metrics(metrics: list[VideoMetrics]) -> list[VideoMetrics]:
    return [derive_missing(metric) for metric in metrics]
