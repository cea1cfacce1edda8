"""Roll metric records up into per-video time buckets."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from rankiro.models import AggregatedMetrics, Granularity, VideoMetrics

logger = logging.getLogger(__name__)

EngagementMerge = Callable[[float, float], float]


def pairwise_mean(existing: float, new: float) -> float:
    """Average the running value with the newest record, unweighted.

    With three or more records in a bucket this leans towards the most
    recent ones; it is not the true mean of the bucket.
    """
    return (existing + new) / 2


def bucket_start(timestamp: datetime, granularity: Granularity | str) -> datetime:
    """Return the start of the bucket containing *timestamp*.

    Truncation happens in whatever timezone the timestamp carries. Weeks
    start on Sunday.
    """
    granularity = Granularity(granularity)
    midnight = timestamp.replace(hour=0, minute=0, second=0, microsecond=0)

    if granularity is Granularity.HOUR:
        return timestamp.replace(minute=0, second=0, microsecond=0)
    if granularity is Granularity.DAY:
        return midnight
    if granularity is Granularity.WEEK:
        # weekday(): Monday == 0 ... Sunday == 6
        days_since_sunday = (timestamp.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    return midnight.replace(day=1)


def aggregate_metrics(
    metrics: list[VideoMetrics],
    granularity: Granularity | str,
    merge_engagement: EngagementMerge = pairwise_mean,
) -> list[AggregatedMetrics]:
    """Group records by (video, bucket) and sum them.

    Output follows the order in which each (video, bucket) key was first
    seen. Records without a valid timestamp cannot be bucketed and are
    skipped.
    """
    granularity = Granularity(granularity)
    buckets: dict[tuple[str, datetime], AggregatedMetrics] = {}
    skipped = 0

    for metric in metrics:
        if metric.timestamp is None:
            skipped += 1
            continue

        period = bucket_start(metric.timestamp, granularity)
        key = (metric.video_id, period)
        existing = buckets.get(key)

        if existing is None:
            buckets[key] = AggregatedMetrics(
                period=period,
                video_id=metric.video_id,
                total_views=metric.views,
                total_likes=metric.likes,
                total_comments=metric.comments,
                total_shares=metric.shares,
                total_watch_time=metric.watch_time,
                average_engagement_rate=metric.engagement_rate,
            )
            continue

        buckets[key] = existing.model_copy(
            update={
                "total_views": existing.total_views + metric.views,
                "total_likes": existing.total_likes + metric.likes,
                "total_comments": existing.total_comments + metric.comments,
                "total_shares": existing.total_shares + metric.shares,
                "total_watch_time": existing.total_watch_time + metric.watch_time,
                "average_engagement_rate": merge_engagement(
                    existing.average_engagement_rate, metric.engagement_rate
                ),
            }
        )

    if skipped:
        logger.warning("Aggregation skipped %d records without a valid timestamp", skipped)
    logger.info(
        "Aggregated %d records into %d %s buckets", len(metrics), len(buckets), granularity.value
    )
    return list(buckets.values())
