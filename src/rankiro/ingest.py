"""Turn untyped raw metric records into ``VideoMetrics``."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Real
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from rankiro.models import VideoMetrics

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)

# Accepted source keys per field; snake_case first, then the camelCase
# spelling used by JSON exports.
_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "video_id": ("video_id", "videoId"),
    "timestamp": ("timestamp",),
    "views": ("views",),
    "likes": ("likes",),
    "dislikes": ("dislikes",),
    "comments": ("comments",),
    "shares": ("shares",),
    "watch_time": ("watch_time", "watchTime"),
    "average_view_duration": ("average_view_duration", "averageViewDuration"),
    "engagement_rate": ("engagement_rate", "engagementRate"),
}

_NUMERIC_FIELDS = (
    "views",
    "likes",
    "dislikes",
    "comments",
    "shares",
    "watch_time",
    "average_view_duration",
    "engagement_rate",
)


def _lookup(obj: Mapping[str, Any], field: str) -> Any:
    for key in _FIELD_KEYS[field]:
        if key in obj:
            return obj[key]
    return None


def _coerce_number(value: Any) -> float:
    """Finite numbers and numeric strings are parsed; anything else is 0.

    Covers ``Decimal`` and numpy scalars as well as plain ints and floats.
    """
    if isinstance(value, bool):
        return 0
    if not isinstance(value, (Real, Decimal, str)):
        return 0
    try:
        parsed = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return 0
    return parsed if math.isfinite(parsed) else 0


def _coerce_timestamp(value: Any) -> datetime | None:
    """Parse ISO strings, epoch numbers and date-likes. ``None`` if invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return _DATETIME.validate_python(value)
    except PydanticValidationError:
        return None


def parse_raw_metrics(raw: Any) -> VideoMetrics | None:
    """Build one ``VideoMetrics`` from *raw*, or return ``None`` to reject it.

    Only non-mapping input is rejected. An empty video id or an unparseable
    timestamp still produces a record so that the validator can report it.
    """
    if not isinstance(raw, Mapping):
        return None

    video_id = _lookup(raw, "video_id")
    numbers = {field: _coerce_number(_lookup(raw, field)) for field in _NUMERIC_FIELDS}
    return VideoMetrics(
        video_id="" if video_id is None else str(video_id),
        timestamp=_coerce_timestamp(_lookup(raw, "timestamp")),
        **numbers,
    )


def process_metrics(raw_metrics: list[Any], rejected: list[int] | None = None) -> list[VideoMetrics]:
    """Parse a batch of raw records, skipping the ones that are rejected.

    When *rejected* is given, the input index of every skipped record is
    appended to it.
    """
    processed: list[VideoMetrics] = []
    for index, raw in enumerate(raw_metrics):
        metrics = parse_raw_metrics(raw)
        if metrics is None:
            logger.warning("Skipping raw metrics #%d: not a record (%s)", index, type(raw).__name__)
            if rejected is not None:
                rejected.append(index)
            continue
        processed.append(metrics)

    logger.info(
        "Processed metrics: %d raw → %d parsed (rejected %d)",
        len(raw_metrics),
        len(processed),
        len(raw_metrics) - len(processed),
    )
    return processed
