"""Structural and range checks over a batch of metric records."""

from __future__ import annotations

import logging

from rankiro.models import ValidationError, ValidationResult, ValidationWarning, VideoMetrics

logger = logging.getLogger(__name__)

_NON_NEGATIVE_FIELDS = (
    "views",
    "likes",
    "dislikes",
    "comments",
    "shares",
    "watch_time",
    "average_view_duration",
)


def _record_issues(metric: VideoMetrics) -> tuple[list[ValidationError], list[ValidationWarning]]:
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    if not metric.video_id:
        errors.append(
            ValidationError(field="video_id", message="Video ID is required", value=metric.video_id)
        )

    if metric.timestamp is None:
        errors.append(
            ValidationError(field="timestamp", message="Timestamp is required", value=None)
        )

    for field in _NON_NEGATIVE_FIELDS:
        value = getattr(metric, field)
        if value < 0:
            errors.append(ValidationError(field=field, message=f"{field} cannot be negative", value=value))

    if not 0 <= metric.engagement_rate <= 1:
        errors.append(
            ValidationError(
                field="engagement_rate",
                message="Engagement rate must be between 0 and 1",
                value=metric.engagement_rate,
            )
        )

    if metric.likes > metric.views:
        warnings.append(
            ValidationWarning(field="likes", message="Likes exceed views, which is unusual", value=metric.likes)
        )

    # Below two views the average is dominated by rounding noise.
    if metric.average_view_duration > metric.watch_time and metric.views > 1:
        warnings.append(
            ValidationWarning(
                field="average_view_duration",
                message="Average view duration exceeds total watch time",
                value=metric.average_view_duration,
            )
        )

    return errors, warnings


def validate_metrics(metrics: list[VideoMetrics]) -> ValidationResult:
    """Check every record; all problems are collected, none short-circuit."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    for metric in metrics:
        record_errors, record_warnings = _record_issues(metric)
        errors.extend(record_errors)
        warnings.extend(record_warnings)

    logger.debug(
        "Validated %d records: %d errors, %d warnings", len(metrics), len(errors), len(warnings)
    )
    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
