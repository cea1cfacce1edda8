"""Unit tests for derived-metric calculation."""

import pytest
from conftest import make_metrics

from rankiro.derive import calculate_derived_metrics, derive_missing


class TestDeriveMissing:
    def test_engagement_rate_from_interactions(self) -> None:
        derived = derive_missing(make_metrics(views=1000, likes=100, comments=50, shares=25))
        assert derived.engagement_rate == pytest.approx(0.175)

    def test_engagement_rate_is_capped(self) -> None:
        derived = derive_missing(make_metrics(views=100, likes=200, comments=50, shares=25))
        assert derived.engagement_rate == 1.0

    def test_average_view_duration(self) -> None:
        derived = derive_missing(make_metrics(views=100, watch_time=4500))
        assert derived.average_view_duration == pytest.approx(45.0)

    def test_zero_views_left_alone(self) -> None:
        metric = make_metrics(views=0, likes=10, watch_time=100)
        derived = derive_missing(metric)
        assert derived.engagement_rate == 0
        assert derived.average_view_duration == 0

    def test_existing_values_not_overwritten(self) -> None:
        metric = make_metrics(views=100, likes=90, watch_time=1000, engagement_rate=0.05, average_view_duration=7)
        derived = derive_missing(metric)
        assert derived == metric

    def test_existing_rate_above_one_is_passed_through(self) -> None:
        # Only freshly derived values are capped; the validator reports this one.
        derived = derive_missing(make_metrics(views=10, engagement_rate=1.5))
        assert derived.engagement_rate == 1.5

    def test_only_missing_field_is_filled(self) -> None:
        derived = derive_missing(make_metrics(views=10, likes=1, watch_time=50, engagement_rate=0.3))
        assert derived.engagement_rate == 0.3
        assert derived.average_view_duration == pytest.approx(5.0)


class TestCalculateDerivedMetrics:
    def test_idempotent(self) -> None:
        metrics = [
            make_metrics("a", views=1000, likes=100, comments=50, shares=25, watch_time=9000),
            make_metrics("b", views=0),
            make_metrics("c", views=50),
            make_metrics("d", views=10, likes=40),
        ]
        once = calculate_derived_metrics(metrics)
        assert calculate_derived_metrics(once) == once

    def test_rate_never_exceeds_one(self) -> None:
        cases = [(1, 0, 0, 0), (1, 5, 5, 5), (3, 1, 1, 1), (7, 2, 0, 9), (1000, 1, 2, 3)]
        metrics = [
            make_metrics(views=v, likes=lk, comments=c, shares=s) for v, lk, c, s in cases
        ]
        for derived in calculate_derived_metrics(metrics):
            assert derived.engagement_rate <= 1.0

    def test_preserves_order(self) -> None:
        metrics = [make_metrics(str(i), views=i) for i in range(5)]
        assert [m.video_id for m in calculate_derived_metrics(metrics)] == ["0", "1", "2", "3", "4"]
