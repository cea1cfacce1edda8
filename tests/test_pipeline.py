"""Integration tests for the prepare → rank / aggregate pipeline."""

import logging

import pytest
from conftest import NOW, InMemoryRankingStore, make_video

from rankiro.algorithm import WeightedRankingAlgorithm
from rankiro.models import Granularity, RankingFactors
from rankiro.pipeline import aggregate_report, prepare_metrics, rank_videos, setup_logging
from rankiro.rank import RankingService

_RAW = [
    {
        "videoId": "v1",
        "timestamp": "2024-01-15T09:00:00Z",
        "views": 1000,
        "likes": 100,
        "comments": 50,
        "shares": 25,
        "watchTime": 120000,
    },
    {"videoId": "v2", "timestamp": "2024-01-15T10:00:00Z", "views": 10, "likes": 50},
    None,
    {"videoId": "", "timestamp": "garbage", "views": -3},
    {"videoId": "v1", "timestamp": "2024-01-15T18:00:00Z", "views": 500, "engagementRate": 0.3},
]


class TestPrepareMetrics:
    def test_builds_validates_and_derives(self) -> None:
        prepared = prepare_metrics(_RAW)
        assert prepared.rejected == [2]
        assert len(prepared.metrics) == 4
        assert prepared.metrics[0].engagement_rate == pytest.approx(0.175)
        assert prepared.metrics[0].average_view_duration == pytest.approx(120.0)

    def test_validation_is_advisory(self) -> None:
        prepared = prepare_metrics(_RAW)
        assert not prepared.validation.is_valid
        assert {e.field for e in prepared.validation.errors} == {"video_id", "timestamp", "views"}
        assert [w.field for w in prepared.validation.warnings] == ["likes", "likes"]
        # the invalid record is still passed downstream
        assert any(m.video_id == "" for m in prepared.metrics)


class TestRankVideos:
    def test_ranks_and_reports_drops(self, store: InMemoryRankingStore, default_factors: RankingFactors) -> None:
        service = RankingService(WeightedRankingAlgorithm(clock=lambda: NOW), store, factors=default_factors)
        run = rank_videos(_RAW, [make_video("v1"), make_video("v2"), make_video("v3")], service)

        assert [s.rank for s in run.scores] == [1, 2]
        assert {s.video_id for s in run.scores} == {"v1", "v2"}
        assert run.skipped_video_ids == ["v3"]
        assert run.rejected == [2]
        assert not run.validation.is_valid
        assert store.batches == [run.scores]


class TestAggregateReport:
    def test_daily_rollup(self) -> None:
        report = aggregate_report(_RAW, Granularity.DAY)
        v1 = next(a for a in report if a.video_id == "v1")
        assert v1.total_views == 1500
        assert v1.average_engagement_rate == pytest.approx((0.175 + 0.3) / 2)
        # the record with an unparseable timestamp cannot be bucketed
        assert {a.video_id for a in report} == {"v1", "v2"}


def test_drops_are_logged(caplog: pytest.LogCaptureFixture, default_factors: RankingFactors) -> None:
    service = RankingService(WeightedRankingAlgorithm(clock=lambda: NOW), InMemoryRankingStore(), default_factors)
    with caplog.at_level("INFO", logger="rankiro"):
        rank_videos(_RAW, [make_video("v1"), make_video("v3")], service)
    assert "Skipped 1 videos without metrics" in caplog.text
    assert "Skipping raw metrics #2" in caplog.text


def test_setup_logging_configures_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    setup_logging("DEBUG")
    [kwargs] = calls
    assert kwargs["level"] == "DEBUG"
    assert kwargs["format"] == "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
