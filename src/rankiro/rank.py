"""Batch ranking: score videos, order them, assign ranks and persist."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

from rankiro import config
from rankiro.algorithm import RankingAlgorithm
from rankiro.exceptions import FactorRejection, InvalidRankingFactorsError
from rankiro.models import UNRANKED, RankingFactors, RankingScore, Video, VideoMetrics
from rankiro.store import RankingStore

logger = logging.getLogger(__name__)


def validate_ranking_factors(factors: RankingFactors) -> None:
    """Raise ``InvalidRankingFactorsError`` unless *factors* is acceptable.

    Weights must sum to 1.0 (within ``config.FACTOR_SUM_TOLERANCE``) and each
    must lie in [0, 1]. The sum is checked first.
    """
    total = factors.total_weight
    # Written as "not <=" so a NaN total is rejected too.
    if not abs(total - 1.0) <= config.FACTOR_SUM_TOLERANCE:
        raise InvalidRankingFactorsError(
            FactorRejection.SUM_MISMATCH, factors, detail=f"got {total:.4f}"
        )

    out_of_range = [name for name, weight in factors.weights().items() if not 0 <= weight <= 1]
    if out_of_range:
        raise InvalidRankingFactorsError(
            FactorRejection.WEIGHT_OUT_OF_RANGE, factors, detail=", ".join(out_of_range)
        )


def assign_ranks(scores: list[RankingScore]) -> list[RankingScore]:
    """Sort by score descending and number the result 1..N.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    ordered = sorted(scores, key=lambda s: s.score, reverse=True)
    return [score.model_copy(update={"rank": position}) for position, score in enumerate(ordered, start=1)]


class RankingService:
    """Scores videos with a pluggable algorithm and hands the results to a store."""

    def __init__(
        self,
        algorithm: RankingAlgorithm,
        repository: RankingStore,
        factors: RankingFactors | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._algorithm = algorithm
        self._repository = repository
        self._factors = factors
        self._max_workers = config.MAX_WORKERS if max_workers is None else max_workers
        if factors is not None:
            validate_ranking_factors(factors)

    @property
    def factors(self) -> RankingFactors | None:
        return self._factors

    # ── scoring ─────────────────────────────────────────────────────────

    def calculate_ranking_score(
        self, video: Video, metrics: VideoMetrics, factors: RankingFactors
    ) -> RankingScore:
        """Score a single video. The result is unranked."""
        score = self._algorithm.calculate_score(video, metrics, factors)
        boosted = self._algorithm.apply_trending_boost(score, video, metrics)
        return RankingScore(
            video_id=video.id,
            score=boosted,
            rank=UNRANKED,
            category=video.category,
            timestamp=datetime.now(UTC),
            factors=factors,
        )

    def calculate_batch_ranking_scores(
        self,
        videos: list[Video],
        metrics: list[VideoMetrics],
        factors: RankingFactors | None = None,
        skipped: list[str] | None = None,
    ) -> list[RankingScore]:
        """Score, rank and persist a batch of videos.

        Videos without a metrics entry are left out of the result. Their ids
        are appended to *skipped* when it is given. With several entries for
        the same video id the last one wins.
        """
        if factors is None:
            factors = self._factors
        if factors is None:
            raise ValueError("No ranking factors given and none configured on the service")

        metrics_map = {m.video_id: m for m in metrics}
        pairs: list[tuple[Video, VideoMetrics]] = []
        for video in videos:
            video_metrics = metrics_map.get(video.id)
            if video_metrics is None:
                logger.debug("No metrics for video %s; leaving it out", video.id)
                if skipped is not None:
                    skipped.append(video.id)
                continue
            pairs.append((video, video_metrics))

        scores = self._score_all(pairs, factors)
        ranked = assign_ranks(scores)

        logger.info(
            "Ranked %d of %d videos; top score=%.4f",
            len(ranked),
            len(videos),
            ranked[0].score if ranked else 0.0,
        )
        self._repository.save_ranking_scores(ranked)
        return ranked

    def update_ranking_factors(self, factors: RankingFactors) -> None:
        """Validate *factors* and make them the default for future batches.

        On rejection the current factors are left untouched.
        """
        validate_ranking_factors(factors)
        self._factors = factors
        logger.info("Ranking factors updated: %s", factors.weights())

    # ── queries ─────────────────────────────────────────────────────────

    def get_rankings(
        self, category: str, limit: int = config.DEFAULT_PAGE_SIZE, offset: int = 0
    ) -> list[RankingScore]:
        return self._repository.get_rankings_by_category(category, limit, offset)

    def get_video_ranking_history(
        self,
        video_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[RankingScore]:
        return self._repository.get_video_ranking_history(video_id, start_date, end_date)

    def get_top_ranked(self, limit: int = config.DEFAULT_TOP_LIMIT) -> list[RankingScore]:
        return self._repository.get_top_ranked_videos(limit)

    # ── private ─────────────────────────────────────────────────────────

    def _score_all(
        self, pairs: list[tuple[Video, VideoMetrics]], factors: RankingFactors
    ) -> list[RankingScore]:
        """Score every pair, returning results in input order."""
        if self._max_workers <= 1 or len(pairs) <= 1:
            return [self.calculate_ranking_score(video, m, factors) for video, m in pairs]

        workers = min(self._max_workers, len(pairs))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda pair: self.calculate_ranking_score(*pair, factors), pairs))
