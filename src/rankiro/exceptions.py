"""Exceptions raised by the ranking pipeline."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rankiro.models import RankingFactors


class RankiroError(Exception):
    """Base exception for rankiro errors."""


class FactorRejection(str, Enum):
    SUM_MISMATCH = "sum_mismatch"
    WEIGHT_OUT_OF_RANGE = "weight_out_of_range"


class InvalidRankingFactorsError(RankiroError, ValueError):
    """Raised when a factor update violates the sum or range rules."""

    def __init__(self, reason: FactorRejection, factors: RankingFactors, detail: str = "") -> None:
        self.reason = reason
        self.factors = factors
        message = {
            FactorRejection.SUM_MISMATCH: "Ranking factors must sum to 1.0",
            FactorRejection.WEIGHT_OUT_OF_RANGE: "All ranking factors must be between 0 and 1",
        }[reason]
        if detail:
            message += f": {detail}"
        super().__init__(message)


class FactorProfileError(RankiroError):
    """Raised when a factor profile file cannot be read or is malformed."""
