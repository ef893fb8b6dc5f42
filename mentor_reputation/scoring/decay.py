# mentor_reputation/scoring/decay.py
"""
Decay-Weighted Average
----------------------
Collapses a mentor's reviews into one score where recent reviews count more.

Formula:
    age_months = (now − created_at) / 30 days
    w          = exp(−age_months / 6)
    avg_score  = (friendliness + knowledge + communication) / 3
    weighted   = Σ(avg_score × w) / Σ w

Reviews dated after `now` are treated as age 0, so w never exceeds 1.
The empty review set is the pipeline's zero-state and never reaches this
calculator; calling it with no reviews raises EmptyReviewSetException.
"""
import math
import structlog
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from mentor_reputation.core.exceptions import EmptyReviewSetException, InvalidScoreRangeException
from mentor_reputation.models.review import Review
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters, SCALE_MAX, SCALE_MIN
from mentor_reputation.scoring.utils import months_between, weighted_mean

logger = structlog.get_logger(__name__)

_SUB_SCORES = ("friendliness", "knowledge", "communication")


def validate_review_scores(review: Review) -> None:
    """Fail fast on sub-scores outside [1, 6]; the aggregate is never clamped."""
    for name in _SUB_SCORES:
        value = getattr(review, name)
        if not SCALE_MIN <= value <= SCALE_MAX:
            raise InvalidScoreRangeException(name, value, SCALE_MIN, SCALE_MAX)


@dataclass
class DecayResult:
    """Output of DecayWeightedAverageCalculator.calculate()."""
    weighted_average: float   # on the 1-6 scale
    total_weight: float       # Σ w, in (0, n]
    weights: List[float]      # per-review decay weight, input order
    review_count: int


class DecayWeightedAverageCalculator:
    """Exponentially time-decayed mean of per-review averages."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def decay_weight(self, created_at: datetime, now: datetime) -> float:
        """exp(−age_months / half_life); 1.0 for reviews not older than now."""
        age_months = max(0.0, months_between(created_at, now))
        return math.exp(-age_months / self.params.decay_half_life_months)

    def calculate(self, reviews: Sequence[Review], now: datetime) -> DecayResult:
        """
        Args:
            reviews: All reviews for one mentor (must be non-empty).
            now: Evaluation instant (tz-aware).

        Returns:
            DecayResult with the weighted average and the per-review weights.
        """
        if not reviews:
            raise EmptyReviewSetException()

        for review in reviews:
            validate_review_scores(review)

        weights = [self.decay_weight(r.created_at, now) for r in reviews]
        averages = [r.average_score for r in reviews]
        weighted = weighted_mean(averages, weights)
        total_weight = math.fsum(weights)

        logger.debug(
            "decay_weighted_average_calculated",
            review_count=len(reviews),
            total_weight=total_weight,
            weighted_average=weighted,
        )

        return DecayResult(
            weighted_average=weighted,
            total_weight=total_weight,
            weights=weights,
            review_count=len(reviews),
        )
