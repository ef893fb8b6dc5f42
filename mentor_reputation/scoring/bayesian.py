"""
scoring/bayesian.py - Bayesian shrinkage

Pulls the decay-weighted average toward a prior using virtual reviews.

Formula:
    bayesian = (m × C + weighted_avg × n) / (C + n)

Parameters:
    m = 5.5  (prior mean on the 1-6 scale)
    C = 3    (prior weight, "virtual reviews")

With few reviews the result sits near m; as n grows it tends to weighted_avg.
"""

import logging
from dataclasses import dataclass

from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters

logger = logging.getLogger(__name__)


@dataclass
class BayesianResult:
    """Output of BayesianSmoother.calculate()."""
    bayesian_score: float   # on the 1-6 scale
    prior_mean: float
    prior_weight: float
    review_count: int


class BayesianSmoother:
    """Shrink an empirical average toward the prior mean."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def calculate(self, weighted_average: float, review_count: int) -> BayesianResult:
        """
        Args:
            weighted_average: Decay-weighted mean on the 1-6 scale.
            review_count: Number of real reviews (n >= 0).

        Returns:
            BayesianResult with the smoothed score.

        Examples:
            >>> BayesianSmoother().calculate(6.0, 3).bayesian_score
            5.75
        """
        if review_count < 0:
            raise ValueError(f"review_count must be >= 0, got {review_count}")

        m = self.params.prior_mean
        c = self.params.prior_weight
        denominator = c + review_count
        if denominator == 0:
            # No prior weight and no reviews
            score = m
        else:
            score = (m * c + weighted_average * review_count) / denominator

        logger.debug(
            "bayesian_smoothed",
            extra={
                "weighted_average": weighted_average,
                "review_count": review_count,
                "prior_mean": m,
                "prior_weight": c,
                "bayesian_score": score,
            },
        )

        return BayesianResult(
            bayesian_score=score,
            prior_mean=m,
            prior_weight=c,
            review_count=review_count,
        )
