"""
scoring/wilson.py - Wilson score lower bound

Treats the normalised decayed average p̂ = weighted_avg / 6 as a success
rate over n trials and takes the lower end of its Wilson score interval.
Small samples are pulled down; the bound approaches p̂ as n grows.

Formula:
    denom  = 1 + z²/n
    center = p̂ + z²/(2n)
    margin = z × √((p̂(1 − p̂) + z²/(4n)) / n)
    lower  = (center − margin) / denom          (0 when n = 0)
    wilson_adjusted = lower × 6

Fixed parameters:
    z = 1.96  (≈95% confidence)
"""

import logging
import math
from dataclasses import dataclass

from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters, SCALE_MAX

logger = logging.getLogger(__name__)


@dataclass
class WilsonResult:
    """Output of WilsonBoundCalculator.calculate()."""
    lower_bound: float        # in [0, p̂]
    p_hat: float              # weighted_avg / 6
    wilson_adjusted: float    # lower_bound × 6
    review_count: int
    z: float


class WilsonBoundCalculator:
    """Conservative lower estimate of the normalised decayed average."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def lower_bound(self, p_hat: float, n: int) -> float:
        """Wilson interval lower bound for proportion p_hat over n trials."""
        if n <= 0:
            return 0.0
        if not 0.0 <= p_hat <= 1.0:
            raise ValueError(f"p_hat must be in [0, 1], got {p_hat}")

        z = self.params.wilson_z
        z2 = z * z
        denom = 1 + z2 / n
        center = p_hat + z2 / (2 * n)
        margin = z * math.sqrt((p_hat * (1 - p_hat) + z2 / (4 * n)) / n)
        lower = (center - margin) / denom
        return min(p_hat, max(0.0, lower))

    def calculate(self, weighted_average: float, review_count: int) -> WilsonResult:
        """
        Args:
            weighted_average: Decay-weighted mean on the 1-6 scale.
            review_count: Number of reviews n.

        Returns:
            WilsonResult with the bound rescaled to the 1-6 scale.
        """
        # Float summation can land a hair outside [0, 1]
        p_hat = min(1.0, max(0.0, weighted_average / SCALE_MAX))
        lower = self.lower_bound(p_hat, review_count)
        adjusted = lower * SCALE_MAX

        logger.debug(
            "wilson_bound_calculated",
            extra={
                "p_hat": p_hat,
                "review_count": review_count,
                "lower_bound": lower,
                "wilson_adjusted": adjusted,
            },
        )

        return WilsonResult(
            lower_bound=lower,
            p_hat=p_hat,
            wilson_adjusted=adjusted,
            review_count=review_count,
            z=self.params.wilson_z,
        )
