# mentor_reputation/scoring/composite.py
"""
Composite Scorer
----------------
Blends the confidence-adjusted, smoothed and auxiliary scores into the final
mentor rating.

Formula:
    rating = 0.45 × wilson_adjusted + 0.35 × bayesian
           + 0.10 × (engagement × 6) + 0.05 × (consistency × 6)
           + 0.05 × (activity × 6)   + 0.01 × (tenure × 6)

    rounded half-up to 0.01, clamped to [0, 6]

The four auxiliary scores live on [0, 1] and are rescaled to the 1-6 scale
so every term shares units. Weights come from ScoringParameters.weights.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from mentor_reputation.scoring.auxiliary import AuxiliaryScores
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters, SCALE_MAX
from mentor_reputation.scoring.utils import clamp

logger = structlog.get_logger(__name__)


@dataclass
class CompositeResult:
    """Output of CompositeScorer.calculate()."""
    rating: Decimal                 # [0, 6] quantized to 0.01
    raw_rating: float               # unrounded, unclamped blend
    wilson_contribution: float
    bayesian_contribution: float
    engagement_contribution: float
    consistency_contribution: float
    activity_contribution: float
    tenure_contribution: float


class CompositeScorer:
    """Linear blend of all reputation sub-scores."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def calculate(
        self,
        wilson_adjusted: float,
        bayesian: float,
        auxiliary: AuxiliaryScores,
    ) -> CompositeResult:
        """
        Args:
            wilson_adjusted: Wilson lower bound rescaled to the 1-6 scale.
            bayesian: Bayesian-smoothed average on the 1-6 scale.
            auxiliary: Engagement/consistency/activity/tenure in [0, 1].

        Returns:
            CompositeResult with the rounded rating and each weighted term.
        """
        w = self.params.weights

        contributions = {
            "wilson": w.wilson * wilson_adjusted,
            "bayesian": w.bayesian * bayesian,
            "engagement": w.engagement * auxiliary.engagement * SCALE_MAX,
            "consistency": w.consistency * auxiliary.consistency * SCALE_MAX,
            "activity": w.activity * auxiliary.activity * SCALE_MAX,
            "tenure": w.tenure * auxiliary.tenure * SCALE_MAX,
        }
        raw = sum(contributions.values())

        rating = clamp(
            Decimal(str(raw)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            Decimal("0"),
            Decimal(SCALE_MAX),
        )

        logger.info(
            "composite_rating_calculated",
            raw_rating=raw,
            rating=float(rating),
            **{f"{k}_contribution": v for k, v in contributions.items()},
        )

        return CompositeResult(
            rating=rating,
            raw_rating=raw,
            wilson_contribution=contributions["wilson"],
            bayesian_contribution=contributions["bayesian"],
            engagement_contribution=contributions["engagement"],
            consistency_contribution=contributions["consistency"],
            activity_contribution=contributions["activity"],
            tenure_contribution=contributions["tenure"],
        )
