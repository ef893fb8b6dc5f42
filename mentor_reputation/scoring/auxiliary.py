"""
scoring/auxiliary.py - Auxiliary reputation signals

Four independent sub-signals, each normalised to [0, 1]:

    Engagement  = min(ln(1 + sessions) / ln(1 + 50), 1)
    Consistency = 1 − min(σ / 2, 1)        σ = population std-dev of review averages
    Activity    = mean(profile_complete, messages ≥ 1, sessions ≥ 1)
    Tenure      = max(min(months_since_created / 24, 1), 0.1)

CompositeScorer rescales them to the 1-6 scale before blending.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from mentor_reputation.models.mentor import MentorProfileSnapshot, SignalBundle
from mentor_reputation.models.review import Review
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters
from mentor_reputation.scoring.utils import months_between, population_std_dev

logger = logging.getLogger(__name__)


@dataclass
class AuxiliaryScores:
    """Output of AuxiliaryScoreCalculator.calculate(); all values in [0, 1]."""
    engagement: float
    consistency: float
    activity: float
    tenure: float


class AuxiliaryScoreCalculator:
    """Engagement, consistency, activity and tenure sub-signals."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def engagement(self, session_count: int) -> float:
        """Logarithmic diminishing returns, saturating at the reference session count."""
        if session_count <= 0:
            return 0.0
        reference = math.log1p(self.params.engagement_reference_sessions)
        return min(math.log1p(session_count) / reference, 1.0)

    def consistency(self, reviews: Sequence[Review]) -> float:
        """Uniform reviews score 1; dispersion drives the score toward 0."""
        sigma = population_std_dev([r.average_score for r in reviews])
        return 1.0 - min(sigma / self.params.consistency_sigma_divisor, 1.0)

    def activity(self, signals: SignalBundle) -> float:
        indicators = (
            signals.profile_complete,
            signals.message_count > 0,
            signals.session_count > 0,
        )
        return sum(1 for flag in indicators if flag) / len(indicators)

    def tenure(self, profile_created_at: datetime, now: datetime) -> float:
        """Linear in account age up to the saturation point, never below the floor."""
        months = months_between(profile_created_at, now)
        base = min(months / self.params.tenure_saturation_months, 1.0)
        return max(base, self.params.tenure_floor)

    def calculate(
        self,
        reviews: Sequence[Review],
        signals: SignalBundle,
        profile: MentorProfileSnapshot,
        now: datetime,
    ) -> AuxiliaryScores:
        scores = AuxiliaryScores(
            engagement=self.engagement(signals.session_count),
            consistency=self.consistency(reviews),
            activity=self.activity(signals),
            tenure=self.tenure(profile.created_at, now),
        )

        logger.debug(
            "auxiliary_scores_calculated",
            extra={
                "mentor_id": str(profile.mentor_id),
                "session_count": signals.session_count,
                "message_count": signals.message_count,
                "profile_complete": signals.profile_complete,
                "engagement": scores.engagement,
                "consistency": scores.consistency,
                "activity": scores.activity,
                "tenure": scores.tenure,
            },
        )
        return scores
