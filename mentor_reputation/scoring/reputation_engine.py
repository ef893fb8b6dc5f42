"""
scoring/reputation_engine.py - Full reputation pipeline

Pure pipeline: (profile snapshot, reviews, signals, now) → ReputationResult.
No I/O and no state between calls; identical inputs give identical output.

Pipeline steps:
  0.  Empty review set → zero state (rating 0, level 1, no badges)
  1.  DecayWeightedAverageCalculator → weighted_avg
  2.  BayesianSmoother → bayesian
  3.  WilsonBoundCalculator → wilson_adjusted
  4.  AuxiliaryScoreCalculator → engagement, consistency, activity, tenure
  5.  CompositeScorer → rating
  6.  LevelClassifier → level, level_title
  7.  BadgeAssigner → badges
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import FrozenSet, Optional, Sequence
from uuid import UUID

from mentor_reputation.models.enumerations import Badge, MentorLevel
from mentor_reputation.models.mentor import MentorProfileSnapshot, SignalBundle
from mentor_reputation.models.review import Review
from mentor_reputation.scoring.auxiliary import AuxiliaryScoreCalculator
from mentor_reputation.scoring.badge_assigner import BadgeAssigner
from mentor_reputation.scoring.bayesian import BayesianSmoother
from mentor_reputation.scoring.composite import CompositeScorer
from mentor_reputation.scoring.decay import DecayWeightedAverageCalculator, validate_review_scores
from mentor_reputation.scoring.level_classifier import LevelClassifier
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters
from mentor_reputation.scoring.wilson import WilsonBoundCalculator

logger = logging.getLogger(__name__)


@dataclass
class ReputationBreakdown:
    """Every intermediate score behind a rating."""
    weighted_average: float
    bayesian: float
    wilson_adjusted: float
    engagement: float
    consistency: float
    activity: float
    tenure: float


@dataclass
class ReputationResult:
    """Derived mentor state; replaces the previous one wholesale."""
    mentor_id: UUID
    rating: Decimal
    total_reviews: int
    level: MentorLevel
    level_title: str
    badges: FrozenSet[Badge]
    computed_at: datetime
    avg_friendliness: float = 0.0
    avg_knowledge: float = 0.0
    avg_communication: float = 0.0
    breakdown: Optional[ReputationBreakdown] = field(default=None)


class ReputationEngine:
    """Stateless composition of the reputation calculators."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params
        self.decay_calculator = DecayWeightedAverageCalculator(params)
        self.bayesian_smoother = BayesianSmoother(params)
        self.wilson_calculator = WilsonBoundCalculator(params)
        self.auxiliary_calculator = AuxiliaryScoreCalculator(params)
        self.composite_scorer = CompositeScorer(params)
        self.level_classifier = LevelClassifier(params)
        self.badge_assigner = BadgeAssigner(params)

    def compute(
        self,
        profile: MentorProfileSnapshot,
        reviews: Sequence[Review],
        signals: SignalBundle,
        now: datetime,
    ) -> ReputationResult:
        """
        Recompute the derived reputation from scratch.

        Args:
            profile: Snapshot of the mentor profile (tenure anchor, bio, avatar).
            reviews: Every review for the mentor, any order.
            signals: Session/message counts and profile completeness.
            now: Evaluation instant (tz-aware); drives decay and tenure.

        Returns:
            ReputationResult with rating, total_reviews, level, level_title, badges.

        Raises:
            InvalidScoreRangeException: a sub-score lies outside [1, 6].
        """
        if not reviews:
            logger.info(
                "reputation_zero_state",
                extra={"mentor_id": str(profile.mentor_id)},
            )
            return self.zero_state(profile.mentor_id, now)

        for review in reviews:
            validate_review_scores(review)

        n = len(reviews)

        # 1-3. Review-derived scores
        decay = self.decay_calculator.calculate(reviews, now)
        bayesian = self.bayesian_smoother.calculate(decay.weighted_average, n)
        wilson = self.wilson_calculator.calculate(decay.weighted_average, n)

        # 4. Behavioural signals
        auxiliary = self.auxiliary_calculator.calculate(reviews, signals, profile, now)

        # 5. Blend
        composite = self.composite_scorer.calculate(
            wilson.wilson_adjusted, bayesian.bayesian_score, auxiliary
        )

        # 6-7. Level and badges
        level = self.level_classifier.classify(composite.rating, n)
        badges = self.badge_assigner.assign(composite.rating, level, reviews, profile)

        result = ReputationResult(
            mentor_id=profile.mentor_id,
            rating=composite.rating,
            total_reviews=n,
            level=level,
            level_title=self.level_classifier.title(level),
            badges=badges,
            computed_at=now,
            avg_friendliness=sum(r.friendliness for r in reviews) / n,
            avg_knowledge=sum(r.knowledge for r in reviews) / n,
            avg_communication=sum(r.communication for r in reviews) / n,
            breakdown=ReputationBreakdown(
                weighted_average=decay.weighted_average,
                bayesian=bayesian.bayesian_score,
                wilson_adjusted=wilson.wilson_adjusted,
                engagement=auxiliary.engagement,
                consistency=auxiliary.consistency,
                activity=auxiliary.activity,
                tenure=auxiliary.tenure,
            ),
        )

        logger.info(
            "reputation_computed",
            extra={
                "mentor_id": str(profile.mentor_id),
                "rating": float(result.rating),
                "total_reviews": n,
                "level": int(level),
                "badges": sorted(b.value for b in badges),
            },
        )
        return result

    def zero_state(self, mentor_id: UUID, now: datetime) -> ReputationResult:
        """Defined state of a mentor with no reviews."""
        return ReputationResult(
            mentor_id=mentor_id,
            rating=Decimal("0.00"),
            total_reviews=0,
            level=MentorLevel.NEW,
            level_title=self.level_classifier.title(MentorLevel.NEW),
            badges=frozenset(),
            computed_at=now,
        )


def compute_reputation(
    profile: MentorProfileSnapshot,
    reviews: Sequence[Review],
    signals: SignalBundle,
    now: datetime,
    params: ScoringParameters = DEFAULT_PARAMETERS,
) -> ReputationResult:
    """Functional entry point for ReputationEngine.compute()."""
    return ReputationEngine(params).compute(profile, reviews, signals, now)
