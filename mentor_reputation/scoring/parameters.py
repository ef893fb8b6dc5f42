"""
scoring/parameters.py - Reputation constant table

Every numeric constant of the reputation pipeline, in one frozen structure.
The defaults are the reference values; deployments tune them through
Settings (see config.py) via ScoringParameters.from_settings().

Reference composite weights:
    wilson       0.45
    bayesian     0.35
    engagement   0.10
    consistency  0.05
    activity     0.05
    tenure       0.01
"""

from dataclasses import dataclass, field

SCALE_MIN = 1
SCALE_MAX = 6


@dataclass(frozen=True)
class CompositeWeights:
    """Blend weights applied by CompositeScorer."""
    wilson: float = 0.45
    bayesian: float = 0.35
    engagement: float = 0.10
    consistency: float = 0.05
    activity: float = 0.05
    tenure: float = 0.01

    @property
    def total(self) -> float:
        return (
            self.wilson + self.bayesian + self.engagement
            + self.consistency + self.activity + self.tenure
        )


@dataclass(frozen=True)
class LevelThreshold:
    """Minimum review count and rating for one level."""
    level: int
    min_reviews: int
    min_rating: float


@dataclass(frozen=True)
class ScoringParameters:
    """Named constants of the reputation pipeline."""

    # Exponential decay (months are 30 days)
    decay_half_life_months: float = 6.0

    # Bayesian shrinkage toward the prior
    prior_mean: float = 5.5
    prior_weight: float = 3.0

    # Wilson lower bound, ~95% confidence
    wilson_z: float = 1.96

    # Auxiliary signals
    engagement_reference_sessions: int = 50
    consistency_sigma_divisor: float = 2.0
    tenure_saturation_months: float = 24.0
    tenure_floor: float = 0.1

    weights: CompositeWeights = field(default_factory=CompositeWeights)

    # Highest first; the first tier that matches wins
    level_thresholds: tuple = (
        LevelThreshold(level=4, min_reviews=25, min_rating=4.5),
        LevelThreshold(level=3, min_reviews=10, min_rating=4.0),
        LevelThreshold(level=2, min_reviews=3, min_rating=3.5),
    )

    # Badges
    star_mentor_min_rating: float = 4.8
    star_mentor_min_reviews: int = 30
    experienced_mentor_min_reviews: int = 50
    trusted_mentor_min_reviews: int = 5
    trusted_mentor_recent_window: int = 3
    trusted_mentor_min_recent_average: float = 4.5
    complete_profile_min_bio_length: int = 150

    # Suspicion heuristics
    suspicion_recency_minutes: int = 60

    @classmethod
    def from_settings(cls, settings) -> "ScoringParameters":
        """Build the table from application Settings."""
        return cls(
            decay_half_life_months=settings.DECAY_HALF_LIFE_MONTHS,
            prior_mean=settings.PRIOR_MEAN,
            prior_weight=settings.PRIOR_WEIGHT,
            wilson_z=settings.WILSON_Z,
            engagement_reference_sessions=settings.ENGAGEMENT_REFERENCE_SESSIONS,
            tenure_saturation_months=settings.TENURE_SATURATION_MONTHS,
            consistency_sigma_divisor=settings.CONSISTENCY_SIGMA_DIVISOR,
            tenure_floor=settings.TENURE_FLOOR,
            suspicion_recency_minutes=settings.SUSPICION_RECENCY_MINUTES,
            level_thresholds=(
                LevelThreshold(4, settings.LEVEL_4_MIN_REVIEWS, settings.LEVEL_4_MIN_RATING),
                LevelThreshold(3, settings.LEVEL_3_MIN_REVIEWS, settings.LEVEL_3_MIN_RATING),
                LevelThreshold(2, settings.LEVEL_2_MIN_REVIEWS, settings.LEVEL_2_MIN_RATING),
            ),
            star_mentor_min_rating=settings.STAR_MENTOR_MIN_RATING,
            star_mentor_min_reviews=settings.STAR_MENTOR_MIN_REVIEWS,
            experienced_mentor_min_reviews=settings.EXPERIENCED_MENTOR_MIN_REVIEWS,
            trusted_mentor_min_reviews=settings.TRUSTED_MENTOR_MIN_REVIEWS,
            trusted_mentor_recent_window=settings.TRUSTED_MENTOR_RECENT_WINDOW,
            trusted_mentor_min_recent_average=settings.TRUSTED_MENTOR_MIN_RECENT_AVERAGE,
            complete_profile_min_bio_length=settings.COMPLETE_PROFILE_MIN_BIO_LENGTH,
            weights=CompositeWeights(
                wilson=settings.W_WILSON,
                bayesian=settings.W_BAYESIAN,
                engagement=settings.W_ENGAGEMENT,
                consistency=settings.W_CONSISTENCY,
                activity=settings.W_ACTIVITY,
                tenure=settings.W_TENURE,
            ),
        )


DEFAULT_PARAMETERS = ScoringParameters()
