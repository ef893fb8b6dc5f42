"""
scoring/level_classifier.py - Mentor level

Maps (rating, total_reviews) to one of four ordered levels. Tiers are
checked from highest to lowest; the first match wins.

    Level 4  Top Mentor           reviews ≥ 25 and rating ≥ 4.5
    Level 3  Experienced Mentor   reviews ≥ 10 and rating ≥ 4.0
    Level 2  Trusted Mentor       reviews ≥ 3  and rating ≥ 3.5
    Level 1  New Mentor           otherwise
"""

from decimal import Decimal
from typing import Union

from mentor_reputation.models.enumerations import LEVEL_TITLES, MentorLevel
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters


class LevelClassifier:
    """Pure function of (rating, total_reviews)."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def classify(self, rating: Union[Decimal, float], total_reviews: int) -> MentorLevel:
        """
        Examples:
            >>> LevelClassifier().classify(Decimal("5.60"), 3)
            <MentorLevel.TRUSTED: 2>
            >>> LevelClassifier().classify(Decimal("4.90"), 30)
            <MentorLevel.TOP: 4>
        """
        rating_d = Decimal(str(rating))
        for tier in self.params.level_thresholds:
            if total_reviews >= tier.min_reviews and rating_d >= Decimal(str(tier.min_rating)):
                return MentorLevel(tier.level)
        return MentorLevel.NEW

    def title(self, level: MentorLevel) -> str:
        """Human-readable title; presentational only."""
        return LEVEL_TITLES[MentorLevel(level)]
