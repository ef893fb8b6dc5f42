"""
scoring/badge_assigner.py - Achievement badges

Badges are evaluated independently and attached together:

    StarMentor         rating ≥ 4.8 and reviews ≥ 30
    ExperiencedMentor  reviews ≥ 50
    CommunityLeader    level == 4
    TrustedMentor      ≥ 5 reviews and mean of the 3 most recent review averages ≥ 4.5
    CompleteProfile    bio longer than 150 characters
    WithPhoto          avatar present

The result is a frozenset, so the outcome does not depend on input order.
"""

import logging
from decimal import Decimal
from typing import FrozenSet, Sequence, Union

from mentor_reputation.models.enumerations import Badge, MentorLevel
from mentor_reputation.models.mentor import MentorProfileSnapshot
from mentor_reputation.models.review import Review
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters

logger = logging.getLogger(__name__)


class BadgeAssigner:
    """Derive the badge set from rating, level, review trend and profile."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def recent_average(self, reviews: Sequence[Review]) -> float:
        """Mean of the per-review averages of the chronologically last reviews.

        Ties on created_at are broken by id, matching the repository ordering.
        """
        window = self.params.trusted_mentor_recent_window
        ordered = sorted(reviews, key=lambda r: (r.created_at, str(r.id)))
        recent = ordered[-window:]
        if not recent:
            return 0.0
        return sum(r.average_score for r in recent) / len(recent)

    def assign(
        self,
        rating: Union[Decimal, float],
        level: MentorLevel,
        reviews: Sequence[Review],
        profile: MentorProfileSnapshot,
    ) -> FrozenSet[Badge]:
        p = self.params
        rating_d = Decimal(str(rating))
        total = len(reviews)
        badges = set()

        if rating_d >= Decimal(str(p.star_mentor_min_rating)) and total >= p.star_mentor_min_reviews:
            badges.add(Badge.STAR_MENTOR)

        if total >= p.experienced_mentor_min_reviews:
            badges.add(Badge.EXPERIENCED_MENTOR)

        if level == MentorLevel.TOP:
            badges.add(Badge.COMMUNITY_LEADER)

        if (
            total >= p.trusted_mentor_min_reviews
            and self.recent_average(reviews) >= p.trusted_mentor_min_recent_average
        ):
            badges.add(Badge.TRUSTED_MENTOR)

        if profile.bio and len(profile.bio) > p.complete_profile_min_bio_length:
            badges.add(Badge.COMPLETE_PROFILE)

        if profile.avatar:
            badges.add(Badge.WITH_PHOTO)

        logger.debug(
            "badges_assigned",
            extra={
                "mentor_id": str(profile.mentor_id),
                "rating": float(rating_d),
                "level": int(level),
                "total_reviews": total,
                "badges": sorted(b.value for b in badges),
            },
        )
        return frozenset(badges)
