"""
scoring/suspicion_detector.py - Review fraud heuristics

Advisory pass over a single review and the surrounding history. A review is
flagged when any rule matches:

  1. extreme_scores   all three sub-scores are 6, or all three are 1
  2. too_recent       younger than the recency window (60 minutes)
  3. duplicate_review reviewer holds more than one review for this mentor
  4. same_day_review  more than one of those reviews falls on the same
                      calendar day (UTC date, not a rolling 24h window)

The detector is read-only; rating, level and badges never consult it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Sequence
from uuid import UUID

import structlog

from mentor_reputation.models.enumerations import SuspicionReason
from mentor_reputation.models.review import Review
from mentor_reputation.scoring.parameters import DEFAULT_PARAMETERS, ScoringParameters, SCALE_MAX, SCALE_MIN

logger = structlog.get_logger(__name__)


@dataclass
class SuspicionContext:
    """History the rules look at besides the review itself."""
    reviews_by_reviewer: Sequence[Review] = field(default_factory=list)
    reviews_for_mentor: Sequence[Review] = field(default_factory=list)


@dataclass
class SuspicionResult:
    """Output of SuspicionDetector.evaluate()."""
    review_id: UUID
    is_suspicious: bool
    reasons: List[SuspicionReason]
    evaluated_at: datetime


class SuspicionDetector:
    """Flags likely fraudulent reviews for moderation."""

    def __init__(self, params: ScoringParameters = DEFAULT_PARAMETERS):
        self.params = params

    def evaluate(
        self,
        review: Review,
        context: SuspicionContext,
        now: datetime,
    ) -> SuspicionResult:
        reasons: List[SuspicionReason] = []

        if self._has_extreme_scores(review):
            reasons.append(SuspicionReason.EXTREME_SCORES)

        if self._is_too_recent(review, now):
            reasons.append(SuspicionReason.TOO_RECENT)

        same_pair = self._same_pair_reviews(review, context)
        if len(same_pair) > 1:
            reasons.append(SuspicionReason.DUPLICATE_REVIEW)

        review_day = review.created_at.date()
        if sum(1 for r in same_pair if r.created_at.date() == review_day) > 1:
            reasons.append(SuspicionReason.SAME_DAY_REVIEW)

        if reasons:
            logger.info(
                "review_flagged_suspicious",
                review_id=str(review.id),
                mentor_id=str(review.mentor_id),
                reviewer_id=str(review.reviewer_id),
                reasons=[r.value for r in reasons],
            )

        return SuspicionResult(
            review_id=review.id,
            is_suspicious=bool(reasons),
            reasons=reasons,
            evaluated_at=now,
        )

    def is_suspicious(self, review: Review, context: SuspicionContext, now: datetime) -> bool:
        return self.evaluate(review, context, now).is_suspicious

    def _has_extreme_scores(self, review: Review) -> bool:
        scores = {review.friendliness, review.knowledge, review.communication}
        return scores == {SCALE_MAX} or scores == {SCALE_MIN}

    def _is_too_recent(self, review: Review, now: datetime) -> bool:
        window = timedelta(minutes=self.params.suspicion_recency_minutes)
        return now - review.created_at < window

    def _same_pair_reviews(self, review: Review, context: SuspicionContext) -> List[Review]:
        """All known reviews by this reviewer for this mentor, the review itself included."""
        pair: Dict[UUID, Review] = {review.id: review}
        for other in list(context.reviews_by_reviewer) + list(context.reviews_for_mentor):
            if other.mentor_id == review.mentor_id and other.reviewer_id == review.reviewer_id:
                pair.setdefault(other.id, other)
        return list(pair.values())
