"""
Reputation Service - Mentor Reputation Service
mentor_reputation/services/reputation_service.py

Runs the I/O around the pure reputation pipeline.

recompute_mentor_profile(mentor_id):
  1.  Take the per-mentor lock (submit_review holds it across the upsert too)
  2.  Read profile snapshot (with VERSION) and every review
  3.  SignalGatherer → SignalBundle (failures abort the run)
  4.  ReputationEngine.compute() with a single `now`
  5.  MentorRepository.save_reputation() guarded by VERSION;
      on conflict go back to step 2, up to REPUTATION_MAX_RETRIES
  6.  Refresh the Redis reputation entry

submit_review(mentor_id, reviewer_id, request):
  Upsert: an existing review by the same reviewer is updated in place
  (CREATED_AT kept), otherwise a new one is inserted; then recompute.
  Lookup, write and recompute all run under one hold of the mentor lock.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple
from uuid import UUID

import redis

from mentor_reputation.config import settings
from mentor_reputation.core.exceptions import EntityNotFoundException, ProfileVersionConflictException
from mentor_reputation.models.mentor import MentorReputationResponse, ScoreBreakdown
from mentor_reputation.models.review import Review, ReviewCreate
from mentor_reputation.repositories.mentor_repository import MentorRepository
from mentor_reputation.repositories.review_repository import ReviewRepository
from mentor_reputation.scoring.parameters import ScoringParameters
from mentor_reputation.scoring.reputation_engine import ReputationEngine, ReputationResult
from mentor_reputation.scoring.suspicion_detector import SuspicionContext, SuspicionDetector, SuspicionResult
from mentor_reputation.services.cache import TTL_REPUTATION, get_cache, reputation_cache_key
from mentor_reputation.services.mentor_lock import MentorLockManager
from mentor_reputation.services.redis_cache import RedisCache
from mentor_reputation.services.signal_gatherer import SignalGatherer

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_response(result: ReputationResult) -> MentorReputationResponse:
    """Convert the engine result into the API model."""
    breakdown = None
    if result.breakdown is not None:
        b = result.breakdown
        breakdown = ScoreBreakdown(
            weighted_average=round(b.weighted_average, 4),
            bayesian=round(b.bayesian, 4),
            wilson_adjusted=round(b.wilson_adjusted, 4),
            engagement=round(b.engagement, 4),
            consistency=round(b.consistency, 4),
            activity=round(b.activity, 4),
            tenure=round(b.tenure, 4),
        )

    return MentorReputationResponse(
        mentor_id=result.mentor_id,
        rating=float(result.rating),
        total_reviews=result.total_reviews,
        level=result.level,
        level_title=result.level_title,
        badges=sorted(result.badges, key=lambda badge: badge.value),
        avg_friendliness=round(result.avg_friendliness, 2),
        avg_knowledge=round(result.avg_knowledge, 2),
        avg_communication=round(result.avg_communication, 2),
        breakdown=breakdown,
        computed_at=result.computed_at,
    )


class ReputationService:
    """Recompute, cache and moderate mentor reputation."""

    def __init__(
        self,
        review_repository: ReviewRepository,
        mentor_repository: MentorRepository,
        lock_manager: Optional[MentorLockManager] = None,
        params: Optional[ScoringParameters] = None,
        cache_provider: Callable[[], Optional[RedisCache]] = get_cache,
        clock: Callable[[], datetime] = utc_now,
        max_retries: int = settings.REPUTATION_MAX_RETRIES,
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")

        self.review_repository = review_repository
        self.mentor_repository = mentor_repository
        self.lock_manager = lock_manager or MentorLockManager(cache_provider=cache_provider)
        self.params = params or ScoringParameters.from_settings(settings)
        self.engine = ReputationEngine(self.params)
        self.suspicion_detector = SuspicionDetector(self.params)
        self.signal_gatherer = SignalGatherer(mentor_repository)
        self._cache_provider = cache_provider
        self._clock = clock
        self.max_retries = max_retries

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def recompute_mentor_profile(self, mentor_id: UUID) -> ReputationResult:
        """
        Recompute and persist rating, total_reviews, level and badges.

        Raises:
            EntityNotFoundException: unknown mentor.
            SignalFetchException: auxiliary signals could not be loaded.
            InvalidScoreRangeException: a stored review is out of range.
            ProfileVersionConflictException: retries exhausted.
            MentorLockTimeoutException: the mentor lock was not obtained.
        """
        with self.lock_manager.hold(mentor_id):
            return self._recompute_locked(mentor_id)

    def _recompute_locked(self, mentor_id: UUID) -> ReputationResult:
        """Recompute loop; the caller holds the mentor lock."""
        for attempt in range(1, self.max_retries + 1):
            profile = self.mentor_repository.get_profile_snapshot(mentor_id)
            reviews = self.review_repository.get_reviews(mentor_id)
            signals = self.signal_gatherer.gather(mentor_id, profile)

            result = self.engine.compute(profile, reviews, signals, self._clock())

            try:
                self.mentor_repository.save_reputation(mentor_id, result, profile.version)
            except ProfileVersionConflictException:
                if attempt == self.max_retries:
                    logger.error(
                        "Reputation write lost after retries",
                        extra={"mentor_id": str(mentor_id), "attempts": attempt},
                    )
                    raise
                logger.warning(
                    "Profile version conflict, recomputing",
                    extra={"mentor_id": str(mentor_id), "attempt": attempt},
                )
                continue

            self._store_in_cache(result)
            logger.info(
                f"[{mentor_id}] reputation recomputed: rating={result.rating} "
                f"reviews={result.total_reviews} level={int(result.level)}"
            )
            return result

    def get_reputation(self, mentor_id: UUID) -> MentorReputationResponse:
        """Cached reputation, recomputed on a miss."""
        cache = self._cache_provider()
        if cache is not None:
            try:
                cached = cache.get(reputation_cache_key(mentor_id), MentorReputationResponse)
            except redis.RedisError as e:
                logger.warning(f"[{mentor_id}] reputation cache read failed: {e}")
                cached = None
            if cached is not None:
                return cached
        return to_response(self.recompute_mentor_profile(mentor_id))

    # ------------------------------------------------------------------
    # Review submission
    # ------------------------------------------------------------------

    def submit_review(
        self,
        mentor_id: UUID,
        reviewer_id: UUID,
        request: ReviewCreate,
    ) -> Tuple[Review, ReputationResult]:
        """Create or update the reviewer's review, then recompute the mentor."""
        # Raises EntityNotFoundException for unknown mentors
        self.mentor_repository.get_profile_snapshot(mentor_id)

        with self.lock_manager.hold(mentor_id):
            existing = self.review_repository.find_by_mentor_and_reviewer(mentor_id, reviewer_id)
            if existing is not None:
                review = self.review_repository.update(
                    existing.model_copy(update={
                        "friendliness": request.friendliness,
                        "knowledge": request.knowledge,
                        "communication": request.communication,
                        "comment": request.comment or "",
                    })
                )
                logger.info(f"[{mentor_id}] review {review.id} updated by {reviewer_id}")
            else:
                review = self.review_repository.insert(
                    Review(
                        mentor_id=mentor_id,
                        reviewer_id=reviewer_id,
                        friendliness=request.friendliness,
                        knowledge=request.knowledge,
                        communication=request.communication,
                        comment=request.comment or "",
                        created_at=self._clock(),
                    )
                )
                logger.info(f"[{mentor_id}] review {review.id} created by {reviewer_id}")

            return review, self._recompute_locked(mentor_id)

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    def evaluate_suspicion(self, review_id: UUID) -> Tuple[Review, SuspicionResult]:
        """Run the fraud heuristics for one stored review."""
        review = self.review_repository.get_by_id(review_id)
        if review is None:
            raise EntityNotFoundException("Review", str(review_id))

        context = SuspicionContext(
            reviews_by_reviewer=self.review_repository.get_reviews_by_reviewer(review.reviewer_id),
            reviews_for_mentor=self.review_repository.get_reviews(review.mentor_id),
        )
        return review, self.suspicion_detector.evaluate(review, context, self._clock())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _store_in_cache(self, result: ReputationResult) -> None:
        cache = self._cache_provider()
        if cache is None:
            return
        key = reputation_cache_key(result.mentor_id)
        try:
            cache.delete(key)
            cache.set(key, to_response(result), TTL_REPUTATION)
        except redis.RedisError as e:
            logger.warning(f"[{result.mentor_id}] reputation cache refresh failed: {e}")
