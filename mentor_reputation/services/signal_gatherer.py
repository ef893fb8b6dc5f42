"""
Signal Gatherer - Mentor Reputation Service
mentor_reputation/services/signal_gatherer.py

Collects the auxiliary behavioural signals for one scoring run. Any fetch
failure aborts the run with SignalFetchException; signals are never
defaulted to zero behind the caller's back.
"""

import logging
from typing import Callable, Optional, TypeVar
from uuid import UUID

from mentor_reputation.core.exceptions import EntityNotFoundException, SignalFetchException
from mentor_reputation.models.mentor import MentorProfileSnapshot, SignalBundle
from mentor_reputation.repositories.mentor_repository import MentorRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SignalGatherer:
    """Fetch session count, message count and profile completeness."""

    def __init__(self, mentor_repository: MentorRepository):
        self.mentor_repository = mentor_repository

    def gather(
        self,
        mentor_id: UUID,
        profile: Optional[MentorProfileSnapshot] = None,
    ) -> SignalBundle:
        """
        Args:
            mentor_id: Mentor whose signals are fetched.
            profile: Snapshot already loaded by the caller; when given,
                     completeness is read from it instead of re-queried.

        Raises:
            SignalFetchException: any of the three signals failed to load.
        """
        session_count = self._fetch(
            "session_count", mentor_id,
            lambda: self.mentor_repository.get_session_count(mentor_id),
        )
        message_count = self._fetch(
            "message_count", mentor_id,
            lambda: self.mentor_repository.get_message_count(mentor_id),
        )
        if profile is not None:
            profile_complete = profile.is_complete
        else:
            profile_complete = self._fetch(
                "profile_complete", mentor_id,
                lambda: self.mentor_repository.is_profile_complete(mentor_id),
            )

        bundle = SignalBundle(
            session_count=session_count,
            message_count=message_count,
            profile_complete=profile_complete,
        )
        logger.debug(
            "signals_gathered",
            extra={"mentor_id": str(mentor_id), **bundle.model_dump()},
        )
        return bundle

    def _fetch(self, signal_name: str, mentor_id: UUID, fetch: Callable[[], T]) -> T:
        try:
            return fetch()
        except EntityNotFoundException:
            raise
        except Exception as e:
            logger.error(
                f"Signal fetch failed: {signal_name}",
                extra={"mentor_id": str(mentor_id), "signal": signal_name, "error": str(e)},
                exc_info=True,
            )
            raise SignalFetchException(signal_name, str(mentor_id), e) from e
