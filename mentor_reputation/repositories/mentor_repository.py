"""
Mentor Repository - Mentor Reputation Service
mentor_reputation/repositories/mentor_repository.py

Snowflake access for MENTOR_PROFILES and the auxiliary signal tables
(MENTOR_SESSIONS, CHAT_MESSAGES). Derived reputation fields are written back
under an optimistic VERSION check.
"""

import json
from datetime import datetime, timezone
from typing import Any, List
from uuid import UUID

from mentor_reputation.core.exceptions import EntityNotFoundException, ProfileVersionConflictException
from mentor_reputation.models.mentor import MentorProfileSnapshot
from mentor_reputation.repositories.base import BaseRepository
from mentor_reputation.scoring.reputation_engine import ReputationResult


class MentorRepository(BaseRepository):
    """Repository for mentor profiles and their behavioural signals."""

    def get_profile_snapshot(self, mentor_id: UUID) -> MentorProfileSnapshot:
        sql = """
        SELECT
            p.ID,
            p.CREATED_AT,
            p.IS_HIGHLIGHTED,
            p.VERSION,
            u.AVATAR,
            u.BIO,
            u.INTERESTS,
            u.DEPARTMENT
        FROM MENTOR_PROFILES p
        JOIN USERS u ON u.ID = p.USER_ID
        WHERE p.ID = %s
        """
        row = self.execute_query(sql, (str(mentor_id),), fetch_one=True)
        if not row:
            raise EntityNotFoundException("MentorProfile", str(mentor_id))

        data = self.row_to_dict(row)
        return MentorProfileSnapshot(
            mentor_id=self.str_to_uuid(data["id"]),
            created_at=self.normalize_timestamp(data["created_at"]),
            is_highlighted=bool(data.get("is_highlighted")),
            version=int(data.get("version") or 0),
            avatar=data.get("avatar"),
            bio=data.get("bio"),
            interests=self._parse_interests(data.get("interests")),
            department=data.get("department"),
        )

    def get_session_count(self, mentor_id: UUID) -> int:
        sql = "SELECT COUNT(*) AS CNT FROM MENTOR_SESSIONS WHERE MENTOR_ID = %s"
        return self.fetch_count(sql, (str(mentor_id),))

    def get_message_count(self, mentor_id: UUID) -> int:
        """Messages sent by the mentor's user account."""
        sql = """
        SELECT COUNT(*) AS CNT
        FROM CHAT_MESSAGES m
        JOIN MENTOR_PROFILES p ON p.USER_ID = m.SENDER_ID
        WHERE p.ID = %s
        """
        return self.fetch_count(sql, (str(mentor_id),))

    def is_profile_complete(self, mentor_id: UUID) -> bool:
        return self.get_profile_snapshot(mentor_id).is_complete

    def save_reputation(
        self,
        mentor_id: UUID,
        result: ReputationResult,
        expected_version: int,
    ) -> int:
        """
        Write derived fields if the profile is still at expected_version.

        Returns:
            The new profile version.

        Raises:
            ProfileVersionConflictException: another writer got there first.
        """
        sql = """
        UPDATE MENTOR_PROFILES
        SET RATING = %s,
            TOTAL_REVIEWS = %s,
            LEVEL = %s,
            BADGES = PARSE_JSON(%s),
            VERSION = VERSION + 1,
            UPDATED_AT = %s
        WHERE ID = %s AND VERSION = %s
        """
        params = (
            float(result.rating),
            result.total_reviews,
            int(result.level),
            json.dumps(sorted(b.value for b in result.badges)),
            datetime.now(timezone.utc),
            str(mentor_id),
            expected_version,
        )
        affected = self.execute_query(sql, params, commit=True)
        if not affected:
            raise ProfileVersionConflictException(str(mentor_id), expected_version)
        return expected_version + 1

    def _parse_interests(self, raw: Any) -> List[str]:
        """Snowflake ARRAY columns arrive as JSON text."""
        if raw is None:
            return []
        if isinstance(raw, str):
            parsed = json.loads(raw) if raw.strip() else []
            return [str(v) for v in parsed] if isinstance(parsed, list) else []
        return [str(v) for v in raw]
