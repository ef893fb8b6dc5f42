"""
Review Repository - Mentor Reputation Service
mentor_reputation/repositories/review_repository.py

Snowflake access for MENTOR_REVIEWS. Reviews are returned in creation order
so "most recent" is well defined for the badge rules.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from mentor_reputation.models.review import Review
from mentor_reputation.repositories.base import BaseRepository

_REVIEW_COLUMNS = """
    ID,
    MENTOR_ID,
    REVIEWER_ID,
    FRIENDLINESS,
    KNOWLEDGE,
    COMMUNICATION,
    COMMENT,
    CREATED_AT,
    UPDATED_AT
"""


class ReviewRepository(BaseRepository):
    """Repository for mentor reviews."""

    def get_reviews(self, mentor_id: UUID) -> List[Review]:
        """Return every review for a mentor, oldest first."""
        sql = f"""
        SELECT {_REVIEW_COLUMNS}
        FROM MENTOR_REVIEWS
        WHERE MENTOR_ID = %s
        ORDER BY CREATED_AT, ID
        """
        rows = self.execute_query(sql, (str(mentor_id),), fetch_all=True) or []
        return [self._row_to_review(row) for row in rows]

    def get_reviews_by_reviewer(self, reviewer_id: UUID) -> List[Review]:
        """Return every review written by one user, oldest first."""
        sql = f"""
        SELECT {_REVIEW_COLUMNS}
        FROM MENTOR_REVIEWS
        WHERE REVIEWER_ID = %s
        ORDER BY CREATED_AT, ID
        """
        rows = self.execute_query(sql, (str(reviewer_id),), fetch_all=True) or []
        return [self._row_to_review(row) for row in rows]

    def get_by_id(self, review_id: UUID) -> Optional[Review]:
        sql = f"""
        SELECT {_REVIEW_COLUMNS}
        FROM MENTOR_REVIEWS
        WHERE ID = %s
        """
        row = self.execute_query(sql, (str(review_id),), fetch_one=True)
        return self._row_to_review(row) if row else None

    def find_by_mentor_and_reviewer(self, mentor_id: UUID, reviewer_id: UUID) -> Optional[Review]:
        """Latest review a user wrote for a mentor, if any."""
        sql = f"""
        SELECT {_REVIEW_COLUMNS}
        FROM MENTOR_REVIEWS
        WHERE MENTOR_ID = %s AND REVIEWER_ID = %s
        ORDER BY CREATED_AT DESC
        LIMIT 1
        """
        row = self.execute_query(sql, (str(mentor_id), str(reviewer_id)), fetch_one=True)
        return self._row_to_review(row) if row else None

    def insert(self, review: Review) -> Review:
        sql = """
        INSERT INTO MENTOR_REVIEWS (
            ID, MENTOR_ID, REVIEWER_ID,
            FRIENDLINESS, KNOWLEDGE, COMMUNICATION,
            COMMENT, CREATED_AT, UPDATED_AT
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params = (
            str(review.id),
            str(review.mentor_id),
            str(review.reviewer_id),
            review.friendliness,
            review.knowledge,
            review.communication,
            review.comment,
            review.created_at,
            review.updated_at,
        )
        self.execute_query(sql, params, commit=True)
        return review

    def update(self, review: Review) -> Review:
        """Overwrite scores and comment; CREATED_AT is never touched."""
        updated_at = datetime.now(timezone.utc)
        sql = """
        UPDATE MENTOR_REVIEWS
        SET FRIENDLINESS = %s,
            KNOWLEDGE = %s,
            COMMUNICATION = %s,
            COMMENT = %s,
            UPDATED_AT = %s
        WHERE ID = %s
        """
        params = (
            review.friendliness,
            review.knowledge,
            review.communication,
            review.comment,
            updated_at,
            str(review.id),
        )
        self.execute_query(sql, params, commit=True)
        return review.model_copy(update={"updated_at": updated_at})

    def _row_to_review(self, row: Dict[str, Any]) -> Review:
        data = self.row_to_dict(row)
        return Review(
            id=self.str_to_uuid(data["id"]),
            mentor_id=self.str_to_uuid(data["mentor_id"]),
            reviewer_id=self.str_to_uuid(data["reviewer_id"]),
            friendliness=int(data["friendliness"]),
            knowledge=int(data["knowledge"]),
            communication=int(data["communication"]),
            comment=data.get("comment"),
            created_at=self.normalize_timestamp(data["created_at"]),
            updated_at=self.normalize_timestamp(data.get("updated_at")),
        )
