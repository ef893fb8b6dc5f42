from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional


class ReviewBase(BaseModel):
    """
    Base Pydantic model for a mentor review.
    """

    friendliness: int = Field(
        ...,
        description="Friendliness sub-score (1-6)"
    )

    knowledge: int = Field(
        ...,
        description="Knowledge sub-score (1-6)"
    )

    communication: int = Field(
        ...,
        description="Communication sub-score (1-6)"
    )

    comment: Optional[str] = Field(
        default=None,
        max_length=5000,
        description="Optional free-text comment"
    )


class ReviewCreate(ReviewBase):
    """
    Model for submitting (or re-submitting) a review.
    """

    friendliness: int = Field(..., ge=1, le=6, description="Friendliness sub-score (1-6)")
    knowledge: int = Field(..., ge=1, le=6, description="Knowledge sub-score (1-6)")
    communication: int = Field(..., ge=1, le=6, description="Communication sub-score (1-6)")


class Review(ReviewBase):
    """
    Stored review as read back from the review repository.

    Sub-scores are not range-checked here; the scoring engine rejects
    out-of-range values with InvalidScoreRangeException.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique review identifier"
    )

    mentor_id: UUID = Field(
        ...,
        description="Mentor profile the review belongs to"
    )

    reviewer_id: UUID = Field(
        ...,
        description="User who wrote the review"
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC), immutable"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last update timestamp (UTC)"
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def average_score(self) -> float:
        return (self.friendliness + self.knowledge + self.communication) / 3

    class Config:
        from_attributes = True


class ReviewResponse(ReviewBase):
    """
    Model returned in API responses.
    """

    id: UUID
    mentor_id: UUID
    reviewer_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
