from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime, timezone
from typing import Optional, List

from mentor_reputation.models.enumerations import Badge, MentorLevel, SuspicionReason


class MentorProfileSnapshot(BaseModel):
    """
    Read-only view of a mentor profile used as scoring input.
    """

    mentor_id: UUID = Field(
        ...,
        description="Mentor profile identifier"
    )

    created_at: datetime = Field(
        ...,
        description="Account creation instant (tenure anchor)"
    )

    avatar: Optional[str] = Field(default=None, description="Avatar URL")
    bio: Optional[str] = Field(default=None, description="Free-text biography")
    interests: List[str] = Field(default_factory=list, description="Declared interests")
    department: Optional[str] = Field(default=None, description="Department name")

    is_highlighted: bool = Field(
        default=False,
        description="Set externally by moderators, never derived"
    )

    version: int = Field(
        default=0,
        ge=0,
        description="Optimistic-concurrency counter of the profile row"
    )

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def is_complete(self) -> bool:
        """Avatar, interests, department and bio all present."""
        return bool(self.avatar and self.interests and self.department and self.bio)

    class Config:
        from_attributes = True


class SignalBundle(BaseModel):
    """
    Auxiliary behavioural signals gathered fresh for each scoring run.
    """

    session_count: int = Field(..., ge=0, description="Chat/session relationships")
    message_count: int = Field(..., ge=0, description="Messages sent by the mentor")
    profile_complete: bool = Field(..., description="Profile completeness flag")


class ScoreBreakdown(BaseModel):
    weighted_average: float
    bayesian: float
    wilson_adjusted: float
    engagement: float
    consistency: float
    activity: float
    tenure: float


class MentorReputationResponse(BaseModel):
    """
    Derived reputation state returned after recomputation.
    """

    mentor_id: UUID
    rating: float = Field(..., ge=0, le=6)
    total_reviews: int = Field(..., ge=0)
    level: MentorLevel
    level_title: str
    badges: List[Badge] = Field(default_factory=list)

    avg_friendliness: float = 0.0
    avg_knowledge: float = 0.0
    avg_communication: float = 0.0

    breakdown: Optional[ScoreBreakdown] = None
    computed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Evaluation instant used for decay and tenure"
    )


class SuspicionResponse(BaseModel):
    review_id: UUID
    mentor_id: UUID
    reviewer_id: UUID
    is_suspicious: bool
    reasons: List[SuspicionReason] = Field(default_factory=list)
    evaluated_at: datetime


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Error occurrence timestamp"
    )
