"""
Reputation Router - Mentor Reputation Service
mentor_reputation/routers/reputation.py

Endpoints:
  PUT  /api/v1/mentors/{mentor_id}/reviews              - Submit or update a review
  POST /api/v1/mentors/{mentor_id}/reputation/recompute - Recompute from scratch
  GET  /api/v1/mentors/{mentor_id}/reputation           - Read (Redis cached)
  GET  /api/v1/mentors/reviews/{review_id}/suspicion    - Fraud heuristics for one review
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from mentor_reputation.config import settings
from mentor_reputation.core.dependencies import get_reputation_service
from mentor_reputation.core.exceptions import (
    EntityNotFoundException,
    InvalidScoreRangeException,
    MentorLockTimeoutException,
    ProfileVersionConflictException,
    RepositoryException,
    SignalFetchException,
)
from mentor_reputation.models.mentor import ErrorResponse, MentorReputationResponse, SuspicionResponse
from mentor_reputation.models.review import ReviewCreate, ReviewResponse
from mentor_reputation.services.reputation_service import ReputationService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/mentors", tags=["Mentor Reputation"])



#  Validation Error Messages


FIELD_MESSAGES = {
    "friendliness": {
        "missing": "Friendliness score is required",
        "less_than_equal": "Friendliness score must be between 1 and 6",
        "greater_than_equal": "Friendliness score must be between 1 and 6",
    },
    "knowledge": {
        "missing": "Knowledge score is required",
        "less_than_equal": "Knowledge score must be between 1 and 6",
        "greater_than_equal": "Knowledge score must be between 1 and 6",
    },
    "communication": {
        "missing": "Communication score is required",
        "less_than_equal": "Communication score must be between 1 and 6",
        "greater_than_equal": "Communication score must be between 1 and 6",
    },
    "reviewer_id": {
        "missing": "Reviewer ID is required",
        "uuid_parsing": "Reviewer ID must be a valid UUID format",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_long": "Field '{field}' is too long",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "uuid_parsing": "Field '{field}' must be a valid UUID",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be a valid integer",
    "json_invalid": "Malformed JSON request body",
}


def get_validation_message(field: str, error_type: str) -> str:
    if field in FIELD_MESSAGES:
        for key in FIELD_MESSAGES[field]:
            if key in error_type:
                return FIELD_MESSAGES[field][key]
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error_code": "INVALID_REQUEST",
                "message": "Malformed JSON request body",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    field = ".".join(str(l) for l in loc if l not in ("body", "path"))
    message = get_validation_message(field, error_type)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "VALIDATION_ERROR",
            "message": message,
            "details": {"field": field, "type": error_type} if field else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )



#  Schemas


class ReviewSubmission(ReviewCreate):
    reviewer_id: UUID = Field(..., description="User submitting the review")


class ReviewSubmissionResponse(BaseModel):
    review: ReviewResponse
    reputation: MentorReputationResponse



#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: dict = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )


def raise_for_exception(e: Exception):
    """Translate service exceptions into HTTP errors."""
    if isinstance(e, EntityNotFoundException):
        raise_error(
            status.HTTP_404_NOT_FOUND,
            f"{e.entity_type.upper()}_NOT_FOUND",
            str(e),
            {"entity_id": e.entity_id},
        )
    if isinstance(e, (ProfileVersionConflictException, MentorLockTimeoutException)):
        raise_error(status.HTTP_409_CONFLICT, "RECOMPUTATION_CONFLICT", str(e))
    if isinstance(e, InvalidScoreRangeException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_SCORE_RANGE",
            str(e),
            {"field": e.field, "value": e.value},
        )
    if isinstance(e, SignalFetchException):
        raise_error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SIGNAL_UNAVAILABLE",
            str(e),
            {"signal": e.signal_name},
        )
    if isinstance(e, RepositoryException):
        raise_error(status.HTTP_503_SERVICE_UNAVAILABLE, "DATABASE_ERROR", str(e))
    raise e


SERVICE_ERRORS = (
    EntityNotFoundException,
    ProfileVersionConflictException,
    MentorLockTimeoutException,
    InvalidScoreRangeException,
    SignalFetchException,
    RepositoryException,
)



#  Endpoints


@router.put(
    "/{mentor_id}/reviews",
    response_model=ReviewSubmissionResponse,
    summary="Submit or update a review",
    description="""
    Creates the reviewer's review for this mentor, or updates it if one
    already exists (one active review per reviewer and mentor), then
    recomputes the mentor's rating, level and badges from scratch.
    """,
)
def submit_review(
    mentor_id: UUID,
    submission: ReviewSubmission,
    service: ReputationService = Depends(get_reputation_service),
) -> ReviewSubmissionResponse:
    request = ReviewCreate(**submission.model_dump(exclude={"reviewer_id"}))
    try:
        review, result = service.submit_review(mentor_id, submission.reviewer_id, request)
    except SERVICE_ERRORS as e:
        logger.warning(f"[{mentor_id}] review submission failed: {e}")
        raise_for_exception(e)

    return ReviewSubmissionResponse(
        review=ReviewResponse.model_validate(review, from_attributes=True),
        reputation=to_response(result),
    )


@router.post(
    "/{mentor_id}/reputation/recompute",
    response_model=MentorReputationResponse,
    summary="Recompute mentor reputation",
    description="""
    Runs the full pipeline for one mentor:
    decay-weighted average → Bayesian smoothing → Wilson lower bound →
    engagement / consistency / activity / tenure → composite rating →
    level → badges. Persists the result and refreshes the cache.
    """,
)
def recompute_reputation(
    mentor_id: UUID,
    service: ReputationService = Depends(get_reputation_service),
) -> MentorReputationResponse:
    try:
        result = service.recompute_mentor_profile(mentor_id)
    except SERVICE_ERRORS as e:
        logger.warning(f"[{mentor_id}] recomputation failed: {e}")
        raise_for_exception(e)
    return to_response(result)


@router.get(
    "/{mentor_id}/reputation",
    response_model=MentorReputationResponse,
    summary="Get mentor reputation",
    description="Returns the cached reputation, recomputing it on a cache miss.",
)
def get_reputation(
    mentor_id: UUID,
    service: ReputationService = Depends(get_reputation_service),
) -> MentorReputationResponse:
    try:
        return service.get_reputation(mentor_id)
    except SERVICE_ERRORS as e:
        raise_for_exception(e)


@router.get(
    "/reviews/{review_id}/suspicion",
    response_model=SuspicionResponse,
    summary="Evaluate review suspicion",
    description="""
    Advisory fraud heuristics for moderation. Flags reviews with all-max or
    all-min scores, reviews younger than 60 minutes, and repeated or same-day
    reviews by one reviewer for one mentor. Does not affect the rating.
    """,
)
def evaluate_suspicion(
    review_id: UUID,
    service: ReputationService = Depends(get_reputation_service),
) -> SuspicionResponse:
    try:
        review, result = service.evaluate_suspicion(review_id)
    except SERVICE_ERRORS as e:
        raise_for_exception(e)

    return SuspicionResponse(
        review_id=review.id,
        mentor_id=review.mentor_id,
        reviewer_id=review.reviewer_id,
        is_suspicious=result.is_suspicious,
        reasons=result.reasons,
        evaluated_at=result.evaluated_at,
    )
