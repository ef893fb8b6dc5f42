"""
Core Package - Mentor Reputation Service
mentor_reputation/core/__init__.py

Core infrastructure: dependencies, exceptions, logging.
Dependencies are imported from mentor_reputation.core.dependencies directly;
they pull in the repositories, which themselves import these exceptions.
"""

from mentor_reputation.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EmptyReviewSetException,
    EntityNotFoundException,
    ForeignKeyViolationException,
    InvalidScoreRangeException,
    MentorLockTimeoutException,
    ProfileVersionConflictException,
    RepositoryException,
    ScoringException,
    SignalFetchException,
)

__all__ = [
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EmptyReviewSetException",
    "EntityNotFoundException",
    "ForeignKeyViolationException",
    "InvalidScoreRangeException",
    "MentorLockTimeoutException",
    "ProfileVersionConflictException",
    "RepositoryException",
    "ScoringException",
    "SignalFetchException",
]
