"""
Custom Exceptions - Mentor Reputation Service
mentor_reputation/core/exceptions.py

Custom exception classes for repository, scoring and signal operations.
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class ForeignKeyViolationException(RepositoryException):
    """Foreign key constraint violation."""

    def __init__(self, message: str = "Foreign key constraint violation"):
        self.message = message
        super().__init__(message)


class ProfileVersionConflictException(RepositoryException):
    """Mentor profile was written by another recomputation in between."""

    def __init__(self, mentor_id: str, expected_version: int):
        self.mentor_id = mentor_id
        self.expected_version = expected_version
        super().__init__(
            f"Mentor profile {mentor_id} changed since version {expected_version}"
        )


class ScoringException(Exception):
    """Base exception for reputation scoring."""

    pass


class InvalidScoreRangeException(ScoringException):
    """A review sub-score lies outside the allowed range."""

    def __init__(self, field: str, value: int, min_val: int = 1, max_val: int = 6):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value} outside [{min_val}, {max_val}]")


class EmptyReviewSetException(ScoringException):
    """Averaging step reached with no reviews."""

    def __init__(self, message: str = "Review set is empty"):
        self.message = message
        super().__init__(message)


class SignalFetchException(Exception):
    """Auxiliary signal (sessions, messages, profile) could not be fetched."""

    def __init__(self, signal_name: str, mentor_id: str, cause: Exception):
        self.signal_name = signal_name
        self.mentor_id = mentor_id
        self.cause = cause
        super().__init__(f"Failed to fetch {signal_name} for mentor {mentor_id}: {cause}")


class MentorLockTimeoutException(Exception):
    """Could not obtain the per-mentor recomputation lock in time."""

    def __init__(self, mentor_id: str, waited_seconds: float):
        self.mentor_id = mentor_id
        self.waited_seconds = waited_seconds
        super().__init__(
            f"Recomputation lock for mentor {mentor_id} not acquired within {waited_seconds}s"
        )
