"""
Dependencies - Mentor Reputation Service
mentor_reputation/core/dependencies.py

FastAPI dependency injection for repositories and services.
"""

from functools import lru_cache

from mentor_reputation.repositories.mentor_repository import MentorRepository
from mentor_reputation.repositories.review_repository import ReviewRepository
from mentor_reputation.services.reputation_service import ReputationService


@lru_cache()
def get_review_repository() -> ReviewRepository:
    """Get cached ReviewRepository instance."""
    return ReviewRepository()


@lru_cache()
def get_mentor_repository() -> MentorRepository:
    """Get cached MentorRepository instance."""
    return MentorRepository()


@lru_cache()
def get_reputation_service() -> ReputationService:
    """Get cached ReputationService instance (one lock registry per process)."""
    return ReputationService(
        review_repository=get_review_repository(),
        mentor_repository=get_mentor_repository(),
    )
