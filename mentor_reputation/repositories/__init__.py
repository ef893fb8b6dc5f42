"""
Repositories Package - Mentor Reputation Service
mentor_reputation/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from mentor_reputation.repositories.base import BaseRepository
from mentor_reputation.repositories.mentor_repository import MentorRepository
from mentor_reputation.repositories.review_repository import ReviewRepository

__all__ = [
    "BaseRepository",
    "MentorRepository",
    "ReviewRepository",
]
