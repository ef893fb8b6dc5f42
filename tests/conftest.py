# tests/conftest.py

"""
Pytest Fixtures - Shared test configurations and data for scoring, services and APIs

FIXTURE ID REFERENCE:
- Mentor:    d1000000-0000-0000-0000-000000000001
- Reviewers: e1000000-..., e2000000-..., (generated per test otherwise)
- NOW:       2026-03-15T12:00:00Z (every clock in the tests is frozen here)
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from mentor_reputation.core.dependencies import get_reputation_service
from mentor_reputation.core.exceptions import EntityNotFoundException, ProfileVersionConflictException
from mentor_reputation.main import app
from mentor_reputation.models.mentor import MentorProfileSnapshot, SignalBundle
from mentor_reputation.models.review import Review
from mentor_reputation.services.reputation_service import ReputationService

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
MENTOR_ID = UUID("d1000000-0000-0000-0000-000000000001")
REVIEWER_ID = UUID("e1000000-0000-0000-0000-000000000001")
OTHER_REVIEWER_ID = UUID("e2000000-0000-0000-0000-000000000002")

LONG_BIO = "Backend engineer mentoring students on distributed systems. " * 4


# =============================================================================
# TIME / ID FIXTURES
# =============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def mentor_id():
    return MENTOR_ID


@pytest.fixture
def reviewer_id():
    return REVIEWER_ID


# =============================================================================
# DOMAIN OBJECT FACTORIES
# =============================================================================

def build_review(
    scores=(5, 5, 5),
    created_at: datetime = NOW,
    mentor_id: UUID = MENTOR_ID,
    reviewer_id: Optional[UUID] = None,
    review_id: Optional[UUID] = None,
    comment: str = "",
) -> Review:
    friendliness, knowledge, communication = scores
    return Review(
        id=review_id or uuid4(),
        mentor_id=mentor_id,
        reviewer_id=reviewer_id or uuid4(),
        friendliness=friendliness,
        knowledge=knowledge,
        communication=communication,
        comment=comment,
        created_at=created_at,
    )


@pytest.fixture
def make_review():
    """Factory: make_review(scores=(f, k, c), created_at=..., reviewer_id=...)."""
    return build_review


@pytest.fixture
def make_profile():
    def _make(
        mentor_id: UUID = MENTOR_ID,
        created_at: datetime = NOW,
        avatar: Optional[str] = None,
        bio: Optional[str] = None,
        interests: Optional[List[str]] = None,
        department: Optional[str] = None,
        version: int = 0,
    ) -> MentorProfileSnapshot:
        return MentorProfileSnapshot(
            mentor_id=mentor_id,
            created_at=created_at,
            avatar=avatar,
            bio=bio,
            interests=interests or [],
            department=department,
            version=version,
        )
    return _make


@pytest.fixture
def bare_profile(make_profile):
    """New account, nothing filled in."""
    return make_profile()


@pytest.fixture
def complete_profile(make_profile):
    """Two-year-old account with every profile field filled in."""
    return make_profile(
        created_at=NOW - timedelta(days=30 * 25),
        avatar="https://cdn.example.org/avatars/d1.png",
        bio=LONG_BIO,
        interests=["python", "databases"],
        department="Computer Science",
    )


@pytest.fixture
def no_signals():
    return SignalBundle(session_count=0, message_count=0, profile_complete=False)


@pytest.fixture
def full_signals():
    return SignalBundle(session_count=50, message_count=120, profile_complete=True)


# =============================================================================
# IN-MEMORY REPOSITORIES / CACHE
# =============================================================================

class InMemoryReviewRepository:
    """Stand-in for ReviewRepository backed by a dict."""

    def __init__(self):
        self.reviews: Dict[UUID, Review] = {}

    def add(self, review: Review) -> Review:
        self.reviews[review.id] = review
        return review

    def get_reviews(self, mentor_id: UUID) -> List[Review]:
        found = [r for r in self.reviews.values() if r.mentor_id == mentor_id]
        return sorted(found, key=lambda r: (r.created_at, str(r.id)))

    def get_reviews_by_reviewer(self, reviewer_id: UUID) -> List[Review]:
        found = [r for r in self.reviews.values() if r.reviewer_id == reviewer_id]
        return sorted(found, key=lambda r: (r.created_at, str(r.id)))

    def get_by_id(self, review_id: UUID) -> Optional[Review]:
        return self.reviews.get(review_id)

    def find_by_mentor_and_reviewer(self, mentor_id: UUID, reviewer_id: UUID) -> Optional[Review]:
        found = [
            r for r in self.reviews.values()
            if r.mentor_id == mentor_id and r.reviewer_id == reviewer_id
        ]
        return max(found, key=lambda r: r.created_at) if found else None

    def insert(self, review: Review) -> Review:
        return self.add(review)

    def update(self, review: Review) -> Review:
        updated = review.model_copy(update={"updated_at": NOW})
        self.reviews[review.id] = updated
        return updated


class InMemoryMentorRepository:
    """Stand-in for MentorRepository; can inject conflicts and signal failures."""

    def __init__(self):
        self.profiles: Dict[UUID, MentorProfileSnapshot] = {}
        self.session_counts: Dict[UUID, int] = {}
        self.message_counts: Dict[UUID, int] = {}
        self.saved: List[tuple] = []
        self.pending_conflicts = 0
        self.failing_signal: Optional[str] = None

    def add_profile(self, profile: MentorProfileSnapshot, sessions: int = 0, messages: int = 0):
        self.profiles[profile.mentor_id] = profile
        self.session_counts[profile.mentor_id] = sessions
        self.message_counts[profile.mentor_id] = messages

    def get_profile_snapshot(self, mentor_id: UUID) -> MentorProfileSnapshot:
        if mentor_id not in self.profiles:
            raise EntityNotFoundException("MentorProfile", str(mentor_id))
        return self.profiles[mentor_id]

    def get_session_count(self, mentor_id: UUID) -> int:
        if self.failing_signal == "session_count":
            raise ConnectionError("sessions table unreachable")
        return self.session_counts.get(mentor_id, 0)

    def get_message_count(self, mentor_id: UUID) -> int:
        if self.failing_signal == "message_count":
            raise ConnectionError("chat_messages table unreachable")
        return self.message_counts.get(mentor_id, 0)

    def is_profile_complete(self, mentor_id: UUID) -> bool:
        return self.get_profile_snapshot(mentor_id).is_complete

    def save_reputation(self, mentor_id, result, expected_version: int) -> int:
        if self.pending_conflicts > 0:
            self.pending_conflicts -= 1
            raise ProfileVersionConflictException(str(mentor_id), expected_version)
        profile = self.profiles[mentor_id]
        self.profiles[mentor_id] = profile.model_copy(update={"version": expected_version + 1})
        self.saved.append((mentor_id, result, expected_version))
        return expected_version + 1


class FakeLock:
    def __init__(self, acquired: bool = True):
        self.acquired = acquired
        self.released = False

    def acquire(self):
        return self.acquired

    def release(self):
        self.released = True


class FakeRedisCache:
    """Dict-backed RedisCache with the same get/set/delete/lock surface."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.locks: Dict[str, FakeLock] = {}
        self.client = MagicMock()

    def get(self, key, model):
        data = self.store.get(key)
        return model.model_validate_json(data) if data else None

    def set(self, key, value, ttl_seconds):
        self.store[key] = value.model_dump_json()
        self.ttls[key] = ttl_seconds

    def delete(self, key):
        self.store.pop(key, None)

    def lock(self, name, timeout, blocking_timeout):
        lock = FakeLock()
        self.locks[name] = lock
        return lock


@pytest.fixture
def review_repo():
    return InMemoryReviewRepository()


@pytest.fixture
def mentor_repo(complete_profile):
    repo = InMemoryMentorRepository()
    repo.add_profile(complete_profile, sessions=50, messages=120)
    return repo


@pytest.fixture
def fake_cache():
    return FakeRedisCache()


@pytest.fixture
def service(review_repo, mentor_repo, fake_cache):
    return ReputationService(
        review_repository=review_repo,
        mentor_repository=mentor_repo,
        cache_provider=lambda: fake_cache,
        clock=lambda: NOW,
    )


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(service):
    """TestClient with the reputation service wired to in-memory stores."""
    app.dependency_overrides[get_reputation_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def review_payload(reviewer_id):
    return {
        "reviewer_id": str(reviewer_id),
        "friendliness": 5,
        "knowledge": 6,
        "communication": 4,
        "comment": "Explained joins better than the lecture did.",
    }


def snowflake_row(**columns) -> dict:
    """Uppercase-keyed row as returned by a Snowflake DictCursor."""
    return {k.upper(): (json.dumps(v) if isinstance(v, list) else v) for k, v in columns.items()}
