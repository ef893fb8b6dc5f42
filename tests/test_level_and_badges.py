# tests/test_level_and_badges.py

"""
Level & Badge Tests - tier table boundaries and independent badge rules
"""

import random
from datetime import timedelta
from decimal import Decimal

import pytest

from mentor_reputation.models.enumerations import Badge, MentorLevel
from mentor_reputation.scoring.badge_assigner import BadgeAssigner
from mentor_reputation.scoring.level_classifier import LevelClassifier



# LEVEL CLASSIFIER


class TestLevelClassifier:

    @pytest.mark.parametrize("rating, reviews, expected", [
        ("0.00", 0, MentorLevel.NEW),
        ("6.00", 2, MentorLevel.NEW),
        ("3.49", 3, MentorLevel.NEW),
        ("3.50", 3, MentorLevel.TRUSTED),
        ("5.90", 9, MentorLevel.TRUSTED),
        ("3.99", 10, MentorLevel.TRUSTED),
        ("4.00", 10, MentorLevel.EXPERIENCED),
        ("4.50", 24, MentorLevel.EXPERIENCED),
        ("4.49", 100, MentorLevel.EXPERIENCED),
        ("4.50", 25, MentorLevel.TOP),
    ])
    def test_tier_boundaries(self, rating, reviews, expected):
        assert LevelClassifier().classify(Decimal(rating), reviews) == expected

    def test_highest_matching_tier_wins(self):
        # Satisfies levels 2, 3 and 4 at once
        assert LevelClassifier().classify(Decimal("5.00"), 40) == MentorLevel.TOP

    def test_accepts_float_rating(self):
        assert LevelClassifier().classify(4.0, 10) == MentorLevel.EXPERIENCED

    @pytest.mark.parametrize("level, title", [
        (MentorLevel.NEW, "New Mentor"),
        (MentorLevel.TRUSTED, "Trusted Mentor"),
        (MentorLevel.EXPERIENCED, "Experienced Mentor"),
        (MentorLevel.TOP, "Top Mentor"),
    ])
    def test_titles(self, level, title):
        assert LevelClassifier().title(level) == title



# BADGE ASSIGNER


class TestBadgeAssigner:

    def setup_method(self):
        self.assigner = BadgeAssigner()

    def _reviews(self, make_review, now, count, scores=(5, 5, 5)):
        return [make_review(scores, created_at=now - timedelta(days=count - i)) for i in range(count)]

    def test_no_badges_for_bare_profile(self, make_review, bare_profile, now):
        badges = self.assigner.assign(Decimal("3.00"), MentorLevel.NEW, [make_review()], bare_profile)
        assert badges == frozenset()

    @pytest.mark.parametrize("rating, count, expected", [
        ("4.80", 30, True),
        ("4.79", 30, False),
        ("4.80", 29, False),
    ])
    def test_star_mentor(self, make_review, bare_profile, now, rating, count, expected):
        reviews = self._reviews(make_review, now, count)
        badges = self.assigner.assign(Decimal(rating), MentorLevel.TOP, reviews, bare_profile)
        assert (Badge.STAR_MENTOR in badges) is expected

    def test_experienced_mentor_needs_fifty_reviews(self, make_review, bare_profile, now):
        low = self._reviews(make_review, now, 49, scores=(2, 2, 2))
        assert Badge.EXPERIENCED_MENTOR not in self.assigner.assign(
            Decimal("2.00"), MentorLevel.NEW, low, bare_profile
        )
        high = self._reviews(make_review, now, 50, scores=(2, 2, 2))
        assert Badge.EXPERIENCED_MENTOR in self.assigner.assign(
            Decimal("2.00"), MentorLevel.NEW, high, bare_profile
        )

    def test_community_leader_follows_level_four(self, make_review, bare_profile, now):
        reviews = self._reviews(make_review, now, 3)
        assert Badge.COMMUNITY_LEADER in self.assigner.assign(
            Decimal("1.00"), MentorLevel.TOP, reviews, bare_profile
        )
        assert Badge.COMMUNITY_LEADER not in self.assigner.assign(
            Decimal("5.90"), MentorLevel.EXPERIENCED, reviews, bare_profile
        )

    def test_trusted_mentor_uses_three_most_recent(self, make_review, bare_profile, now):
        older = [make_review((2, 2, 2), created_at=now - timedelta(days=100 + i)) for i in range(3)]
        recent = [make_review((5, 4, 5), created_at=now - timedelta(days=i)) for i in range(3)]
        badges = self.assigner.assign(Decimal("3.50"), MentorLevel.TRUSTED, older + recent, bare_profile)
        assert self.assigner.recent_average(older + recent) == pytest.approx(14 / 3)
        assert Badge.TRUSTED_MENTOR in badges

    def test_trusted_mentor_blocked_by_recent_dip(self, make_review, bare_profile, now):
        good = [make_review((6, 6, 6), created_at=now - timedelta(days=100 + i)) for i in range(3)]
        dip = [make_review((3, 3, 3), created_at=now - timedelta(days=i)) for i in range(3)]
        badges = self.assigner.assign(Decimal("4.50"), MentorLevel.TRUSTED, good + dip, bare_profile)
        assert Badge.TRUSTED_MENTOR not in badges

    def test_trusted_mentor_needs_five_reviews(self, make_review, bare_profile, now):
        reviews = self._reviews(make_review, now, 4, scores=(6, 6, 6))
        badges = self.assigner.assign(Decimal("5.00"), MentorLevel.TRUSTED, reviews, bare_profile)
        assert Badge.TRUSTED_MENTOR not in badges

    def test_complete_profile_needs_bio_over_150_chars(self, make_review, make_profile):
        at_limit = make_profile(bio="x" * 150)
        over = make_profile(bio="x" * 151)
        reviews = [make_review()]
        assert Badge.COMPLETE_PROFILE not in self.assigner.assign(Decimal("3"), MentorLevel.NEW, reviews, at_limit)
        assert Badge.COMPLETE_PROFILE in self.assigner.assign(Decimal("3"), MentorLevel.NEW, reviews, over)

    def test_with_photo(self, make_review, make_profile):
        profile = make_profile(avatar="https://cdn.example.org/a.png")
        badges = self.assigner.assign(Decimal("3"), MentorLevel.NEW, [make_review()], profile)
        assert badges == frozenset({Badge.WITH_PHOTO})

    def test_result_independent_of_review_order(self, make_review, complete_profile, now):
        reviews = [
            make_review((i % 6 + 1, 5, 6), created_at=now - timedelta(hours=7 * i))
            for i in range(12)
        ]
        expected = self.assigner.assign(Decimal("4.60"), MentorLevel.EXPERIENCED, reviews, complete_profile)
        shuffled = list(reviews)
        random.Random(7).shuffle(shuffled)
        assert self.assigner.assign(
            Decimal("4.60"), MentorLevel.EXPERIENCED, shuffled, complete_profile
        ) == expected
