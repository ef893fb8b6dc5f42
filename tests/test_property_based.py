# tests/test_property_based.py
"""
Property-Based Tests - reputation pipeline invariants

Hypothesis tests covering:
  - rating bounded to [0, 6] and quantized to 0.01
  - Wilson-adjusted score never above the decayed mean
  - Bayesian score between the prior and the empirical mean
  - decay weight non-increasing with age
  - level determinism and monotonicity in rating
  - badge set independent of review order
"""

from datetime import timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import NOW, build_review
from mentor_reputation.models.mentor import MentorProfileSnapshot, SignalBundle
from mentor_reputation.scoring.badge_assigner import BadgeAssigner
from mentor_reputation.scoring.bayesian import BayesianSmoother
from mentor_reputation.scoring.decay import DecayWeightedAverageCalculator
from mentor_reputation.scoring.level_classifier import LevelClassifier
from mentor_reputation.scoring.reputation_engine import ReputationEngine
from mentor_reputation.scoring.wilson import WilsonBoundCalculator

# ---------------------------------------------------------------------------
# Shared strategies
# ---------------------------------------------------------------------------

score_st = st.integers(min_value=1, max_value=6)
age_st = st.floats(min_value=0.0, max_value=3650.0, allow_nan=False, allow_infinity=False)


@st.composite
def review_st(draw):
    scores = (draw(score_st), draw(score_st), draw(score_st))
    age_days = draw(age_st)
    return build_review(scores, created_at=NOW - timedelta(days=age_days))


reviews_st = st.lists(review_st(), min_size=1, max_size=40)

signals_st = st.builds(
    SignalBundle,
    session_count=st.integers(min_value=0, max_value=500),
    message_count=st.integers(min_value=0, max_value=5000),
    profile_complete=st.booleans(),
)


@st.composite
def profile_st(draw):
    return MentorProfileSnapshot(
        mentor_id=build_review().mentor_id,
        created_at=NOW - timedelta(days=draw(st.floats(min_value=0, max_value=3000))),
        avatar=draw(st.one_of(st.none(), st.just("https://cdn.example.org/a.png"))),
        bio=draw(st.one_of(st.none(), st.text(max_size=300))),
    )


rating_st = st.decimals(min_value=0, max_value=6, places=2, allow_nan=False, allow_infinity=False)

ENGINE = ReputationEngine()


# ---------------------------------------------------------------------------
# Pipeline invariants
# ---------------------------------------------------------------------------

@given(reviews=reviews_st, signals=signals_st, profile=profile_st())
@settings(max_examples=300, deadline=None)
def test_rating_bounded_and_two_decimals(reviews, signals, profile):
    result = ENGINE.compute(profile, reviews, signals, NOW)
    assert Decimal("0") <= result.rating <= Decimal("6")
    assert result.rating == result.rating.quantize(Decimal("0.01"))
    assert result.total_reviews == len(reviews)


@given(reviews=reviews_st, signals=signals_st, profile=profile_st())
@settings(max_examples=300, deadline=None)
def test_wilson_never_exceeds_decayed_mean(reviews, signals, profile):
    breakdown = ENGINE.compute(profile, reviews, signals, NOW).breakdown
    assert breakdown.wilson_adjusted <= breakdown.weighted_average + 1e-9


@given(reviews=reviews_st)
@settings(max_examples=300, deadline=None)
def test_auxiliary_scores_in_unit_interval(reviews):
    profile = MentorProfileSnapshot(mentor_id=reviews[0].mentor_id, created_at=NOW)
    signals = SignalBundle(session_count=len(reviews), message_count=0, profile_complete=False)
    b = ENGINE.compute(profile, reviews, signals, NOW).breakdown
    for value in (b.engagement, b.consistency, b.activity, b.tenure):
        assert 0.0 <= value <= 1.0


@given(
    weighted_average=st.floats(min_value=1.0, max_value=6.0, allow_nan=False),
    n=st.integers(min_value=0, max_value=1000),
)
@settings(max_examples=500)
def test_bayesian_between_prior_and_mean(weighted_average, n):
    score = BayesianSmoother().calculate(weighted_average, n).bayesian_score
    low, high = sorted((5.5, weighted_average))
    assert low - 1e-9 <= score <= high + 1e-9


@given(
    p_hat=st.floats(min_value=0.0, max_value=1.0, allow_nan=False),
    n=st.integers(min_value=1, max_value=10_000),
)
@settings(max_examples=500)
def test_wilson_lower_bound_within_zero_and_p_hat(p_hat, n):
    lower = WilsonBoundCalculator().lower_bound(p_hat, n)
    assert 0.0 <= lower <= p_hat


@given(
    younger=st.floats(min_value=0.0, max_value=3650.0, allow_nan=False),
    extra=st.floats(min_value=0.0, max_value=3650.0, allow_nan=False),
)
@settings(max_examples=500)
def test_decay_weight_non_increasing_with_age(younger, extra):
    calc = DecayWeightedAverageCalculator()
    w_young = calc.decay_weight(NOW - timedelta(days=younger), NOW)
    w_old = calc.decay_weight(NOW - timedelta(days=younger + extra), NOW)
    assert 0.0 < w_old <= w_young <= 1.0


# ---------------------------------------------------------------------------
# Level & badges
# ---------------------------------------------------------------------------

@given(rating=rating_st, bump=rating_st, n=st.integers(min_value=0, max_value=200))
@settings(max_examples=500)
def test_level_deterministic_and_monotone_in_rating(rating, bump, n):
    classifier = LevelClassifier()
    level = classifier.classify(rating, n)
    assert classifier.classify(rating, n) == level
    higher = min(Decimal("6"), rating + bump)
    assert classifier.classify(higher, n) >= level


@given(reviews=reviews_st, rating=rating_st, seed=st.randoms(use_true_random=False))
@settings(max_examples=200, deadline=None)
def test_badges_independent_of_review_order(reviews, rating, seed):
    profile = MentorProfileSnapshot(mentor_id=reviews[0].mentor_id, created_at=NOW, bio="b" * 200)
    level = LevelClassifier().classify(rating, len(reviews))
    assigner = BadgeAssigner()
    shuffled = list(reviews)
    seed.shuffle(shuffled)
    assert assigner.assign(rating, level, reviews, profile) == assigner.assign(rating, level, shuffled, profile)
