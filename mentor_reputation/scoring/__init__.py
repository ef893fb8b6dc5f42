"""
scoring/ - Mentor Reputation Scoring Engine

Modules:
    utils.py                  - Decimal / statistics utilities
    parameters.py             - Named constant table (ScoringParameters)
    decay.py                  - Decay-weighted average
    bayesian.py               - Bayesian shrinkage toward the prior
    wilson.py                 - Wilson score lower bound
    auxiliary.py              - Engagement, consistency, activity, tenure
    composite.py              - Composite rating blend
    level_classifier.py       - Mentor level (1-4) and title
    badge_assigner.py         - Achievement badges
    suspicion_detector.py     - Review fraud heuristics (advisory)
    reputation_engine.py      - Full pipeline
"""
