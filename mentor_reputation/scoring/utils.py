"""
Scoring Utilities
mentor_reputation/scoring/utils.py

Clamping and summary statistics shared by the scoring calculators.
"""

import math
from decimal import Decimal
from typing import List, Sequence


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("6"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    """
    Calculate weighted mean.

    Formula: Σ(value_i × weight_i) / Σ(weight_i)
    Returns 0.0 if all weights are zero.
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have same length")

    total_weight = math.fsum(weights)
    if total_weight == 0:
        return 0.0

    return math.fsum(v * w for v, w in zip(values, weights)) / total_weight


def population_std_dev(values: List[float]) -> float:
    """
    Calculate population standard deviation.

    Formula: sqrt(Σ(value_i - mean)² / n)
    Returns 0.0 for an empty list.
    """
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    variance = math.fsum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def months_between(earlier, later) -> float:
    """Elapsed months between two datetimes, using 30-day months."""
    return (later - earlier).total_seconds() / (30 * 24 * 3600)
