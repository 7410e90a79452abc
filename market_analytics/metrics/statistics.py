"""
Statistical helpers shared by the analytics components.

All helpers operate on Decimal and return a neutral value (0) for
degenerate input instead of raising or producing NaN.

Key Formulas:
    mean = sum(x) / n
    population_std = sqrt(sum((x - mean)^2) / n)
    zscore = (x - mean) / std
    pearson = sum(da * db) / (sqrt(sum(da^2)) * sqrt(sum(db^2)))

Note:
    Standard deviation and correlation use the population formulation
    (divide by n). Scores are cross-sectional over a single batch, not a
    sample estimate of some larger population.
"""

from decimal import Decimal
from typing import Optional, Sequence

from market_analytics.models.numeric import ZERO

ONE = Decimal("1")


def mean(values: Sequence[Decimal]) -> Decimal:
    """
    Arithmetic mean.

    Args:
        values: Values to average.

    Returns:
        Decimal: Mean value, or 0 for an empty sequence.
    """
    if not values:
        return ZERO
    return sum(values, ZERO) / Decimal(len(values))


def population_std(values: Sequence[Decimal], mean_value: Optional[Decimal] = None) -> Decimal:
    """
    Population standard deviation (n in the denominator).

    Args:
        values: Values to measure.
        mean_value: Pre-computed mean to avoid recalculation.

    Returns:
        Decimal: Standard deviation, or 0 for an empty sequence.

    Example:
        >>> population_std([Decimal("2"), Decimal("4")])
        Decimal('1')
    """
    if not values:
        return ZERO
    if mean_value is None:
        mean_value = mean(values)

    variance = sum(((x - mean_value) ** 2 for x in values), ZERO) / Decimal(len(values))
    return variance.sqrt()


def zscore(value: Decimal, mean_value: Decimal, std: Decimal) -> Decimal:
    """
    Standard score of a value.

    Returns 0 when ``std`` is 0: a flat batch has no outliers.
    """
    if std == ZERO:
        return ZERO
    return (value - mean_value) / std


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == ZERO:
        return ZERO
    return numerator / denominator


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    """Clamp ``value`` into ``[low, high]``."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def clamp01(value: Decimal) -> Decimal:
    """Clamp ``value`` into ``[0, 1]``."""
    return clamp(value, ZERO, ONE)


def pearson(a: Sequence[Decimal], b: Sequence[Decimal]) -> Decimal:
    """
    Pearson correlation coefficient of two series.

    Both series are truncated to the shorter length before computing.
    The result is 0 for empty input or when either series is constant,
    and is clamped into [-1, 1] against rounding at the edges.

    Args:
        a: First series.
        b: Second series, aligned index-for-index with ``a``.

    Returns:
        Decimal: Correlation in [-1, 1].

    Example:
        >>> xs = [Decimal(i) for i in range(5)]
        >>> pearson(xs, xs)
        Decimal('1')
    """
    n = min(len(a), len(b))
    if n == 0:
        return ZERO

    series_a = a[:n]
    series_b = b[:n]
    mean_a = mean(series_a)
    mean_b = mean(series_b)

    numerator = ZERO
    sum_sq_a = ZERO
    sum_sq_b = ZERO
    for x, y in zip(series_a, series_b):
        da = x - mean_a
        db = y - mean_b
        numerator += da * db
        sum_sq_a += da * da
        sum_sq_b += db * db

    denominator = sum_sq_a.sqrt() * sum_sq_b.sqrt()
    if denominator == ZERO:
        return ZERO

    return clamp(numerator / denominator, -ONE, ONE)
