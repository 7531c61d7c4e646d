"""Descriptive statistics for a single group of values.

Every function returns ``None`` when the statistic cannot be computed
(empty input, a single value, a zero mean for the coefficient of variation,
NaN or infinite values, overflow) instead of raising or producing NaN.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def mean(values: Sequence[float]) -> float | None:
    """Arithmetic mean, or None for an empty or non-finite sequence."""
    if len(values) == 0:
        return None
    arr = np.asarray(values, dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        result = float(np.mean(arr))
        if math.isinf(result):
            # The running sum overflowed; scale before summing
            result = float(np.sum(arr / len(arr)))
    return _finite_or_none(result)


def variance(values: Sequence[float], mean: float | None) -> float | None:
    """Sample variance (n - 1 denominator) around a precomputed mean.

    Returns None when there are fewer than two values, the mean is None or
    the squared deviations overflow.
    """
    if len(values) < 2 or mean is None:
        return None
    arr = np.asarray(values, dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        result = float(np.sum((arr - mean) ** 2) / (len(arr) - 1))
    return _finite_or_none(result)


def std_dev(variance: float | None) -> float | None:
    """Square root of the variance; None propagates."""
    if variance is None:
        return None
    return math.sqrt(variance)


def coefficient_of_variation(std_dev: float | None, mean: float | None) -> float | None:
    """Standard deviation as a percentage of the mean.

    Returns None when either input is None or the mean is exactly zero.
    """
    if std_dev is None or mean is None or mean == 0:
        return None
    return _finite_or_none(std_dev / mean * 100)


@dataclass
class GroupStatistics:
    """Dispersion summary for one group.

    Attributes:
        mean: Arithmetic mean
        variance: Sample variance
        std_dev: Sample standard deviation
        count: Number of values
        coefficient_of_variation: std_dev / mean in percent
    """

    mean: float | None
    variance: float | None
    std_dev: float | None
    count: int
    coefficient_of_variation: float | None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mean": self.mean,
            "variance": self.variance,
            "stdDev": self.std_dev,
            "count": self.count,
            "coefficientOfVariation": self.coefficient_of_variation,
        }


def describe_group(values: Sequence[float]) -> GroupStatistics:
    """Compute the dispersion summary for one group of values."""
    group_mean = mean(values)
    group_variance = variance(values, group_mean)
    group_std = std_dev(group_variance)

    return GroupStatistics(
        mean=group_mean,
        variance=group_variance,
        std_dev=group_std,
        count=len(values),
        coefficient_of_variation=coefficient_of_variation(group_std, group_mean),
    )


def intra_group_analysis(grouped: Mapping[str, Sequence[float]]) -> dict[str, GroupStatistics]:
    """Describe every group, including empty ones.

    Args:
        grouped: Mapping group label -> values

    Returns:
        Mapping group label -> GroupStatistics, in the input order
    """
    return {label: describe_group(values) for label, values in grouped.items()}
