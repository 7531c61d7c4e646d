"""Between-group significance tests.

This module provides:
- Two-sample t-test (pooled Student's by default, Welch's on request)
- One-way ANOVA F-test across two or more groups

Both tests report ``None`` for the statistic and p-value when their sample
size preconditions are not met or SciPy returns a non-finite result, so a
caller can always build a report.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from scipy import stats

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.05
MIN_GROUP_SIZE = 2


@dataclass
class ComparisonResult:
    """Outcome of a significance test.

    Attributes:
        test: Name of the test performed
        statistic: Test statistic (t or F), None if not computable
        p_value: Two-tailed p-value, None if not computable
        alpha: Significance threshold used
    """

    test: str
    statistic: float | None
    p_value: float | None
    alpha: float = DEFAULT_ALPHA

    @property
    def significant(self) -> bool:
        """True iff the p-value is available and below alpha."""
        return self.p_value is not None and self.p_value < self.alpha

    @property
    def is_available(self) -> bool:
        """Whether the test could be computed."""
        return self.p_value is not None and self.statistic is not None

    def to_dict(self, statistic_key: str = "statistic") -> dict[str, Any]:
        """Convert to dictionary.

        Args:
            statistic_key: Key under which the statistic is reported
                (``tStat`` or ``fStat`` in reports)
        """
        return {
            "pValue": self.p_value,
            statistic_key: self.statistic,
            "significant": self.significant,
        }

    def format_for_display(self, statistic_label: str = "statistic") -> str:
        """Format as human-readable string."""
        if not self.is_available:
            return f"**{self.test}**: not applicable (insufficient data)"

        verdict = (
            f"significant difference (p < {self.alpha})"
            if self.significant
            else "no significant difference"
        )
        return (
            f"**{self.test}**: {statistic_label} = {self.statistic:.4f}, "
            f"p = {self.p_value:.4f} ({verdict})"
        )


def _finite_or_none(value: float) -> float | None:
    value = float(value)
    return value if math.isfinite(value) else None


def two_sample_ttest(
    group1: Sequence[float],
    group2: Sequence[float],
    equal_var: bool = True,
    alpha: float = DEFAULT_ALPHA,
) -> ComparisonResult:
    """Two-tailed independent-samples t-test.

    Args:
        group1: Values of the first group
        group2: Values of the second group
        equal_var: Pool the variances (Student's t-test); False uses Welch's
            unequal-variance test
        alpha: Significance threshold

    Returns:
        ComparisonResult with the t statistic and p-value; both None when either
        group has fewer than two values or the result is not finite
    """
    name = "Student t-test" if equal_var else "Welch t-test"

    if len(group1) < MIN_GROUP_SIZE or len(group2) < MIN_GROUP_SIZE:
        logger.warning(f"{name} requires at least {MIN_GROUP_SIZE} values in each group")
        return ComparisonResult(test=name, statistic=None, p_value=None, alpha=alpha)

    with warnings.catch_warnings():
        # Zero-variance inputs yield NaN with a RuntimeWarning
        warnings.simplefilter("ignore", RuntimeWarning)
        t_stat, p_val = stats.ttest_ind(group1, group2, equal_var=equal_var)

    statistic = _finite_or_none(t_stat)
    p_value = _finite_or_none(p_val)

    if statistic is None or p_value is None:
        logger.warning(f"{name} produced a non-finite result")
        return ComparisonResult(test=name, statistic=None, p_value=None, alpha=alpha)

    return ComparisonResult(test=name, statistic=statistic, p_value=p_value, alpha=alpha)


def one_way_anova(
    groups: Sequence[Sequence[float]],
    alpha: float = DEFAULT_ALPHA,
) -> ComparisonResult:
    """One-way ANOVA F-test.

    Args:
        groups: Values of each group
        alpha: Significance threshold

    Returns:
        ComparisonResult with the F statistic and p-value; both None unless there
        are at least two groups of at least two values each and the result
        is finite
    """
    name = "One-way ANOVA"

    if len(groups) < 2 or any(len(g) < MIN_GROUP_SIZE for g in groups):
        logger.warning(
            f"ANOVA requires at least 2 groups with at least {MIN_GROUP_SIZE} values each"
        )
        return ComparisonResult(test=name, statistic=None, p_value=None, alpha=alpha)

    with warnings.catch_warnings():
        # Constant groups trigger SciPy's degenerate-data warnings
        warnings.simplefilter("ignore")
        f_stat, p_val = stats.f_oneway(*groups)

    statistic = _finite_or_none(f_stat)
    p_value = _finite_or_none(p_val)

    if statistic is None or p_value is None:
        logger.warning("ANOVA produced a non-finite result")
        return ComparisonResult(test=name, statistic=None, p_value=None, alpha=alpha)

    return ComparisonResult(test=name, statistic=statistic, p_value=p_value, alpha=alpha)
