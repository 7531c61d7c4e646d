"""Group comparison report: the entry point of the analysis engine.

:func:`analyze` compares a numeric column across the groups of a categorical
column and returns a :class:`StatisticalReport` with:
- A t-test between the first two groups
- A one-way ANOVA across all compared groups
- Mean, variance, standard deviation and coefficient of variation per group

Statistically degenerate input never raises; the affected statistics are
reported as ``None``.

Example:
    >>> report = analyze([1, 3, 5, 7], ["A", "A", "B", "B"])
    >>> report.intra_group["B"].mean
    6.0
    >>> print(report.format_for_display())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from dataloom.analysis.comparison import (
    DEFAULT_ALPHA,
    ComparisonResult,
    one_way_anova,
    two_sample_ttest,
)
from dataloom.analysis.descriptive import GroupStatistics, intra_group_analysis
from dataloom.analysis.grouping import group_values
from dataloom.core.profile import is_empty, parse_number

logger = logging.getLogger(__name__)


@dataclass
class StatisticalReport:
    """Complete group comparison for one numeric column.

    Attributes:
        t_test: t-test between the first two compared groups
        anova: One-way ANOVA across all compared groups
        intra_group: Mapping group label -> dispersion summary
        groups_compared: Labels that took part in the tests, in order
    """

    t_test: ComparisonResult
    anova: ComparisonResult
    intra_group: dict[str, GroupStatistics] = field(default_factory=dict)
    groups_compared: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tTest": self.t_test.to_dict("tStat"),
            "anova": self.anova.to_dict("fStat"),
            "intraGroupAnalysis": {
                label: stats.to_dict() for label, stats in self.intra_group.items()
            },
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        lines = [
            self.t_test.format_for_display("t"),
            self.anova.format_for_display("F"),
            "",
            "**Intragroup Analysis**",
        ]

        def fmt(value: float | None) -> str:
            return "n/a" if value is None else f"{value:.2f}"

        for label, stats in self.intra_group.items():
            cv = stats.coefficient_of_variation
            lines.append(
                f"  {label} (n={stats.count}): mean={fmt(stats.mean)}, "
                f"std dev={fmt(stats.std_dev)}, CV(%)={fmt(cv)}"
            )

        return "\n".join(lines)


def analyze(
    numeric_values: Sequence[float],
    group_labels: Sequence[Any],
    groups_to_compare: Sequence[str] | None = None,
    equal_var: bool = True,
    alpha: float = DEFAULT_ALPHA,
) -> StatisticalReport:
    """Compare a numeric column across categorical groups.

    Args:
        numeric_values: Numeric values, one per row
        group_labels: Group label per row (same length as numeric_values)
        groups_to_compare: Restrict the t-test and ANOVA to these labels, in
            this order (None = every label, first-seen order)
        equal_var: Pooled-variance t-test (False = Welch's)
        alpha: Significance threshold

    Returns:
        StatisticalReport

    Raises:
        InputMismatchError: If the two sequences differ in length
    """
    compared = group_values(numeric_values, group_labels, groups_to_compare)
    labels = list(compared.keys())
    arrays = list(compared.values())

    if len(arrays) >= 2:
        t_test = two_sample_ttest(arrays[0], arrays[1], equal_var=equal_var, alpha=alpha)
        if len(arrays) > 2:
            logger.debug(
                f"t-test uses {labels[0]!r} and {labels[1]!r}; "
                f"{len(arrays) - 2} more groups go to ANOVA only"
            )
    else:
        # Fewer than two groups means nothing to tell apart
        t_test = ComparisonResult(
            test="Student t-test" if equal_var else "Welch t-test",
            statistic=0.0,
            p_value=1.0,
            alpha=alpha,
        )

    anova = one_way_anova(arrays, alpha=alpha)

    # Dispersion covers every observed group, plus requested labels with no rows
    observed = group_values(numeric_values, group_labels)
    for label in labels:
        observed.setdefault(label, [])

    return StatisticalReport(
        t_test=t_test,
        anova=anova,
        intra_group=intra_group_analysis(observed),
        groups_compared=labels,
    )


def extract_columns(
    rows: Sequence[Mapping[str, Any]],
    numeric_column: str,
    group_column: str,
) -> tuple[list[float], list[str]]:
    """Pull aligned numeric values and group labels out of row mappings.

    Rows whose numeric value does not parse or whose label is empty are
    skipped.

    Args:
        rows: Row mappings
        numeric_column: Column holding the measurements
        group_column: Column holding the group labels

    Returns:
        Tuple of (values, labels) of equal length
    """
    values: list[float] = []
    labels: list[str] = []
    skipped = 0

    for row in rows:
        number = parse_number(row.get(numeric_column))
        label = row.get(group_column)
        if number is None or is_empty(label):
            skipped += 1
            continue
        values.append(number)
        labels.append(str(label))

    if skipped:
        logger.info(
            f"Skipped {skipped} rows without a usable "
            f"{numeric_column!r}/{group_column!r} pair"
        )

    return values, labels


def analyze_columns(
    rows: Sequence[Mapping[str, Any]],
    numeric_column: str,
    group_column: str,
    groups_to_compare: Sequence[str] | None = None,
    columns: Sequence[str] | None = None,
    equal_var: bool = True,
    alpha: float = DEFAULT_ALPHA,
) -> StatisticalReport:
    """Run :func:`analyze` on two columns of a row set.

    Args:
        rows: Row mappings
        numeric_column: Column holding the measurements
        group_column: Column holding the group labels
        groups_to_compare: Restrict the tests to these labels
        columns: Known column names (None = keys of the first row)
        equal_var: Pooled-variance t-test (False = Welch's)
        alpha: Significance threshold

    Returns:
        StatisticalReport

    Raises:
        ValueError: If either column is not part of the dataset
    """
    known = list(columns) if columns is not None else (list(rows[0].keys()) if rows else [])
    for col in (numeric_column, group_column):
        if col not in known:
            raise ValueError(f"Column '{col}' not found in dataset")

    values, labels = extract_columns(rows, numeric_column, group_column)
    return analyze(
        values,
        labels,
        groups_to_compare=groups_to_compare,
        equal_var=equal_var,
        alpha=alpha,
    )
