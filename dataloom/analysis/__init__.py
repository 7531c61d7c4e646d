"""Statistical analysis for DataLoom.

This module contains:
- Grouping of a numeric column by a categorical column
- Descriptive statistics per group (mean, variance, std dev, CV)
- Two-sample t-test and one-way ANOVA
- The StatisticalReport orchestrator
"""

from dataloom.analysis.comparison import (
    ComparisonResult,
    one_way_anova,
    two_sample_ttest,
)
from dataloom.analysis.descriptive import (
    GroupStatistics,
    coefficient_of_variation,
    describe_group,
    intra_group_analysis,
    mean,
    std_dev,
    variance,
)
from dataloom.analysis.grouping import InputMismatchError, group_values
from dataloom.analysis.report import (
    StatisticalReport,
    analyze,
    analyze_columns,
    extract_columns,
)

__all__ = [
    # Orchestrator
    "analyze",
    "analyze_columns",
    "extract_columns",
    "StatisticalReport",
    # Grouping
    "group_values",
    "InputMismatchError",
    # Descriptive statistics
    "mean",
    "variance",
    "std_dev",
    "coefficient_of_variation",
    "describe_group",
    "intra_group_analysis",
    "GroupStatistics",
    # Significance tests
    "two_sample_ttest",
    "one_way_anova",
    "ComparisonResult",
]
