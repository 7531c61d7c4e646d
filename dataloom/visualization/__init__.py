"""Visualization tools for DataLoom.

This module contains:
- Bar, line and pie charts for insight results
- Box and violin plots for group comparisons
"""

from dataloom.visualization.charts import (
    PlotResult,
    create_chart,
    create_group_comparison_plot,
)

__all__ = [
    "PlotResult",
    "create_chart",
    "create_group_comparison_plot",
]
