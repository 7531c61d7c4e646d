"""Plotly charts for datasets and analysis results.

This module provides:
- Bar, line and pie charts built from the chart data returned by insight
  queries (a list of flat records)
- Box and violin plots comparing a numeric column across groups

All charts are generated using Plotly for interactivity; the API ships them
to the browser as JSON.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import plotly.graph_objects as go

from dataloom.analysis.grouping import group_values
from dataloom.core.profile import parse_number

CHART_TYPES = ("bar", "line", "pie")


@dataclass
class PlotResult:
    """Result from a chart generation function.

    Attributes:
        figure: Plotly figure object
        title: Chart title
        description: Description of what the chart shows
        data_summary: Summary of data used
    """

    figure: go.Figure
    title: str
    description: str
    data_summary: dict[str, Any]

    def to_html(self, include_plotlyjs: bool = True) -> str:
        """Convert figure to HTML string.

        Args:
            include_plotlyjs: Include Plotly.js library in HTML

        Returns:
            HTML string
        """
        return self.figure.to_html(
            include_plotlyjs="cdn" if include_plotlyjs else False,
            full_html=False,
        )

    def to_json(self) -> str:
        """Convert figure to JSON for frontend rendering."""
        return self.figure.to_json()


def _pie_label(item: Mapping[str, Any]) -> str:
    for key in ("name", "category"):
        if item.get(key):
            return str(item[key])
    values = list(item.values())
    return str(values[0]) if values else ""


def _pie_value(item: Mapping[str, Any]) -> float | None:
    values = list(item.values())
    return parse_number(values[1]) if len(values) > 1 else None


def create_chart(
    chart_type: str,
    data: Sequence[Mapping[str, Any]],
    title: str | None = None,
) -> PlotResult:
    """Create a chart from a list of flat records.

    For bar and line charts the first key of the first record is the x axis
    and every other key becomes a series. Pie charts take the label from
    ``name``, ``category`` or the first value and the size from the second
    value. Unknown chart types are drawn as bar charts.

    Args:
        chart_type: 'bar', 'line' or 'pie' (case-insensitive)
        data: Records, e.g. ``[{"region": "North", "sales": 120}, ...]``
        title: Chart title

    Returns:
        PlotResult with the chart figure

    Raises:
        ValueError: If there is no data to draw
    """
    if not data or not data[0]:
        raise ValueError("No chart data provided")

    kind = chart_type.lower()
    if kind not in CHART_TYPES:
        kind = "bar"

    keys = list(data[0].keys())
    fig = go.Figure()

    if kind == "pie":
        fig.add_trace(go.Pie(
            labels=[_pie_label(item) for item in data],
            values=[_pie_value(item) for item in data],
        ))
        series = [keys[1]] if len(keys) > 1 else []
    else:
        x_key = keys[0]
        series = keys[1:]
        x = [item.get(x_key) for item in data]

        for key in series:
            y = [parse_number(item.get(key)) for item in data]
            if kind == "line":
                fig.add_trace(go.Scatter(x=x, y=y, mode="lines+markers", name=key))
            else:
                fig.add_trace(go.Bar(x=x, y=y, name=key))

        fig.update_layout(xaxis_title=x_key)

    if title is None:
        title = f"{kind.capitalize()} chart"

    fig.update_layout(
        title=dict(text=title, x=0.5),
        template="plotly_white",
    )

    summary = {
        "chart_type": kind,
        "n_points": len(data),
        "series": series,
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"{kind.capitalize()} chart of {len(data)} data points.",
        data_summary=summary,
    )


def create_group_comparison_plot(
    values: Sequence[float],
    labels: Sequence[Any],
    numeric_column: str,
    group_column: str,
    plot_type: str = "box",
    groups: Sequence[str] | None = None,
    title: str | None = None,
) -> PlotResult:
    """Create a comparison plot between groups.

    Args:
        values: Numeric values, one per row
        labels: Group label per row
        numeric_column: Name of the compared column (y axis)
        group_column: Name of the grouping column (x axis)
        plot_type: 'box' or 'violin'
        groups: Restrict the plot to these labels, in this order
        title: Plot title

    Returns:
        PlotResult with comparison figure

    Raises:
        InputMismatchError: If values and labels differ in length
    """
    grouped = group_values(values, labels, groups)

    if title is None:
        title = f"{numeric_column} by {group_column}"

    fig = go.Figure()

    for label, group_data in grouped.items():
        if plot_type == "violin":
            fig.add_trace(go.Violin(
                y=group_data,
                name=label,
                box_visible=True,
                meanline_visible=True,
            ))
        else:
            fig.add_trace(go.Box(
                y=group_data,
                name=label,
                boxmean=True,
            ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        yaxis_title=numeric_column,
        xaxis_title=group_column,
        template="plotly_white",
    )

    summary = {
        "numeric_column": numeric_column,
        "group_column": group_column,
        "n_groups": len(grouped),
        "groups": list(grouped.keys()),
        "group_sizes": {label: len(v) for label, v in grouped.items()},
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Comparison of {numeric_column} across {group_column} groups.",
        data_summary=summary,
    )
