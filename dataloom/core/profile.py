"""Column type inference and summary statistics for uploaded datasets.

This module turns a materialized row set into a :class:`DatasetProfile`:
- Each column is classified as numeric, date or categorical
- Numeric columns get min/max/average over their parseable values
- Categorical columns get a count of distinct non-empty values

Classification looks at the first non-empty value of a column only. A column
whose first entry is "5" is numeric even if later rows hold text; the text
entries are then simply left out of the statistics.

Example:
    >>> rows = [{"region": "North", "sales": "10"}, {"region": "South", "sales": "12"}]
    >>> profile = profile_dataset(rows, ["region", "sales"])
    >>> profile.numeric_columns
    ['sales']
    >>> profile.statistics["sales"].avg
    11.0
"""

from __future__ import annotations

import logging
import math
import numbers
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


class EmptyDatasetError(ValueError):
    """Raised when a dataset has no columns or no rows to profile."""


class ColumnType(str, Enum):
    """Semantic type assigned to a column."""

    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


def is_empty(value: Any) -> bool:
    """Check whether a cell counts as missing.

    ``None``, float NaN (pandas' missing marker) and blank strings are empty.
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def parse_number(value: Any) -> float | None:
    """Parse a cell as a finite number.

    Args:
        value: Raw cell value

    Returns:
        The parsed float, or None if the value is empty, non-numeric or
        not finite
    """
    if is_empty(value) or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        # float() accepts digit separators such as "1_000"; data files do not
        if "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def parse_date(value: Any) -> pd.Timestamp | None:
    """Parse a cell as a calendar date or timestamp.

    Only strings containing at least one digit are considered, so bare words
    such as "Monday" or "May" stay categorical.

    Args:
        value: Raw cell value

    Returns:
        The parsed timestamp, or None if the value is not a date
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not any(ch.isdigit() for ch in text):
        return None

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(parsed):
        return None
    return parsed


@dataclass
class ColumnStatistics:
    """Summary statistics for one column.

    Attributes:
        min: Smallest numeric value (numeric columns)
        max: Largest numeric value (numeric columns)
        avg: Arithmetic mean (numeric columns)
        unique_values: Number of distinct non-empty values (categorical columns)
    """

    min: float | None = None
    max: float | None = None
    avg: float | None = None
    unique_values: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, leaving out statistics that do not apply."""
        out: dict[str, Any] = {}
        if self.min is not None:
            out["min"] = self.min
        if self.max is not None:
            out["max"] = self.max
        if self.avg is not None:
            out["avg"] = self.avg
        if self.unique_values is not None:
            out["uniqueValues"] = self.unique_values
        return out


@dataclass(frozen=True)
class DatasetProfile:
    """Inferred schema and summary statistics for a dataset.

    Attributes:
        columns: Column names in display order
        row_count: Number of rows profiled
        column_types: Mapping column -> ColumnType
        statistics: Mapping column -> ColumnStatistics (date columns absent)
    """

    columns: tuple[str, ...]
    row_count: int
    column_types: dict[str, ColumnType] = field(default_factory=dict)
    statistics: dict[str, ColumnStatistics] = field(default_factory=dict)

    def _columns_of(self, column_type: ColumnType) -> list[str]:
        return [c for c in self.columns if self.column_types.get(c) == column_type]

    @property
    def numeric_columns(self) -> list[str]:
        """Columns classified as numeric."""
        return self._columns_of(ColumnType.NUMERIC)

    @property
    def categorical_columns(self) -> list[str]:
        """Columns classified as categorical."""
        return self._columns_of(ColumnType.CATEGORICAL)

    @property
    def date_columns(self) -> list[str]:
        """Columns classified as dates."""
        return self._columns_of(ColumnType.DATE)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "columns": list(self.columns),
            "rowCount": self.row_count,
            "statistics": {
                col: stats.to_dict() for col, stats in self.statistics.items()
            },
            "numericColumns": self.numeric_columns,
            "categoricalColumns": self.categorical_columns,
            "dateColumns": self.date_columns,
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        lines = [
            "**Dataset Summary**",
            f"  Total Records: {self.row_count}",
            f"  Total Columns: {len(self.columns)}",
            f"  Numeric Columns: {len(self.numeric_columns)}",
            f"  Categorical Columns: {len(self.categorical_columns)}",
            f"  Date Columns: {len(self.date_columns)}",
        ]

        for col in self.numeric_columns:
            stats = self.statistics.get(col)
            if stats is None or stats.avg is None:
                lines.append(f"**{col}** (numeric, no parseable values)")
                continue
            lines.append(
                f"**{col}** (numeric) min={stats.min:.4g} max={stats.max:.4g} "
                f"avg={stats.avg:.4g}"
            )

        for col in self.categorical_columns:
            stats = self.statistics.get(col)
            unique = stats.unique_values if stats is not None else 0
            lines.append(f"**{col}** (categorical) {unique} unique values")

        for col in self.date_columns:
            lines.append(f"**{col}** (date)")

        return "\n".join(lines)


def classify_column(values: Sequence[Any]) -> tuple[ColumnType, ColumnStatistics | None]:
    """Classify one column and compute its statistics.

    Args:
        values: Every row's value for the column, in row order

    Returns:
        Tuple of (column type, statistics or None for date columns)
    """
    sample = next((v for v in values if not is_empty(v)), None)

    if sample is None:
        return ColumnType.CATEGORICAL, ColumnStatistics(unique_values=0)

    if parse_number(sample) is not None:
        parsed = [parse_number(v) for v in values]
        numeric = pd.Series([v for v in parsed if v is not None], dtype=float)
        if numeric.empty:
            return ColumnType.NUMERIC, ColumnStatistics()
        low, high = float(numeric.min()), float(numeric.max())
        avg = float(numeric.mean())
        if not math.isfinite(avg):
            # Sum overflowed for values near the float limit
            avg = float((numeric / len(numeric)).sum())
        return ColumnType.NUMERIC, ColumnStatistics(
            min=low,
            max=high,
            avg=min(max(avg, low), high),
        )

    if parse_date(sample) is not None:
        return ColumnType.DATE, None

    distinct = {str(v) for v in values if not is_empty(v)}
    return ColumnType.CATEGORICAL, ColumnStatistics(unique_values=len(distinct))


def profile_dataset(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str] | None = None,
) -> DatasetProfile:
    """Infer column types and summary statistics for a row set.

    Args:
        rows: Row mappings sharing the same column set
        columns: Column names in display order (None = keys of the first row)

    Returns:
        DatasetProfile for the rows

    Raises:
        EmptyDatasetError: If there are no columns or no rows
    """
    if columns is None:
        columns = list(rows[0].keys()) if rows else []

    if len(columns) == 0:
        raise EmptyDatasetError("No columns found in dataset")
    if len(rows) == 0:
        raise EmptyDatasetError("No data found in dataset")

    column_types: dict[str, ColumnType] = {}
    statistics: dict[str, ColumnStatistics] = {}

    for col in columns:
        values = [row.get(col) for row in rows]
        column_type, stats = classify_column(values)
        column_types[col] = column_type
        if stats is not None:
            statistics[col] = stats
        logger.debug(f"Column {col!r} classified as {column_type.value}")

    profile = DatasetProfile(
        columns=tuple(columns),
        row_count=len(rows),
        column_types=column_types,
        statistics=statistics,
    )

    logger.info(
        f"Profiled {profile.row_count} rows: {len(profile.numeric_columns)} numeric, "
        f"{len(profile.categorical_columns)} categorical, "
        f"{len(profile.date_columns)} date columns"
    )
    return profile


def profile_dataframe(df: pd.DataFrame) -> DatasetProfile:
    """Profile a pandas DataFrame.

    Args:
        df: DataFrame whose columns are the dataset columns

    Returns:
        DatasetProfile for the DataFrame
    """
    columns = [str(c) for c in df.columns]
    rows = df.rename(columns=str).to_dict(orient="records")
    return profile_dataset(rows, columns)
