"""File decoding for uploaded datasets.

This module reads CSV and Excel uploads into a :class:`Dataset`, the
in-memory row set that profiling and analysis work on. Every cell is read as
text so that type inference sees the values as the user wrote them.

Example:
    >>> from dataloom.core.loader import load_dataset
    >>> dataset = load_dataset("sales.csv")
    >>> print(f"Loaded {dataset.row_count} rows from {dataset.name}")
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from dataloom.core.profile import DatasetProfile, profile_dataset

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS + EXCEL_EXTENSIONS


class DatasetLoadError(ValueError):
    """Raised when an upload cannot be decoded into rows."""


@dataclass
class Dataset:
    """A decoded dataset with its profile.

    Attributes:
        name: Display name (usually the uploaded file name)
        columns: Column names in file order
        rows: Row mappings, one per data row
        profile: Inferred schema and summary statistics
        preview: First rows of the dataset for display
    """

    name: str
    columns: list[str]
    rows: list[dict[str, Any]]
    profile: DatasetProfile
    preview: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Number of data rows."""
        return len(self.rows)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        profile = self.profile.to_dict()
        return {
            "name": self.name,
            "columns": self.columns,
            "rowCount": self.row_count,
            "preview": self.preview,
            "summary": {
                "numericColumns": profile["numericColumns"],
                "categoricalColumns": profile["categoricalColumns"],
                "dateColumns": profile["dateColumns"],
                "statistics": profile["statistics"],
            },
        }


def _read_frame(source: Path | bytes, suffix: str) -> pd.DataFrame:
    """Read a CSV or Excel source into a DataFrame of strings."""
    handle: Path | io.BytesIO = io.BytesIO(source) if isinstance(source, bytes) else source

    try:
        if suffix in CSV_EXTENSIONS:
            return pd.read_csv(
                handle,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )

        # First sheet only; empty cells come back as ""
        return pd.read_excel(handle, sheet_name=0, dtype=str).fillna("")
    except pd.errors.EmptyDataError as e:
        raise DatasetLoadError("No columns found in file") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DatasetLoadError(f"CSV parsing failed: {e}") from e
    except (ValueError, OSError) as e:
        raise DatasetLoadError(f"Failed to process file: {e}") from e


def dataset_from_dataframe(
    df: pd.DataFrame,
    name: str = "dataset",
    preview_rows: int = 10,
) -> Dataset:
    """Build a Dataset from an already decoded DataFrame.

    Args:
        df: DataFrame with one column per dataset column
        name: Display name
        preview_rows: Number of rows kept as preview

    Returns:
        Dataset with profile and preview

    Raises:
        DatasetLoadError: If the frame has no columns or no rows
    """
    df = df.rename(columns=str)
    rows = df.to_dict(orient="records")
    return dataset_from_rows(
        rows, df.columns.tolist(), name=name, preview_rows=preview_rows
    )


def dataset_from_rows(
    rows: list[dict[str, Any]],
    columns: list[str] | None = None,
    name: str = "dataset",
    preview_rows: int = 10,
) -> Dataset:
    """Build a Dataset from row mappings.

    Args:
        rows: Row mappings sharing the same column set
        columns: Column order (None = keys of the first row)
        name: Display name
        preview_rows: Number of rows kept as preview

    Returns:
        Dataset with profile and preview

    Raises:
        DatasetLoadError: If there are no columns or no rows
    """
    if columns is None:
        columns = list(rows[0].keys()) if rows else []

    if len(columns) == 0:
        raise DatasetLoadError("No columns found in file")
    if len(rows) == 0:
        raise DatasetLoadError("No data found in file")

    return Dataset(
        name=name,
        columns=list(columns),
        rows=rows,
        profile=profile_dataset(rows, columns),
        preview=rows[:preview_rows],
    )


def load_dataset(
    source: str | Path | bytes,
    name: str | None = None,
    preview_rows: int = 10,
) -> Dataset:
    """Decode a CSV or Excel file into a Dataset.

    Args:
        source: Path to the file, or its raw bytes
        name: File name; required for bytes (its extension selects the decoder)
        preview_rows: Number of rows kept as preview

    Returns:
        Dataset with profile and preview

    Raises:
        DatasetLoadError: If the format is unsupported or the file is unreadable
            or empty
    """
    if isinstance(source, bytes):
        if not name:
            raise DatasetLoadError("A file name is required to decode raw bytes")
        data: Path | bytes = source
    else:
        data = Path(source)
        name = name or data.name

    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise DatasetLoadError(
            f"Unsupported file type '{suffix or name}'. "
            f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    logger.info(f"Decoding {name} as {'CSV' if suffix in CSV_EXTENSIONS else 'Excel'}")
    df = _read_frame(data, suffix)
    dataset = dataset_from_dataframe(df, name=name, preview_rows=preview_rows)

    logger.info(f"Loaded {name}: {dataset.row_count} rows, {len(dataset.columns)} columns")
    return dataset
