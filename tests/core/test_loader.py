"""Tests for CSV/Excel decoding."""

from pathlib import Path

import pandas as pd
import pytest

from dataloom.core.loader import (
    Dataset,
    DatasetLoadError,
    dataset_from_dataframe,
    dataset_from_rows,
    load_dataset,
)
from dataloom.core.profile import ColumnType


class TestLoadCsv:
    """Tests for CSV decoding."""

    def test_load_from_path(self, sales_csv: Path) -> None:
        """Test decoding a CSV file on disk."""
        dataset = load_dataset(sales_csv)

        assert isinstance(dataset, Dataset)
        assert dataset.name == "sales.csv"
        assert dataset.columns == ["date", "region", "product", "sales"]
        assert dataset.row_count == 10
        assert dataset.profile.numeric_columns == ["sales"]
        assert dataset.profile.date_columns == ["date"]

    def test_values_kept_as_text(self, sales_csv: Path) -> None:
        """Test that cells are read as strings and blanks stay blank."""
        dataset = load_dataset(sales_csv)

        assert dataset.rows[0]["sales"] == "120"
        assert dataset.rows[5]["sales"] == "n/a"
        assert dataset.rows[9]["region"] == ""

    def test_load_from_bytes(self, sales_csv: Path) -> None:
        """Test decoding uploaded bytes."""
        dataset = load_dataset(sales_csv.read_bytes(), name="upload.csv")

        assert dataset.name == "upload.csv"
        assert dataset.row_count == 10

    def test_preview_rows(self, sales_csv: Path) -> None:
        """Test that the preview holds the leading rows."""
        dataset = load_dataset(sales_csv, preview_rows=3)

        assert len(dataset.preview) == 3
        assert dataset.preview[0] == dataset.rows[0]

    def test_blank_lines_skipped(self, tmp_path: Path) -> None:
        """Test that blank lines do not become rows."""
        path = tmp_path / "gaps.csv"
        path.write_text("a,b\n1,x\n\n2,y\n\n", encoding="utf-8")

        assert load_dataset(path).row_count == 2

    def test_header_only(self, tmp_path: Path) -> None:
        """Test that a file with a header but no rows is rejected."""
        path = tmp_path / "header.csv"
        path.write_text("a,b\n", encoding="utf-8")

        with pytest.raises(DatasetLoadError, match="No data found in file"):
            load_dataset(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file is rejected."""
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        with pytest.raises(DatasetLoadError, match="No columns found in file"):
            load_dataset(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing path raises a load error."""
        with pytest.raises(DatasetLoadError):
            load_dataset(tmp_path / "nope.csv")


class TestLoadExcel:
    """Tests for Excel decoding."""

    def test_load_xlsx(self, tmp_path: Path) -> None:
        """Test decoding the first sheet of a workbook."""
        path = tmp_path / "scores.xlsx"
        pd.DataFrame({
            "team": ["red", "blue", "red"],
            "score": [10, 12, None],
        }).to_excel(path, index=False)

        dataset = load_dataset(path)

        assert dataset.columns == ["team", "score"]
        assert dataset.row_count == 3
        assert dataset.rows[2]["score"] == ""
        assert dataset.profile.column_types["score"] == ColumnType.NUMERIC
        assert dataset.profile.statistics["score"].max == 12.0


class TestLoadErrors:
    """Tests for decoder error handling."""

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        """Test rejecting files that are neither CSV nor Excel."""
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        with pytest.raises(DatasetLoadError, match="Unsupported file type"):
            load_dataset(path)

    def test_bytes_require_name(self) -> None:
        """Test that raw bytes need a file name."""
        with pytest.raises(DatasetLoadError, match="file name is required"):
            load_dataset(b"a,b\n1,2\n")

    def test_corrupt_excel(self) -> None:
        """Test that unreadable workbook bytes raise a load error."""
        with pytest.raises(DatasetLoadError):
            load_dataset(b"definitely not a workbook", name="broken.xlsx")

    def test_load_error_is_value_error(self) -> None:
        """Test that callers can catch decoder failures as ValueError."""
        with pytest.raises(ValueError):
            load_dataset(b"", name="empty.csv")


class TestInMemoryDatasets:
    """Tests for building datasets from decoded data."""

    def test_from_rows(self, ab_rows: list[dict]) -> None:
        """Test building a dataset from row mappings."""
        dataset = dataset_from_rows(ab_rows, name="ab")

        assert dataset.columns == ["g", "v"]
        assert dataset.profile.numeric_columns == ["v"]

    def test_from_rows_empty(self) -> None:
        """Test that empty row sets are rejected."""
        with pytest.raises(DatasetLoadError, match="No columns found"):
            dataset_from_rows([])
        with pytest.raises(DatasetLoadError, match="No data found"):
            dataset_from_rows([], ["a"])

    def test_from_dataframe(self) -> None:
        """Test building a dataset from a DataFrame."""
        df = pd.DataFrame({"g": ["A", "B"], "v": [1.5, 2.5]})

        dataset = dataset_from_dataframe(df, name="frame")

        assert dataset.name == "frame"
        assert dataset.profile.statistics["v"].avg == 2.0

    def test_to_dict(self, sales_csv: Path) -> None:
        """Test the dataset info dictionary layout."""
        data = load_dataset(sales_csv, preview_rows=2).to_dict()

        assert data["name"] == "sales.csv"
        assert data["rowCount"] == 10
        assert len(data["preview"]) == 2
        assert data["summary"]["numericColumns"] == ["sales"]
        assert data["summary"]["dateColumns"] == ["date"]
        assert data["summary"]["statistics"]["region"] == {"uniqueValues": 3}
