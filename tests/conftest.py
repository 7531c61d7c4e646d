"""Pytest configuration and fixtures for DataLoom tests."""

from pathlib import Path

import pytest


@pytest.fixture
def ab_rows() -> list[dict]:
    """Return the minimal two-group row set."""
    return [
        {"g": "A", "v": 1},
        {"g": "A", "v": 3},
        {"g": "B", "v": 5},
        {"g": "B", "v": 7},
    ]


@pytest.fixture
def sales_rows() -> list[dict]:
    """Return a small sales table as decoded from CSV (all strings)."""
    return [
        {"date": "2024-01-05", "region": "North", "product": "Widget", "sales": "120"},
        {"date": "2024-01-12", "region": "South", "product": "Gadget", "sales": "95"},
        {"date": "2024-01-19", "region": "North", "product": "Gadget", "sales": "130"},
        {"date": "2024-01-26", "region": "East", "product": "Widget", "sales": "80"},
        {"date": "2024-02-02", "region": "South", "product": "Widget", "sales": "105"},
        {"date": "2024-02-09", "region": "East", "product": "Gadget", "sales": "n/a"},
        {"date": "2024-02-16", "region": "North", "product": "Widget", "sales": "125"},
        {"date": "2024-02-23", "region": "South", "product": "Gadget", "sales": "90"},
        {"date": "2024-03-01", "region": "East", "product": "Widget", "sales": "85"},
        {"date": "2024-03-08", "region": "", "product": "Widget", "sales": "100"},
    ]


@pytest.fixture
def sales_columns() -> list[str]:
    """Return the column order of the sales table."""
    return ["date", "region", "product", "sales"]


@pytest.fixture
def sales_csv(tmp_path: Path) -> Path:
    """Write the sales table to a CSV file and return its path."""
    path = tmp_path / "sales.csv"
    path.write_text(
        "date,region,product,sales\n"
        "2024-01-05,North,Widget,120\n"
        "2024-01-12,South,Gadget,95\n"
        "2024-01-19,North,Gadget,130\n"
        "2024-01-26,East,Widget,80\n"
        "2024-02-02,South,Widget,105\n"
        "2024-02-09,East,Gadget,n/a\n"
        "2024-02-16,North,Widget,125\n"
        "2024-02-23,South,Gadget,90\n"
        "2024-03-01,East,Widget,85\n"
        "2024-03-08,,Widget,100\n",
        encoding="utf-8",
    )
    return path
