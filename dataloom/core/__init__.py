"""Core functionality for DataLoom.

This module contains:
- Column type inference and dataset profiles
- CSV/Excel decoding into row sets
- The in-memory dataset store
"""

from dataloom.core.profile import (
    ColumnStatistics,
    ColumnType,
    DatasetProfile,
    EmptyDatasetError,
    profile_dataset,
)

__all__ = [
    "ColumnStatistics",
    "ColumnType",
    "DatasetProfile",
    "EmptyDatasetError",
    "profile_dataset",
]


def __getattr__(name: str):
    """Lazy imports for the loader and store."""
    if name in ("Dataset", "DatasetLoadError", "load_dataset"):
        from dataloom.core import loader

        return getattr(loader, name)
    if name in ("DatasetStore", "DatasetNotFoundError"):
        from dataloom.core import store

        return getattr(store, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
