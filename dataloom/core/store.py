"""In-memory registry of loaded datasets.

The store is owned by whoever creates it (the API application keeps one on
``app.state``); nothing in the package holds a process-wide current dataset.
Datasets are kept as loaded: a re-upload adds a new entry with a new id
rather than changing an existing one.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any

from dataloom.core.loader import Dataset

logger = logging.getLogger(__name__)


class DatasetNotFoundError(KeyError):
    """Raised when a dataset id is not in the store."""


class DatasetStore:
    """Thread-safe mapping of dataset id -> Dataset."""

    def __init__(self) -> None:
        self._datasets: dict[str, Dataset] = {}
        self._lock = threading.Lock()

    def add(self, dataset: Dataset) -> str:
        """Register a dataset and return its new id."""
        dataset_id = uuid.uuid4().hex
        with self._lock:
            self._datasets[dataset_id] = dataset
        logger.info(f"Stored dataset {dataset.name!r} as {dataset_id}")
        return dataset_id

    def get(self, dataset_id: str) -> Dataset:
        """Look up a dataset.

        Raises:
            DatasetNotFoundError: If the id is unknown
        """
        with self._lock:
            dataset = self._datasets.get(dataset_id)
        if dataset is None:
            raise DatasetNotFoundError(dataset_id)
        return dataset

    def remove(self, dataset_id: str) -> None:
        """Drop a dataset.

        Raises:
            DatasetNotFoundError: If the id is unknown
        """
        with self._lock:
            if self._datasets.pop(dataset_id, None) is None:
                raise DatasetNotFoundError(dataset_id)
        logger.info(f"Removed dataset {dataset_id}")

    def list(self) -> list[dict[str, Any]]:
        """Summaries of every stored dataset, oldest first."""
        with self._lock:
            items = list(self._datasets.items())
        return [
            {
                "dataset_id": dataset_id,
                "name": dataset.name,
                "row_count": dataset.row_count,
                "column_count": len(dataset.columns),
            }
            for dataset_id, dataset in items
        ]

    def clear(self) -> None:
        """Drop every dataset."""
        with self._lock:
            self._datasets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._datasets)

    def __contains__(self, dataset_id: object) -> bool:
        with self._lock:
            return dataset_id in self._datasets
