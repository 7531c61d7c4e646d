"""FastAPI dependencies shared by the routers.

Per-application state lives on ``app.state`` (set up by
:func:`dataloom.api.app.create_app`) and reaches endpoints through these
dependencies.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from dataloom.config import Settings
from dataloom.core.loader import Dataset
from dataloom.core.store import DatasetNotFoundError, DatasetStore


def get_store(request: Request) -> DatasetStore:
    """The application's dataset store."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """The settings the application was created with."""
    return request.app.state.settings


def lookup_dataset(store: DatasetStore, dataset_id: str) -> Dataset:
    """Fetch a dataset or fail with 404."""
    try:
        return store.get(dataset_id)
    except DatasetNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Dataset not found: {dataset_id}",
        ) from None


def get_dataset(dataset_id: str, store: DatasetStore = Depends(get_store)) -> Dataset:
    """Path dependency resolving ``{dataset_id}`` to a Dataset."""
    return lookup_dataset(store, dataset_id)
