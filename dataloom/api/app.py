"""FastAPI application for DataLoom.

This module provides the REST API endpoints for the DataLoom application,
including dataset upload, profiling and group comparison analysis. The
natural-language chat endpoint lives in :mod:`dataloom.api.chat`.

Each application built by :func:`create_app` owns its own dataset store, so
tests and embedded servers never share state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dataloom import __version__
from dataloom.analysis import analyze, analyze_columns, extract_columns
from dataloom.api.chat import router as chat_router
from dataloom.api.deps import get_app_settings, get_dataset, get_store, lookup_dataset
from dataloom.config import Settings, get_settings
from dataloom.core.loader import Dataset, DatasetLoadError, dataset_from_rows, load_dataset
from dataloom.core.store import DatasetStore
from dataloom.visualization import create_group_comparison_plot

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models
class RowsUploadRequest(BaseModel):
    """Request body for uploading already decoded rows."""

    rows: list[dict[str, Any]] = Field(..., description="Row objects")
    columns: list[str] | None = Field(
        default=None, description="Column order (defaults to keys of the first row)"
    )
    name: str = Field(default="dataset", description="Dataset display name")


class DatasetResponse(BaseModel):
    """A stored dataset."""

    dataset_id: str
    dataset: dict[str, Any]


class AnalysisRequest(BaseModel):
    """Request for a group comparison on a stored dataset."""

    dataset_id: str = Field(..., description="Id returned by the upload endpoint")
    numeric_column: str = Field(..., description="Column holding the measurements")
    group_column: str = Field(..., description="Column holding the group labels")
    groups: list[str] | None = Field(
        default=None, description="Restrict the tests to these groups, in order"
    )
    include_plot: bool = Field(default=False, description="Attach a comparison plot")
    plot_type: Literal["box", "violin"] = Field(default="box", description="Plot style")


class RawAnalysisRequest(BaseModel):
    """Request for a group comparison on bare arrays."""

    numeric_values: list[float] = Field(..., description="Numeric values, one per row")
    group_labels: list[Any] = Field(..., description="Group label per row")
    groups: list[str] | None = Field(
        default=None, description="Restrict the tests to these groups, in order"
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    dataset_count: int


class ApiStatusResponse(BaseModel):
    """API status response including key availability."""

    has_server_key: bool = Field(
        description="Whether the server has an LLM API key configured"
    )
    provider: str | None = Field(
        default=None, description="Provider used with the server key"
    )


def _store_dataset(store: DatasetStore, dataset: Dataset) -> DatasetResponse:
    dataset_id = store.add(dataset)
    return DatasetResponse(dataset_id=dataset_id, dataset=dataset.to_dict())


# Endpoints
@router.get("/health", response_model=HealthResponse)
async def health_check(store: DatasetStore = Depends(get_store)) -> HealthResponse:
    """Check API health."""
    return HealthResponse(status="healthy", version=__version__, dataset_count=len(store))


@router.get("/api/status", response_model=ApiStatusResponse)
async def api_status(settings: Settings = Depends(get_app_settings)) -> ApiStatusResponse:
    """Check if server has an LLM key configured.

    This allows the frontend to know if users need to provide their own key.
    """
    if settings.anthropic_api_key:
        return ApiStatusResponse(has_server_key=True, provider="anthropic")
    if settings.openrouter_api_key:
        return ApiStatusResponse(has_server_key=True, provider="openrouter")
    return ApiStatusResponse(has_server_key=False)


@router.post("/datasets", response_model=DatasetResponse)
async def upload_dataset(
    file: UploadFile = File(...),
    store: DatasetStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> DatasetResponse:
    """Upload a CSV or Excel file."""
    content = await file.read()

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit",
        )

    try:
        dataset = load_dataset(
            content,
            name=file.filename,
            preview_rows=settings.preview_rows,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except Exception as e:
        logger.exception("Dataset upload failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e

    return _store_dataset(store, dataset)


@router.post("/datasets/rows", response_model=DatasetResponse)
async def upload_rows(
    request: RowsUploadRequest,
    store: DatasetStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> DatasetResponse:
    """Store rows that were decoded by the client."""
    try:
        dataset = dataset_from_rows(
            request.rows,
            request.columns,
            name=request.name,
            preview_rows=settings.preview_rows,
        )
    except DatasetLoadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return _store_dataset(store, dataset)


@router.get("/datasets")
async def list_datasets(store: DatasetStore = Depends(get_store)) -> dict[str, Any]:
    """List stored datasets."""
    datasets = store.list()
    return {"datasets": datasets, "count": len(datasets)}


@router.get("/datasets/{dataset_id}")
async def get_dataset_info(dataset: Dataset = Depends(get_dataset)) -> dict[str, Any]:
    """Get a stored dataset's columns, preview and summary."""
    return dataset.to_dict()


@router.get("/datasets/{dataset_id}/profile")
async def get_dataset_profile(dataset: Dataset = Depends(get_dataset)) -> dict[str, Any]:
    """Get the inferred column types and summary statistics."""
    return dataset.profile.to_dict()


@router.delete("/datasets/{dataset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dataset(
    dataset_id: str,
    store: DatasetStore = Depends(get_store),
) -> None:
    """Remove a stored dataset."""
    lookup_dataset(store, dataset_id)
    store.remove(dataset_id)


@router.post("/analysis")
async def run_group_analysis(
    request: AnalysisRequest,
    store: DatasetStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Compare a numeric column across the groups of a categorical column."""
    dataset = lookup_dataset(store, request.dataset_id)

    try:
        report = analyze_columns(
            dataset.rows,
            request.numeric_column,
            request.group_column,
            groups_to_compare=request.groups,
            columns=dataset.columns,
            equal_var=settings.ttest_equal_var,
            alpha=settings.significance_level,
        )
        response = report.to_dict()

        if request.include_plot:
            values, labels = extract_columns(
                dataset.rows, request.numeric_column, request.group_column
            )
            plot = create_group_comparison_plot(
                values,
                labels,
                request.numeric_column,
                request.group_column,
                plot_type=request.plot_type,
                groups=request.groups,
            )
            response["plot_json"] = plot.to_json()

        return response

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except Exception as e:
        logger.exception("Group analysis failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e


@router.post("/analysis/raw")
async def run_raw_analysis(
    request: RawAnalysisRequest,
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Compare bare numeric values across positional group labels."""
    try:
        report = analyze(
            request.numeric_values,
            request.group_labels,
            groups_to_compare=request.groups,
            equal_var=settings.ttest_equal_var,
            alpha=settings.significance_level,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return report.to_dict()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build a DataLoom API application.

    Args:
        settings: Settings to serve with (defaults to the process settings)

    Returns:
        FastAPI application with its own empty dataset store
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info(f"Starting DataLoom API ({settings.environment})")
        yield
        logger.info(f"Shutting down DataLoom API, dropping {len(app.state.store)} datasets")
        app.state.store.clear()

    app = FastAPI(
        title="DataLoom API",
        description="Dataset profiling, group comparison statistics and data chat",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = DatasetStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.include_router(chat_router)

    return app


app = create_app()
