"""Chat endpoint: natural-language questions about a stored dataset.

The caller may supply their own LLM key in the ``X-API-Key`` header
(Anthropic ``sk-ant-...`` or OpenRouter ``sk-or-...``); otherwise the server's
configured key is used.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from dataloom.api.deps import get_app_settings, get_store, lookup_dataset
from dataloom.config import Settings
from dataloom.core.store import DatasetStore
from dataloom.llm import InsightError, analyze_query, get_provider
from dataloom.visualization import create_chart

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    dataset_id: str = Field(..., description="Dataset the question is about")
    query: str = Field(..., min_length=1, description="Question in plain language")


class ChatResponse(BaseModel):
    """Answer to a chat question."""

    textSummary: str
    visualizationType: str | None = None
    chartData: list[dict[str, Any]] | None = None
    tableData: list[dict[str, Any]] | None = None
    plot_json: str | None = None


@router.post("/", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    store: DatasetStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> ChatResponse:
    """Answer a question about a dataset."""
    dataset = lookup_dataset(store, request.dataset_id)

    try:
        provider = get_provider(x_api_key, settings)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"API key required. {e}",
        ) from e

    try:
        result = await analyze_query(dataset, request.query, provider, settings)
    except InsightError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    plot_json = None
    if result.has_chart:
        try:
            plot_json = create_chart(
                result.visualization_type, result.chart_data, title=request.query
            ).to_json()
        except ValueError:
            logger.warning("Model returned chart data that could not be drawn")

    return ChatResponse(**result.to_dict(), plot_json=plot_json)
