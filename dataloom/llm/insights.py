"""Natural-language questions about a dataset.

A question is answered in a single completion: the prompt carries the dataset
shape, its profile and a few sample rows, and asks the model for a JSON object

    {"textSummary": str, "visualizationType": "bar" | "line" | "pie" | null,
     "chartData": [...]}

The reply is parsed leniently. Models often wrap JSON in markdown fences or
answer in prose; prose becomes the summary and no chart is produced.

Example:
    >>> provider = get_provider(None, settings)
    >>> result = await analyze_query(dataset, "Which region sells most?", provider)
    >>> print(result.text_summary)
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from dataloom.config import Settings, get_settings

if TYPE_CHECKING:
    from dataloom.core.loader import Dataset
    from dataloom.llm.providers import LLMProvider

logger = logging.getLogger(__name__)

VISUALIZATION_TYPES = ("bar", "line", "pie")
DEFAULT_SUMMARY = "Analysis completed successfully."
UNEXPECTED_FORMAT_SUMMARY = "Analysis completed, but the response format was unexpected."

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)

SYSTEM_PROMPT = """You are DataLoom, a data analyst assistant.

You answer questions about a tabular dataset the user uploaded. You only see
the column names, a statistical summary and a few sample rows.

## Key Guidelines

1. Base every statement on the summary and sample rows provided.
2. Say so when a question cannot be answered from the available information.
3. Suggest a chart only when it helps; chartData must be a list of flat
   objects whose first key is the category or x value.
4. Return ONLY the JSON object, no markdown formatting or code blocks.
"""


@dataclass
class InsightResult:
    """Answer to a natural-language question about a dataset.

    Attributes:
        text_summary: Prose answer
        visualization_type: Suggested chart type (bar, line or pie), if any
        chart_data: Data points for the suggested chart
        table_data: Optional tabular data returned by the model
    """

    text_summary: str
    visualization_type: str | None = None
    chart_data: list[dict[str, Any]] | None = None
    table_data: list[dict[str, Any]] | None = None
    raw_response: str = field(default="", repr=False)

    @property
    def has_chart(self) -> bool:
        """Whether the result carries a drawable chart."""
        return self.visualization_type is not None and bool(self.chart_data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "textSummary": self.text_summary,
            "visualizationType": self.visualization_type,
            "chartData": self.chart_data,
            "tableData": self.table_data,
        }


def build_analysis_prompt(dataset: Dataset, query: str, sample_rows: int = 3) -> str:
    """Build the user prompt for a question about a dataset.

    Args:
        dataset: Dataset the question is about
        query: The user's question
        sample_rows: Number of leading rows to include verbatim

    Returns:
        Prompt text
    """
    sample = dataset.rows[:sample_rows]
    sample_json = json.dumps(sample, indent=2, default=str)

    return f"""Analyze this dataset and answer the query.

Dataset Information:
- Name: {dataset.name}
- Columns: {', '.join(dataset.columns)}
- Number of rows: {dataset.row_count}

Summary:
{dataset.profile.format_for_display()}

Sample data (first {len(sample)} rows):
{sample_json}

User Query: {query}

Respond with a JSON object containing these exact keys:
{{
  "textSummary": "A detailed explanation of the findings",
  "visualizationType": "bar" | "line" | "pie" | null,
  "chartData": []
}}
"""


def _as_records(value: Any) -> list[dict[str, Any]] | None:
    """Keep a list of objects, drop anything else."""
    if not isinstance(value, list):
        return None
    records = [item for item in value if isinstance(item, dict)]
    return records or None


def parse_analysis_response(text: str) -> InsightResult:
    """Parse a model reply into an InsightResult.

    Markdown code fences are removed before parsing. A reply that is not a
    JSON object is returned as the text summary with no chart.

    Args:
        text: Raw completion text

    Returns:
        InsightResult
    """
    cleaned = _FENCE_RE.sub("", text).strip()

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        payload = None

    if not isinstance(payload, dict):
        logger.warning(f"Insight response is not a JSON object: {cleaned[:200]!r}")
        return InsightResult(
            text_summary=cleaned or UNEXPECTED_FORMAT_SUMMARY,
            raw_response=text,
        )

    viz_type = payload.get("visualizationType")
    if isinstance(viz_type, str) and viz_type.lower() in VISUALIZATION_TYPES:
        viz_type = viz_type.lower()
    else:
        if viz_type is not None:
            logger.debug(f"Ignoring unsupported visualization type {viz_type!r}")
        viz_type = None

    summary = payload.get("textSummary")
    return InsightResult(
        text_summary=str(summary) if summary else DEFAULT_SUMMARY,
        visualization_type=viz_type,
        chart_data=_as_records(payload.get("chartData")),
        table_data=_as_records(payload.get("tableData")),
        raw_response=text,
    )


async def analyze_query(
    dataset: Dataset,
    query: str,
    provider: LLMProvider,
    settings: Settings | None = None,
) -> InsightResult:
    """Answer a natural-language question about a dataset.

    Args:
        dataset: Dataset the question is about
        query: The user's question
        provider: LLM backend
        settings: Settings (defaults to the process settings)

    Returns:
        InsightResult

    Raises:
        ValueError: If the query is blank
        InsightError: If the backend call fails
    """
    if not query.strip():
        raise ValueError("Query must not be empty")

    settings = settings or get_settings()
    prompt = build_analysis_prompt(dataset, query, settings.sample_rows_for_llm)

    logger.info(f"Asking {provider.name} ({provider.model}) about {dataset.name!r}")
    text = await provider.complete(
        prompt,
        SYSTEM_PROMPT,
        max_tokens=settings.max_tokens_per_request,
    )

    return parse_analysis_response(text)
