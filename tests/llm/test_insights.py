"""Tests for natural-language dataset questions."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from dataloom.config import Settings
from dataloom.core.loader import Dataset, dataset_from_rows
from dataloom.llm.insights import (
    DEFAULT_SUMMARY,
    SYSTEM_PROMPT,
    InsightResult,
    analyze_query,
    build_analysis_prompt,
    parse_analysis_response,
)
from dataloom.llm.providers import InsightError


@pytest.fixture
def sales_dataset(sales_rows: list[dict], sales_columns: list[str]) -> Dataset:
    """Create a dataset from the sales rows."""
    return dataset_from_rows(sales_rows, sales_columns, name="sales.csv")


@pytest.fixture
def mock_provider() -> MagicMock:
    """Create a provider whose completion is mocked."""
    provider = MagicMock()
    provider.name = "mock"
    provider.model = "mock-model"
    provider.complete = AsyncMock(
        return_value=json.dumps({
            "textSummary": "North sells the most.",
            "visualizationType": "bar",
            "chartData": [{"region": "North", "sales": 375}, {"region": "South", "sales": 290}],
        })
    )
    return provider


class TestBuildAnalysisPrompt:
    """Tests for prompt construction."""

    def test_contains_dataset_context(self, sales_dataset: Dataset) -> None:
        """Test that the prompt describes the dataset and the question."""
        prompt = build_analysis_prompt(sales_dataset, "Which region sells most?")

        assert "Columns: date, region, product, sales" in prompt
        assert "Number of rows: 10" in prompt
        assert "User Query: Which region sells most?" in prompt
        assert '"textSummary"' in prompt
        assert "Total Records: 10" in prompt

    def test_sample_rows(self, sales_dataset: Dataset) -> None:
        """Test that only the leading rows are included."""
        prompt = build_analysis_prompt(sales_dataset, "q", sample_rows=2)

        assert "first 2 rows" in prompt
        assert "2024-01-12" in prompt
        assert "2024-01-19" not in prompt


class TestParseAnalysisResponse:
    """Tests for reply parsing."""

    def test_plain_json(self) -> None:
        """Test parsing a bare JSON object."""
        result = parse_analysis_response(
            '{"textSummary": "Done", "visualizationType": "pie", '
            '"chartData": [{"name": "A", "value": 3}]}'
        )

        assert result.text_summary == "Done"
        assert result.visualization_type == "pie"
        assert result.chart_data == [{"name": "A", "value": 3}]
        assert result.has_chart

    def test_fenced_json(self) -> None:
        """Test that markdown code fences are removed."""
        text = '```json\n{"textSummary": "Fenced", "visualizationType": null}\n```'

        result = parse_analysis_response(text)

        assert result.text_summary == "Fenced"
        assert result.visualization_type is None
        assert not result.has_chart

    def test_missing_summary(self) -> None:
        """Test the default summary."""
        assert parse_analysis_response("{}").text_summary == DEFAULT_SUMMARY

    def test_prose_reply(self) -> None:
        """Test that a non-JSON reply becomes the summary."""
        result = parse_analysis_response("  Sales peak in January.  ")

        assert result.text_summary == "Sales peak in January."
        assert result.chart_data is None

    def test_empty_reply(self) -> None:
        """Test that an empty reply still yields a summary."""
        assert "unexpected" in parse_analysis_response("").text_summary

    def test_unsupported_chart_type(self) -> None:
        """Test that only bar, line and pie charts are accepted."""
        result = parse_analysis_response(
            '{"textSummary": "x", "visualizationType": "scatter", "chartData": [{"a": 1}]}'
        )

        assert result.visualization_type is None
        assert not result.has_chart

    def test_chart_type_case(self) -> None:
        """Test that chart types are matched case-insensitively."""
        result = parse_analysis_response('{"visualizationType": "Line"}')
        assert result.visualization_type == "line"

    def test_table_data(self) -> None:
        """Test that table data is passed through."""
        result = parse_analysis_response('{"textSummary": "t", "tableData": [{"a": 1}, 2]}')
        assert result.table_data == [{"a": 1}]

    def test_to_dict(self) -> None:
        """Test the camelCase dictionary layout."""
        data = InsightResult(text_summary="s").to_dict()

        assert data == {
            "textSummary": "s",
            "visualizationType": None,
            "chartData": None,
            "tableData": None,
        }


class TestAnalyzeQuery:
    """Tests for the question orchestration."""

    def test_analyze_query(self, sales_dataset: Dataset, mock_provider: MagicMock) -> None:
        """Test a full question with a mocked provider."""
        settings = Settings(sample_rows_for_llm=1, max_tokens_per_request=512)

        result = asyncio.run(
            analyze_query(sales_dataset, "Which region sells most?", mock_provider, settings)
        )

        assert result.text_summary == "North sells the most."
        assert result.visualization_type == "bar"
        args, kwargs = mock_provider.complete.call_args
        assert args[1] == SYSTEM_PROMPT
        assert "first 1 rows" in args[0]
        assert kwargs["max_tokens"] == 512

    def test_blank_query(self, sales_dataset: Dataset, mock_provider: MagicMock) -> None:
        """Test that blank questions are rejected before calling the model."""
        with pytest.raises(ValueError, match="must not be empty"):
            asyncio.run(analyze_query(sales_dataset, "   ", mock_provider, Settings()))

        mock_provider.complete.assert_not_called()

    def test_provider_error_propagates(
        self, sales_dataset: Dataset, mock_provider: MagicMock
    ) -> None:
        """Test that backend failures reach the caller."""
        mock_provider.complete.side_effect = InsightError("down", status_code=500)

        with pytest.raises(InsightError):
            asyncio.run(analyze_query(sales_dataset, "q", mock_provider, Settings()))
