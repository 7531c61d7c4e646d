"""LLM layer for natural-language questions about datasets.

Supports Anthropic (direct) and OpenRouter (free tier fallback).
"""

from dataloom.llm.insights import (
    InsightResult,
    analyze_query,
    build_analysis_prompt,
    parse_analysis_response,
)
from dataloom.llm.providers import (
    AnthropicProvider,
    InsightError,
    LLMProvider,
    OpenRouterProvider,
    get_provider,
)

__all__ = [
    "AnthropicProvider",
    "InsightError",
    "InsightResult",
    "LLMProvider",
    "OpenRouterProvider",
    "analyze_query",
    "build_analysis_prompt",
    "get_provider",
    "parse_analysis_response",
]
