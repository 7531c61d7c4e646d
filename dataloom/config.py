"""Configuration management for DataLoom.

Uses pydantic-settings for type-safe environment variable loading.
Every setting can be overridden with a ``DATALOOM_`` prefixed variable.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DATALOOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM API Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key for dataset insights",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use",
    )

    # OpenRouter Configuration (free tier fallback)
    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key for free tier fallback",
    )
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash:free",
        description="Default free model on OpenRouter",
    )
    max_tokens_per_request: int = Field(
        default=4096,
        description="Maximum tokens per insight completion",
    )

    # Application Settings
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Analysis Settings
    significance_level: float = Field(
        default=0.05,
        gt=0.0,
        lt=1.0,
        description="p-value threshold below which a test is significant",
    )
    ttest_equal_var: bool = Field(
        default=True,
        description="Use the pooled-variance t-test (False selects Welch's test)",
    )

    # Dataset Settings
    preview_rows: int = Field(
        default=10,
        ge=0,
        description="Number of rows kept as the dataset preview",
    )
    sample_rows_for_llm: int = Field(
        default=3,
        ge=0,
        description="Number of rows included in insight prompts",
    )
    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Largest accepted upload in bytes",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
