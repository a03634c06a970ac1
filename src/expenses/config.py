"""Configuration management for the expense tracker.

Supports three modes:
- Production: Real extraction, advisory and embedding APIs
- Mock: Deterministic fake providers for demos and testing
- Hybrid: Real embeddings with a mock advisor (cheap end-to-end testing)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RunMode(str, Enum):
    """Provider execution mode."""

    PRODUCTION = "production"
    MOCK = "mock"
    HYBRID = "hybrid"


class ExpenseConfig(BaseSettings):
    """Main expense tracker configuration.

    All settings can be overridden via environment variables with the VISUALFIN_ prefix.
    Example: VISUALFIN_MODE=production, VISUALFIN_OPENAI_API_KEY=sk-...
    """

    model_config = {"env_prefix": "VISUALFIN_"}

    # Core mode
    mode: RunMode = Field(default=RunMode.MOCK, description="Provider execution mode")

    # Extraction / advisory model
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    llm_model: str = Field(default="gpt-4o-mini", description="Multimodal model name")
    llm_temperature: float = Field(default=0.2, description="Model temperature")

    # Embedding settings
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Embedding model name"
    )
    embedding_dimensions: int = Field(default=384, description="Embedding vector dimensions")

    # Retrieval settings
    top_k: int = Field(default=3, ge=0, description="Number of similar expenses to retrieve")
    strict_dimensions: bool = Field(
        default=False,
        description="Raise on embedding length mismatch instead of scoring it 0",
    )

    # Storage
    store_path: str = Field(
        default=".visualfin/expenses.json", description="Expense history JSON file"
    )
    seed_sample_data: bool = Field(
        default=True, description="Populate an empty history with sample expenses"
    )
    default_currency: str = Field(default="USD", description="Currency when none is extracted")

    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_pending_analyses: int = Field(
        default=100, ge=1, description="Unconfirmed analyses the API keeps before dropping the oldest"
    )


class MockConfig:
    """Configuration presets for mock/demo mode.

    No API keys are needed; every provider is deterministic.
    """

    @staticmethod
    def default() -> ExpenseConfig:
        """Create a default mock configuration."""
        return ExpenseConfig(mode=RunMode.MOCK)

    @staticmethod
    def with_overrides(**kwargs: object) -> ExpenseConfig:
        """Create mock config with specific overrides."""
        defaults = {"mode": RunMode.MOCK}
        defaults.update(kwargs)
        return ExpenseConfig(**defaults)  # type: ignore[arg-type]
