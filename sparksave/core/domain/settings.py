from typing import Literal
from pydantic import BaseModel, Field

class SystemSettings(BaseModel):
    """
    Global system configuration settings.
    """
    plan_catalog_type: Literal["yaml", "mongo"] = Field(default="yaml", description="Plan catalog backend")
    memory_bank_type: Literal["mongo", "none"] = Field(default="none", description="Usage/preference/history store backend")

    # YAML Catalog
    plans_file: str = Field(default="plans.yaml", description="Path to plan catalog file")

    # Mongo Memory Bank
    mongo_url: str = Field(default="mongodb://localhost:27017", description="MongoDB Connection URL")
    mongo_db_name: str = Field(default="sparksave", description="MongoDB Database Name")

    # Explanation Service
    openrouter_api_key: str | None = Field(default=None, description="API key; explanations fall back to templates when unset")
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1", description="OpenAI-compatible API base URL")
    openrouter_model: str = Field(default="openai/gpt-4-turbo", description="Chat completion model")
    explainer_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    explainer_max_attempts: int = Field(default=2, ge=1, description="Attempts before falling back")
    explainer_backoff_seconds: float = Field(default=1.0, ge=0, description="Delay multiplier between attempts")

    # Engine
    default_top_n: int = Field(default=3, ge=1, description="Number of recommendations returned")

    @property
    def explanations_enabled(self) -> bool:
        """Whether an explanation service is configured."""
        return bool(self.openrouter_api_key)
