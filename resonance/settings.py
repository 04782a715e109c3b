"""Global configuration using pydantic settings management.

Values are loaded from environment variables (or an .env file) and
exposed via the singleton `settings` instance.
"""

from __future__ import annotations

from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from env or defaults."""

    # Gemini API (AI Studio key) or Vertex AI
    api_key: str = Field(default="", validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
    use_vertexai: bool = Field(default=False, alias="GOOGLE_GENAI_USE_VERTEXAI")
    project_id: str = Field(default="", alias="GOOGLE_CLOUD_PROJECT")
    model_location: str = Field(default="global", alias="GCP_MODEL_LOCATION")

    # Models
    fast_model: str = Field(default="gemini-3-flash-preview", alias="RESONANCE_FAST_MODEL")
    deep_model: str = Field(default="gemini-3-pro-preview", alias="RESONANCE_DEEP_MODEL")
    thinking_budget: int = Field(default=32768, alias="RESONANCE_THINKING_BUDGET", gt=0)

    # CORS - accept comma-separated string
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated CORS origins to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


settings = Settings()
