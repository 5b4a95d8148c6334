"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(default="")
    supabase_service_key: SecretStr = Field(default=SecretStr(""))
    supabase_timeout: float = Field(default=30.0)

    # LLM (OpenAI-compatible endpoint; Groq by default, OpenRouter also works)
    llm_api_key: SecretStr = Field(default=SecretStr(""))
    llm_base_url: Optional[str] = Field(default="https://api.groq.com/openai/v1")
    llm_model: str = Field(default="llama-3.3-70b-versatile")

    # SerpAPI - Google Jobs
    serpapi_api_key: SecretStr = Field(default=SecretStr(""))
    serpapi_base_url: str = Field(default="https://serpapi.com/search.json")
    serpapi_timeout: float = Field(default=60.0)

    # Tavily - web search for interview research
    tavily_api_key: SecretStr = Field(default=SecretStr(""))
    tavily_base_url: str = Field(default="https://api.tavily.com")
    tavily_timeout: float = Field(default=60.0)

    # Matcher settings
    matcher_max_concurrency: int = Field(
        default=5, description="Explanation requests in flight at once (1 = sequential)"
    )

    # Discovery settings
    discovery_default_location: str = Field(default="United States")
    discovery_max_results: int = Field(default=20)

    # Upload settings
    upload_max_size_mb: int = Field(default=10)
    upload_min_size_bytes: int = Field(default=1024)

    # API
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @property
    def llm_configured(self) -> bool:
        return bool(self.llm_api_key.get_secret_value())

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
