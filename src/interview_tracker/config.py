"""Configuration management for Interview Tracker."""

from typing import Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Keys
    openai_api_key: Optional[str] = Field(None, description="OpenAI API key")
    groq_api_key: Optional[str] = Field(None, description="Groq API key")

    # AI Backend Configuration
    ai_provider: str = Field("openai", description="Text generation provider (openai/groq/none)")
    openai_model: str = Field("gpt-3.5-turbo", description="OpenAI chat model")
    groq_model: str = Field("llama-3.1-70b-versatile", description="Groq chat model")
    openai_base_url: Optional[str] = Field(None, description="Override for OpenAI-compatible endpoints")
    ai_temperature: float = Field(0.7, description="Sampling temperature")
    ai_max_tokens: int = Field(2000, description="Maximum tokens per completion")
    ai_timeout_seconds: float = Field(30.0, description="Timeout for a single AI backend call")

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")

    # Server Configuration
    host: str = Field("0.0.0.0", description="Server host")
    port: int = Field(8000, description="Server port")
    reload: bool = Field(False, description="Enable auto-reload")
    cors_origins: list[str] = Field(["*"], description="CORS allowed origins")

    # Pagination
    default_page_size: int = Field(10, description="Default page size for session listings")
    activity_page_size: int = Field(20, description="Default page size for activity listings")


class AIProviderConfig(BaseModel):
    """Explicit AI provider selection handed to the gateway."""
    provider: str = Field("none", description="openai, groq or none")
    model: Optional[str] = Field(None, description="Chat model name")
    api_key: Optional[str] = Field(None, description="Provider API key")
    base_url: Optional[str] = Field(None, description="Custom API base URL")
    temperature: float = Field(0.7, description="Sampling temperature")
    max_tokens: int = Field(2000, description="Maximum tokens per completion")
    timeout_seconds: float = Field(30.0, description="Per-call timeout in seconds")

    @property
    def enabled(self) -> bool:
        return self.provider != "none" and bool(self.api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIProviderConfig":
        """Build provider config from application settings."""
        provider = settings.ai_provider.lower()
        if provider == "groq":
            return cls(
                provider="groq",
                model=settings.groq_model,
                api_key=settings.groq_api_key,
                temperature=settings.ai_temperature,
                max_tokens=settings.ai_max_tokens,
                timeout_seconds=settings.ai_timeout_seconds,
            )
        if provider == "openai":
            return cls(
                provider="openai",
                model=settings.openai_model,
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                temperature=settings.ai_temperature,
                max_tokens=settings.ai_max_tokens,
                timeout_seconds=settings.ai_timeout_seconds,
            )
        return cls(provider="none", timeout_seconds=settings.ai_timeout_seconds)


# Global settings instance
settings = Settings()
