"""
Application configuration settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PLACEHOLDER_KEY_MARKERS = ("dummy", "your-", "changeme")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"], case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field("PitchDeck AI", alias="APP_NAME")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # OpenAI (cloud-keyed backend)
    openai_api_key: str = Field("dummy-key-for-test", alias="OPENAI_API_KEY")
    openai_enabled: bool = Field(True, alias="OPENAI_ENABLED")
    openai_base_url: Optional[str] = Field(None, alias="OPENAI_BASE_URL")
    openai_default_model: str = Field("gpt-4", alias="OPENAI_DEFAULT_MODEL")
    openai_fallback_model: str = Field("gpt-3.5-turbo", alias="OPENAI_FALLBACK_MODEL")

    # Groq (rate-limited cloud backend, OpenAI-compatible API)
    groq_api_key: Optional[str] = Field(None, alias="GROQ_API_KEY")
    groq_enabled: bool = Field(False, alias="GROQ_ENABLED")
    groq_base_url: str = Field("https://api.groq.com/openai/v1", alias="GROQ_BASE_URL")
    groq_default_model: str = Field("llama3-70b-8192", alias="GROQ_DEFAULT_MODEL")
    groq_fallback_model: str = Field("llama3-8b-8192", alias="GROQ_FALLBACK_MODEL")

    # Ollama (local backend)
    ollama_base_url: str = Field("http://localhost:11434", alias="OLLAMA_BASE_URL")
    ollama_enabled: bool = Field(False, alias="OLLAMA_ENABLED")
    ollama_default_model: str = Field("llama3.1:8b", alias="OLLAMA_DEFAULT_MODEL")
    ollama_fallback_model: str = Field("llama3.1:8b", alias="OLLAMA_FALLBACK_MODEL")
    ollama_auto_pull: bool = Field(False, alias="OLLAMA_AUTO_PULL")

    # Generation
    ai_generation_timeout: float = Field(60.0, alias="AI_GENERATION_TIMEOUT")
    ai_chat_timeout: float = Field(30.0, alias="AI_CHAT_TIMEOUT")
    ai_status_timeout: float = Field(5.0, alias="AI_STATUS_TIMEOUT")
    ai_retry_backoff: bool = Field(True, alias="AI_RETRY_BACKOFF")

    # Confidence baselines
    confidence_baseline_openai: float = Field(0.7, alias="CONFIDENCE_BASELINE_OPENAI")
    confidence_baseline_groq: float = Field(0.6, alias="CONFIDENCE_BASELINE_GROQ")
    confidence_baseline_ollama: float = Field(0.4, alias="CONFIDENCE_BASELINE_OLLAMA")

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # Observability
    prometheus_metrics_enabled: bool = Field(True, alias="PROMETHEUS_METRICS_ENABLED")
    prometheus_metrics_port: int = Field(9090, alias="PROMETHEUS_METRICS_PORT")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> list[str]:
        """Parse CORS origins from string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def is_testing(self) -> bool:
        return self.environment.lower() == "testing"


def is_placeholder_key(api_key: Optional[str]) -> bool:
    """True for a missing key or one of the dummy values shipped in examples."""
    if not api_key or not api_key.strip():
        return True
    lowered = api_key.lower()
    return any(marker in lowered for marker in PLACEHOLDER_KEY_MARKERS)


_settings = None


def get_settings() -> Settings:
    """Get settings instance (useful for dependency injection)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
