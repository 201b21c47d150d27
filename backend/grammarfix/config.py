"""Application configuration."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GRAMMARFIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Development mode: plain-text logs, API docs enabled, error details exposed
    dev_mode: bool = True

    # LanguageTool (public API or a self-hosted server)
    languagetool_url: str = "https://api.languagetool.org/v2/check"
    languagetool_username: str = ""
    languagetool_api_key: str = ""
    default_language: str = "en-US"
    mother_tongue: str = ""
    disabled_rules: list[str] = []
    check_level: str = "default"  # "default" | "picky"

    # HTTP client
    request_timeout_seconds: float = 20.0
    connect_timeout_seconds: float = 5.0
    retry_attempts: int = 2
    retry_backoff_seconds: float = 0.5  # first wait between attempts, doubles each retry

    # Circuit Breaker (for the grammar service)
    circuit_breaker_failure_threshold: int = 3
    circuit_breaker_cooldown_seconds: int = 60

    # Corrections
    auto_fix: bool = True
    max_replacements: int = 0  # 0 keeps every candidate
    max_text_chars: int = 20000  # public API limit per request

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Logging
    log_level: str = "info"

    @model_validator(mode="after")
    def _validate(self) -> "Settings":
        if self.languagetool_api_key and not self.languagetool_username:
            raise ValueError(
                "GRAMMARFIX_LANGUAGETOOL_USERNAME must be set when an API key is configured"
            )
        if self.request_timeout_seconds <= 0 or self.connect_timeout_seconds <= 0:
            raise ValueError("Timeouts must be positive")
        if self.retry_attempts < 1:
            raise ValueError("GRAMMARFIX_RETRY_ATTEMPTS must be at least 1")
        if self.retry_backoff_seconds < 0:
            raise ValueError("GRAMMARFIX_RETRY_BACKOFF_SECONDS must not be negative")
        return self


settings = Settings()
