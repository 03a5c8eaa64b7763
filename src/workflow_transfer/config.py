"""Application settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Workflow Transfer"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    source_url: str | None = None
    source_api_key: str | None = None
    target_url: str | None = None
    target_api_key: str | None = None
    api_base_path: str = "/api/v1"
    api_key_header: str = "X-N8N-API-KEY"
    http_timeout_seconds: float = 30.0
    http_max_retries: int = 3
    http_retry_base_delay_seconds: float = 1.0
    http_retry_max_jitter_seconds: float = 1.0
    reports_dir: str = "reports"
    fuzzy_threshold: float = 0.85
    install_signal_handlers: bool = True
    discover_plugins: bool = False

    @model_validator(mode="after")
    def validate_transfer_settings(self) -> "Settings":
        """Ensure HTTP and plugin settings are in range."""

        if self.http_timeout_seconds <= 0:
            raise ValueError("WORKFLOW_TRANSFER_HTTP_TIMEOUT_SECONDS must be > 0.")
        if self.http_max_retries < 1:
            raise ValueError("WORKFLOW_TRANSFER_HTTP_MAX_RETRIES must be >= 1.")
        if self.http_retry_base_delay_seconds < 0:
            raise ValueError("WORKFLOW_TRANSFER_HTTP_RETRY_BASE_DELAY_SECONDS must be >= 0.")
        if self.http_retry_max_jitter_seconds < 0:
            raise ValueError("WORKFLOW_TRANSFER_HTTP_RETRY_MAX_JITTER_SECONDS must be >= 0.")
        if not 0 <= self.fuzzy_threshold <= 1:
            raise ValueError("WORKFLOW_TRANSFER_FUZZY_THRESHOLD must be between 0 and 1.")
        if not self.api_key_header.strip():
            raise ValueError("WORKFLOW_TRANSFER_API_KEY_HEADER must not be empty.")
        if self.port < 1:
            raise ValueError("WORKFLOW_TRANSFER_PORT must be >= 1.")
        return self

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_TRANSFER_",
        env_file=".env",
        extra="ignore",
    )


__all__ = ["Settings"]
