"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_SUPPORTED_LANGUAGES = {"en", "it"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "MiniMinds AI Gateway"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator("default_language")
    @classmethod
    def validate_default_language(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _SUPPORTED_LANGUAGES:
            raise ValueError(f"default_language must be one of {_SUPPORTED_LANGUAGES}, got '{v}'")
        return lower

    @field_validator("escalation_durability")
    @classmethod
    def validate_escalation_durability(cls, v: str) -> str:
        lower = v.lower()
        if lower not in ("best_effort", "durable"):
            raise ValueError(
                f"escalation_durability must be 'best_effort' or 'durable', got '{v}'"
            )
        return lower

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in ("file", "memory"):
            raise ValueError(f"storage_backend must be 'file' or 'memory', got '{v}'")
        return lower

    @model_validator(mode="after")
    def validate_positive_values(self) -> "Settings":
        for field_name in (
            "request_timeout",
            "audit_flush_interval_seconds",
            "audit_queue_capacity",
            "session_ttl_seconds",
            "max_sessions",
            "session_cleanup_interval_seconds",
        ):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self

    # Remote services
    responder_url: str = "http://localhost:5000/api/AIAssistant"
    audit_api_url: str = "http://localhost:5000/api/AIAudit"
    request_timeout: float = 30.0

    # Audit durability
    audit_queue_capacity: int = 100
    audit_flush_interval_seconds: float = 300.0
    escalation_durability: str = "best_effort"

    # Local durable store
    storage_backend: str = "file"
    storage_dir: str = "./runtime/storage"
    storage_namespace: str = "miniminds"
    audit_queue_key: str = "ai_audit_queue"
    escalation_queue_key: str = "ai_escalation_queue"

    # Localization
    default_language: str = "it"

    # Human contact (EU AI Act transparency)
    support_email: str = "support@miniminds.it"
    support_phone: str | None = "+39 051 000 0000"

    # Sessions
    max_history_turns: int = 50
    session_ttl_seconds: int = 3600
    max_sessions: int = 1000
    session_cleanup_interval_seconds: float = 600.0

    # CORS
    allowed_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
