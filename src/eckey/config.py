"""
eckey Configuration Module

Provides centralized configuration with:
- Environment variable loading (ECKEY_ prefix)
- Type validation via Pydantic
- Development overrides via .env file

Only ambient behaviour is configurable. Certificate serial number, validity
window and signature algorithm are fixed and deliberately not exposed here.
"""

from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigValidationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ECKeySettings(BaseSettings):
    """
    eckey settings.

    Loads from environment variables with the ECKEY_ prefix.

    Usage:
        from eckey.config import settings

        subject = settings.DEFAULT_CERT_SUBJECT
    """
    model_config = SettingsConfigDict(
        env_prefix='ECKEY_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # ==========================================================================
    # GENERAL
    # ==========================================================================
    ENVIRONMENT: str = Field(default="development", description="Runtime environment: development, staging, production")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    LOG_JSON: Optional[bool] = Field(default=None, description="Force JSON log output (default: only in production)")

    # ==========================================================================
    # CERTIFICATES
    # ==========================================================================
    DEFAULT_CERT_SUBJECT: str = Field(default="/CN=self", description="Subject used for self-signed certificates when the caller gives none")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("DEFAULT_CERT_SUBJECT")
    @classmethod
    def _check_subject(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def use_json_logs(self) -> bool:
        if self.LOG_JSON is not None:
            return self.LOG_JSON
        return self.is_production()


def load_settings(**overrides) -> ECKeySettings:
    """Build settings from the environment, translating validation failures."""
    try:
        return ECKeySettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise ConfigValidationError(config_key, first.get("msg", str(e))) from e


# Global settings instance
settings = load_settings()
