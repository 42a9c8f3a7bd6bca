"""
Configuration management using Pydantic BaseSettings.

Loads settings from environment variables and .env files with type validation
and sensible defaults. An empty signing secret is a supported development
configuration and never prevents startup.
"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Application configuration settings.

    Loads from environment variables and .env file. All settings are typed
    and validated with sensible defaults. Build one instance at startup and
    pass it to create_app(); nothing reads the environment after that.
    """

    # ============================================================================
    # Payments Provider (Stripe)
    # ============================================================================

    stripe_secret_key: str = Field(
        default="",
        description="Stripe API key used for checkout and portal sessions"
    )

    stripe_webhook_secret: str = Field(
        default="",
        description="Secret for verifying Stripe webhook signatures"
    )

    stripe_timestamp_tolerance: int = Field(
        default=300,
        description="Maximum age in seconds of a timestamped Stripe signature"
    )

    # ============================================================================
    # Source Hosting Provider (GitHub)
    # ============================================================================

    github_webhook_secret: str = Field(
        default="",
        description="Secret for verifying GitHub webhook signatures"
    )

    # ============================================================================
    # Verification Policy
    # ============================================================================

    allow_unsigned_webhooks: bool = Field(
        default=True,
        description="Accept webhooks without verification when a signing secret is unset"
    )

    environment: Literal["development", "production"] = Field(
        default="development",
        description="Deployment environment (development or production)"
    )

    # ============================================================================
    # Server Configuration
    # ============================================================================

    host: str = Field(
        default="0.0.0.0",
        description="Server host to bind to"
    )

    port: int = Field(
        default=3000,
        description="Server port to listen on"
    )

    api_base_url: str = Field(
        default="http://localhost:3003",
        description="Base URL of the API tier the web tier forwards to"
    )

    provider_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for outbound provider and API tier calls"
    )

    # ============================================================================
    # Logging Configuration
    # ============================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # ============================================================================
    # Validation Methods
    # ============================================================================

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Normalize the environment name before the literal check."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is within valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("provider_timeout")
    @classmethod
    def validate_provider_timeout(cls, v: float) -> float:
        """Outbound calls must always be bounded."""
        if v <= 0:
            raise ValueError("provider_timeout must be greater than 0")
        return v

    @field_validator("stripe_timestamp_tolerance")
    @classmethod
    def validate_timestamp_tolerance(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("stripe_timestamp_tolerance must be greater than 0")
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate that the API tier URL is http(s) and drop a trailing slash."""
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("api_base_url must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    # ============================================================================
    # Helpers
    # ============================================================================

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def webhook_secrets_configured(self) -> dict:
        """
        Report which signing secrets are present.

        Returns booleans only, never the secret values.
        """
        return {
            "payments": bool(self.stripe_webhook_secret),
            "source_hosting": bool(self.github_webhook_secret),
        }

    # ============================================================================
    # Pydantic Settings Configuration
    # ============================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )
