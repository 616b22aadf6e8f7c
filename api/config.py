"""
API Configuration Management

Provides centralized configuration handling for the scanning service,
including provider credentials, cache and storage settings, and the
default scan toggles applied when a request carries none.

Design Considerations:
- Environment-specific configuration profiles
- Provider API keys supplied as comma-separated lists
- Defaults mirror the browser extension's install defaults
"""

from enum import Enum
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from secure_inbox.config.scanner_config import SCANNER_CONFIG


class EnvironmentType(str, Enum):
    """Valid environment types for configuration context."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


def _split_csv(value) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class APISettings(BaseSettings):
    """
    API configuration settings with environment-specific defaults and validation.

    Loaded from the environment and an optional ``.env`` file.
    """
    # Environment Configuration
    ENVIRONMENT: EnvironmentType = Field(
        default=EnvironmentType.DEVELOPMENT,
        description="Runtime environment context"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_DIR: str = Field(
        default="",
        description="Directory for the log file; console only when empty"
    )

    # API Settings
    API_TITLE: str = Field(
        default="Secure Inbox API",
        description="API title for documentation"
    )
    API_DESCRIPTION: str = Field(
        default="Phishing and malicious link scoring for inbound email",
        description="API description for documentation"
    )
    API_VERSION: str = Field(
        default="1.0.0",
        description="API version"
    )

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed origins for CORS"
    )
    CORS_METHODS: str = Field(
        default="GET,POST,DELETE,OPTIONS",
        description="Comma-separated list of allowed methods for CORS"
    )

    # Reputation Providers
    SAFE_BROWSING_API_KEYS: str = Field(
        default="",
        description="Comma-separated Google Safe Browsing API keys, in rotation order"
    )
    VIRUSTOTAL_API_KEYS: str = Field(
        default="",
        description="Comma-separated VirusTotal API keys, in rotation order"
    )
    REPUTATION_CACHE_TTL_SECONDS: int = Field(
        default=SCANNER_CONFIG["cache"]["ttl_seconds"],
        gt=0,
        description="Lifetime of cached URL verdicts"
    )
    VIRUSTOTAL_POLL_DELAY_SECONDS: float = Field(
        default=SCANNER_CONFIG["virustotal"]["poll_delay"],
        ge=0,
        description="Wait between VirusTotal submission and report retrieval"
    )
    PROVIDER_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=SCANNER_CONFIG["requests"]["timeout"],
        gt=0,
        description="Total timeout for a single provider request"
    )

    # Statistics
    STATS_STORAGE_PATH: str = Field(
        default="data/secure",
        description="Directory of the encrypted statistics document"
    )
    HISTORY_LIMIT: int = Field(
        default=SCANNER_CONFIG["statistics"]["history_limit"],
        gt=0,
        description="Maximum number of scan history entries kept"
    )

    # Scan Defaults
    TRUSTED_CONTACTS: str = Field(
        default="",
        description="Comma-separated sender addresses exempt from scanning"
    )
    ENABLE_PHISHING: bool = Field(default=True, description="Run heuristic phishing analysis")
    ENABLE_LINK_CHECK: bool = Field(default=True, description="Check links with reputation providers")
    ENABLE_NOTIFICATIONS: bool = Field(default=True, description="Notify on detected threats")
    SCAN_CONTACTS: bool = Field(default=False, description="Skip scanning for trusted contacts")
    SCAN_IMAGES: bool = Field(default=False, description="Reserved image scanning toggle")

    @field_validator("CORS_ORIGINS")
    @classmethod
    def parse_cors_origins(cls, value: str) -> list:
        """Parse comma-separated CORS origins into list."""
        if value == "*":
            return ["*"]
        return _split_csv(value)

    @field_validator("CORS_METHODS")
    @classmethod
    def parse_cors_methods(cls, value: str) -> list:
        """Parse comma-separated CORS methods into list."""
        return _split_csv(value)

    @field_validator("SAFE_BROWSING_API_KEYS", "VIRUSTOTAL_API_KEYS", "TRUSTED_CONTACTS")
    @classmethod
    def parse_csv_list(cls, value: str) -> list:
        """Parse comma-separated keys and addresses into list."""
        return _split_csv(value)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "validate_default": True,
        "extra": "ignore"
    }


def get_settings() -> APISettings:
    """
    Retrieve validated API settings.

    Returns:
        Validated API settings object

    Raises:
        ValidationError: If configuration fails validation
    """
    return APISettings()
