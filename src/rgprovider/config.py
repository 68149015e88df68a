"""Configuration management with validation.

Settings are read from the environment once and validated at construction
time so that a misconfigured provider fails before touching the backend.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


# Resource group kind handled by this provider
RESOURCE_GROUP_TYPE = "LW_ACCOUNT"

# Input bounds
MAX_NAME_LENGTH = 256
MAX_ACCOUNTS = 1000

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Config:
    """Provider configuration loaded from environment variables.

    All fields are validated at construction time. Invalid configurations
    raise ConfigurationError immediately rather than failing mid-operation.
    """

    log_level: str = "INFO"

    # JSON audit logs to stdout
    enable_audit_logging: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        errors: list[str] = []

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {list(VALID_LOG_LEVELS)}: {self.log_level}")

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ConfigurationError(error_msg)

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables.

        Environment Variables:
            LOG_LEVEL: DEBUG, INFO, WARNING or ERROR (default: INFO)
            ENABLE_AUDIT_LOGGING: Emit JSON logs to stdout (default: true)
        """

        def get_bool(key: str, default: bool) -> bool:
            value = os.environ.get(key, "").lower()
            if not value:
                return default
            return value in ("true", "1", "yes")

        return cls(
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            enable_audit_logging=get_bool("ENABLE_AUDIT_LOGGING", True),
        )
