"""
Vault Configuration — Validated service settings.

Reads settings from environment variables:
    VAULT_STORE_URL = memory:// | redis://host:port/db
    VAULT_HOST, VAULT_PORT = HTTP bind address
    VAULT_STORE_TIMEOUT = seconds allowed for each store call
    VAULT_KEY_PREFIX = namespace for stored entries
    VAULT_MAX_EXPIRATION_HOURS = upper bound for expiration (0 = built-in cap)
    VAULT_LOG_LEVEL = logging level name

The secret engine itself needs nothing but a store; everything else here
belongs to the HTTP service around it.
"""
import os
import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("ephemeral_vault.config")

_ENV_PREFIX = "VAULT_"

# 100 years; keeps millisecond expiries well inside what Redis accepts
MAX_EXPIRATION_HOURS = 24 * 365 * 100


class VaultConfig(BaseModel):
    """Validated vault service configuration."""

    store_url: str = Field(default="memory://")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    store_timeout: float = Field(default=4.0, gt=0)
    key_prefix: str = Field(default="secret:")
    max_expiration_hours: int = Field(
        default=0, ge=0, le=MAX_EXPIRATION_HOURS,
    )
    log_level: str = Field(default="INFO")

    @field_validator("store_url")
    @classmethod
    def validate_store_url(cls, v: str) -> str:
        """Validate the store URL carries a scheme."""
        if "://" not in v:
            raise ValueError(f"Store URL must include a scheme: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a known logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Only variables that are set override the defaults.

        Returns:
            Populated VaultConfig instance.
        """
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{_ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        config = cls(**values)
        logger.debug(
            "Loaded vault config: store=%s host=%s port=%s",
            config.store_url.split("://", 1)[0], config.host, config.port,
        )
        return config
