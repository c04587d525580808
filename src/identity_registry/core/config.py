"""Core configuration - centralized config for the identity registry.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from identity_registry.core.config import get_config
    config = get_config()

    # Access settings
    timeout = config.recovery_timeout
    log_level = config.log_level
"""

from __future__ import annotations

from eth_utils import is_address, to_checksum_address
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGISTRY_ADDRESS = "0x0000000000000000000000000000000000001484"
DEFAULT_MAX_ASSOCIATED_ADDRESSES = 50
DEFAULT_RECOVERY_TIMEOUT = 60 * 60 * 24 * 14  # 2 weeks
DEFAULT_SIGNATURE_TIMEOUT = 60 * 60 * 24 * 7  # 1 week


class RegistrySettings(BaseSettings):
    """Configuration settings for the identity registry.

    Settings can be configured via environment variables with the
    IDENTITY_REGISTRY_ prefix or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # LEDGER SETTINGS
    # ==========================================================================

    registry_address: str = Field(
        default=DEFAULT_REGISTRY_ADDRESS,
        description="Address of this registry; bound into every signed permission",
        validation_alias="IDENTITY_REGISTRY_ADDRESS",
    )
    max_associated_addresses: int = Field(
        default=DEFAULT_MAX_ASSOCIATED_ADDRESSES,
        gt=0,
        description="Maximum number of associated addresses per identity",
        validation_alias="IDENTITY_REGISTRY_MAX_ASSOCIATED_ADDRESSES",
    )
    recovery_timeout: int = Field(
        default=DEFAULT_RECOVERY_TIMEOUT,
        gt=0,
        description="Seconds a recovery address change / recovery stays in effect",
        validation_alias="IDENTITY_REGISTRY_RECOVERY_TIMEOUT",
    )
    signature_timeout: int = Field(
        default=DEFAULT_SIGNATURE_TIMEOUT,
        gt=0,
        description="Seconds a timestamped permission signature stays valid",
        validation_alias="IDENTITY_REGISTRY_SIGNATURE_TIMEOUT",
    )

    # ==========================================================================
    # STORAGE SETTINGS
    # ==========================================================================

    store_path: str | None = Field(
        default=None,
        description="Path to the JSON store snapshot used by the CLI",
        validation_alias="IDENTITY_REGISTRY_STORE_PATH",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="IDENTITY_REGISTRY_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="IDENTITY_REGISTRY_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="IDENTITY_REGISTRY_LOG_FILE",
    )

    @model_validator(mode="after")
    def normalize_registry_address(self) -> RegistrySettings:
        """Reject invalid registry addresses and store the checksum form."""
        if not is_address(self.registry_address):
            raise ValueError(f"IDENTITY_REGISTRY_ADDRESS is not a valid address: {self.registry_address!r}")
        object.__setattr__(self, "registry_address", to_checksum_address(self.registry_address))
        return self


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: RegistrySettings | None = None


def get_config() -> RegistrySettings:
    """Get the global configuration instance.

    Returns:
        The singleton RegistrySettings instance.
    """
    global _config
    if _config is None:
        _config = RegistrySettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
