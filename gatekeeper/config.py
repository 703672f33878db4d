"""
Unified Configuration Management for Gatekeeper

Single source of truth for runtime settings using Pydantic BaseSettings.
All settings can be overridden via environment variables with GATEKEEPER_ prefix.

Usage:
    from gatekeeper.config import get_settings

    settings = get_settings()
    print(settings.data_dir)
    print(settings.log_level)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatekeeperSettings(BaseSettings):
    """
    Unified configuration for Gatekeeper

    All settings can be overridden via environment variables with GATEKEEPER_ prefix.
    Example: GATEKEEPER_DATA_DIR=/srv/rust/data
    """

    model_config = SettingsConfigDict(
        env_prefix="GATEKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # SYSTEM SETTINGS
    # ============================================

    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    structured_logging: bool = Field(
        default=False,
        description="Emit JSON log lines instead of plain text"
    )

    perms_explain: bool = Field(
        default=False,
        description="Enable permission decision diagnostics (explain_permission)"
    )

    # ============================================
    # PERSISTENCE SETTINGS
    # ============================================

    data_dir: str = Field(
        default=".gatekeeper_data",
        description="Base data directory"
    )

    save_dir_name: str = Field(
        default="Save",
        description="Sub-directory of data_dir holding the permission documents"
    )

    group_permissions_filename: str = Field(
        default="GroupPermissions.json",
        description="File name of the group permissions document"
    )

    player_permissions_filename: str = Field(
        default="PlayerPermissions.json",
        description="File name of the player permissions document"
    )

    json_indent: int = Field(
        default=2,
        ge=0,
        description="Indentation used when writing permission documents"
    )

    synthesize_defaults: bool = Field(
        default=True,
        description="Write illustrative default documents when none exist"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level"""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def to_dict(self) -> dict:
        """Convert settings to dictionary"""
        return self.model_dump()


# ============================================
# SINGLETON PATTERN
# ============================================

@lru_cache()
def get_settings() -> GatekeeperSettings:
    """
    Get cached settings instance (singleton pattern)

    Returns:
        GatekeeperSettings: Application settings
    """
    return GatekeeperSettings()
