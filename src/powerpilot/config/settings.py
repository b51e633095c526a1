"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from powerpilot.config.env_loader import Environment, get_environment, load_env_files
from powerpilot.config.validators import (
    DEFAULT_DEBOUNCE_INTERVAL_MS,
    DEFAULT_POLL_INTERVAL_MS,
    resolve_path,
    validate_debounce_interval_ms,
    validate_log_format,
    validate_log_level,
    validate_poll_interval_ms,
    validate_scheme_backend,
)

log = structlog.get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified application configuration.

    Loads configuration from environment variables (``POWERPILOT_`` prefix),
    .env files and defaults. Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded manually via env_loader to support
        # environment-specific files with priority order
        env_prefix="POWERPILOT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, alias="APP_DEBUG", description="Debug mode flag")

    # Application
    project_name: str = Field(default="powerpilot", description="Project name")
    version: str = Field(default="0.1.0", description="Application version")

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO",
        alias="APP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", alias="APP_LOG_FORMAT", description="Log format (json or console)"
    )

    # Sampling
    poll_interval_ms: int = Field(
        default=DEFAULT_POLL_INTERVAL_MS,
        description="Sensor and battery polling interval (500, 1000, 2000 or 5000 ms)",
    )
    history_capacity: int = Field(
        default=80, gt=0, description="Samples kept per metric for graphs and range scaling"
    )

    # Policy
    auto_mode_enabled: bool = Field(
        default=False, description="Apply the recommended power scheme automatically"
    )
    auto_check_interval_ms: int = Field(
        default=DEFAULT_DEBOUNCE_INTERVAL_MS,
        description="Minimum time between automatic scheme evaluations (1000-10000 ms presets)",
    )

    # Scheme switching
    scheme_backend: str = Field(
        default="auto",
        description="Scheme applier: auto, powercfg (Windows), powerprofiles (Linux) or none",
    )
    scheme_bindings_path: Path = Field(
        default=Path("config/schemes.yaml"),
        description="YAML/JSON file mapping Min/Balanced/Max to scheme identifiers",
    )
    scheme_command_timeout_seconds: float = Field(
        default=2.0, gt=0, description="Timeout for scheme query/apply commands"
    )

    # Brightness side effect
    brightness_restore_enabled: bool = Field(
        default=True, description="Re-apply the screen brightness after a scheme switch"
    )
    brightness_restore_delay_ms: int = Field(
        default=400, ge=0, description="Delay before brightness is re-applied"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("poll_interval_ms")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Validate polling interval preset."""
        return validate_poll_interval_ms(v)

    @field_validator("auto_check_interval_ms")
    @classmethod
    def validate_auto_check_interval(cls, v: int) -> int:
        """Validate debounce interval preset."""
        return validate_debounce_interval_ms(v)

    @field_validator("scheme_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate scheme backend name."""
        return validate_scheme_backend(v)

    @field_validator("log_dir", "scheme_bindings_path", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    load_env_files()

    try:
        config = AppConfig()
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise

    log.debug(
        "app_config_loaded",
        environment=config.environment.value,
        poll_interval_ms=config.poll_interval_ms,
        auto_mode_enabled=config.auto_mode_enabled,
        scheme_backend=config.scheme_backend,
    )
    return config


def get_settings() -> AppConfig:
    """Get the application settings singleton.

    Returns:
        AppConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
