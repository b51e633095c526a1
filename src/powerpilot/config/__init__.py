"""Unified configuration management for powerpilot.

This module provides a single source of truth for all configuration,
integrating environment variables, YAML files, and defaults.
"""

from powerpilot.config.env_loader import Environment, get_environment
from powerpilot.config.loader import ConfigLoadError
from powerpilot.config.settings import AppConfig, get_settings, load_app_config
from powerpilot.config.scheme_loader import SchemeBindingsError, load_scheme_bindings

# Singleton instance
settings = get_settings()

__all__ = [
    # App-level settings
    "settings",
    "AppConfig",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
    # Configuration loaders
    "load_scheme_bindings",
    # Exception classes
    "ConfigLoadError",
    "SchemeBindingsError",
]
