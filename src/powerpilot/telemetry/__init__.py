"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from powerpilot.telemetry.events import (
    AUTO_MODE_CHANGED,
    BATTERY_QUERY_FAILED,
    BRIGHTNESS_RESTORE_FAILED,
    BRIGHTNESS_RESTORED,
    DEBOUNCE_INTERVAL_CHANGED,
    ENGINE_STARTED,
    ENGINE_STOPPED,
    MODE_RECOMMENDED,
    MODE_TRANSITION,
    POLL_CONSUMER_FAILED,
    POLL_DELIVERY_SKIPPED,
    POLL_INTERVAL_CHANGED,
    POLL_RESULT_DISCARDED,
    PROVIDER_POLL_FAILED,
    READING_LISTENER_FAILED,
    SCHEDULER_STARTED,
    SCHEDULER_STOPPED,
    SCHEME_APPLY_FAILED,
    SCHEME_BINDING_MISSING,
    SCHEME_QUERY_FAILED,
    SENSOR_POLL,
    TINT_APPLIED,
    TINT_BACKEND_FAILED,
    TINT_RESTORED,
)
from powerpilot.telemetry.logger import configure_logging, get_logger

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    # Event constants
    "SENSOR_POLL",
    "PROVIDER_POLL_FAILED",
    "BATTERY_QUERY_FAILED",
    "POLL_DELIVERY_SKIPPED",
    "POLL_RESULT_DISCARDED",
    "POLL_CONSUMER_FAILED",
    "SCHEDULER_STARTED",
    "SCHEDULER_STOPPED",
    "POLL_INTERVAL_CHANGED",
    "MODE_RECOMMENDED",
    "MODE_TRANSITION",
    "AUTO_MODE_CHANGED",
    "DEBOUNCE_INTERVAL_CHANGED",
    "SCHEME_APPLY_FAILED",
    "SCHEME_BINDING_MISSING",
    "SCHEME_QUERY_FAILED",
    "BRIGHTNESS_RESTORED",
    "BRIGHTNESS_RESTORE_FAILED",
    "TINT_APPLIED",
    "TINT_RESTORED",
    "TINT_BACKEND_FAILED",
    "ENGINE_STARTED",
    "ENGINE_STOPPED",
    "READING_LISTENER_FAILED",
]
