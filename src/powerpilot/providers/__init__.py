"""Adapters for hardware sensors, battery, power schemes and brightness."""

from powerpilot.providers.base import (
    BatteryStatusProvider,
    BrightnessController,
    HardwareSensorProvider,
    SchemeApplier,
)
from powerpilot.providers.battery import (
    PsutilBatteryProvider,
    sanitize_minutes_remaining,
    sanitize_minutes_to_full,
    sanitize_percent,
)
from powerpilot.providers.brightness import BrightnessRestorer, SysfsBacklightController
from powerpilot.providers.psutil_sensors import PsutilSensorProvider
from powerpilot.providers.schemes import (
    PowercfgSchemeApplier,
    PowerProfilesSchemeApplier,
    SchemeApplyError,
    create_scheme_applier,
)

__all__ = [
    # Interfaces
    "BatteryStatusProvider",
    "BrightnessController",
    "HardwareSensorProvider",
    "SchemeApplier",
    # Implementations
    "BrightnessRestorer",
    "PowercfgSchemeApplier",
    "PowerProfilesSchemeApplier",
    "PsutilBatteryProvider",
    "PsutilSensorProvider",
    "SysfsBacklightController",
    "create_scheme_applier",
    # Helpers
    "sanitize_minutes_remaining",
    "sanitize_minutes_to_full",
    "sanitize_percent",
    # Exceptions
    "SchemeApplyError",
]
