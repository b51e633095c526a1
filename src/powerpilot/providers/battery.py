"""Battery status from psutil, with sanitized estimates.

Battery firmware reports sentinels instead of "unknown" (71582788 minutes
while on AC, 0x7FFFFFFF and above for "not available", negative psutil
constants for "unlimited"/"unknown"). Every raw value passes through the
sanitize helpers before it reaches a BatteryStatus.
"""

import math
from pathlib import Path

import psutil

from powerpilot.telemetry import BATTERY_QUERY_FAILED, get_logger
from powerpilot.types import BatteryStatus

log = get_logger(__name__)

UNKNOWN_RUNTIME_SENTINEL = 71582788
UNAVAILABLE_THRESHOLD = 0x7FFFFFFF
MAX_RUNTIME_MINUTES = 24 * 60 * 14

POWER_SUPPLY_ROOT = Path("/sys/class/power_supply")


def sanitize_percent(value: float | int | None) -> int | None:
    """Return a charge level in 0-100, or None when out of range."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0 or number > 100:
        return None
    return int(round(number))


def sanitize_minutes_remaining(value: float | int | None) -> int | None:
    """Return a runtime estimate in minutes, or None for sentinels and absurd values.

    Valid estimates are positive and at most two weeks.
    """
    if value is None:
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if minutes == UNKNOWN_RUNTIME_SENTINEL or minutes >= UNAVAILABLE_THRESHOLD:
        return None
    if minutes <= 0 or minutes > MAX_RUNTIME_MINUTES:
        return None
    return minutes


def sanitize_minutes_to_full(value: float | int | None) -> int | None:
    """Return a time-to-full estimate in minutes, or None when unknown."""
    if value is None:
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if minutes <= 0 or minutes >= UNAVAILABLE_THRESHOLD:
        return None
    return minutes


def _read_number(path: Path) -> float | None:
    try:
        return float(path.read_text().strip())
    except (OSError, ValueError):
        return None


def read_sysfs_minutes_to_full(root: Path = POWER_SUPPLY_ROOT) -> int | None:
    """Estimate minutes until full from the kernel power-supply class.

    Uses energy_* (µWh/µW) or charge_*/current_now (µAh/µA) of the first
    battery that reports both. Returns None when nothing usable is found.
    """
    if not root.is_dir():
        return None

    for supply in sorted(root.glob("BAT*")):
        for full_name, now_name, rate_name in (
            ("energy_full", "energy_now", "power_now"),
            ("charge_full", "charge_now", "current_now"),
        ):
            full = _read_number(supply / full_name)
            now = _read_number(supply / now_name)
            rate = _read_number(supply / rate_name)
            if full is None or now is None or not rate:
                continue
            hours = (full - now) / abs(rate)
            return sanitize_minutes_to_full(hours * 60)
    return None


class PsutilBatteryProvider:
    """BatteryStatusProvider backed by ``psutil.sensors_battery()``.

    Machines without a battery report an unknown status (assumed on AC).
    """

    def __init__(self, power_supply_root: Path = POWER_SUPPLY_ROOT) -> None:
        self._power_supply_root = power_supply_root

    def query(self) -> BatteryStatus:
        """Return the current, sanitized battery status."""
        try:
            battery = psutil.sensors_battery()
        except (AttributeError, NotImplementedError, OSError) as e:
            log.debug(BATTERY_QUERY_FAILED, error=str(e), error_type=type(e).__name__)
            return BatteryStatus.unknown()

        if battery is None:
            return BatteryStatus.unknown()

        percent = sanitize_percent(battery.percent)
        plugged = bool(battery.power_plugged) if battery.power_plugged is not None else True
        on_battery = not plugged
        charging = plugged and percent is not None and percent < 100

        minutes_remaining = None
        if on_battery and isinstance(battery.secsleft, (int, float)) and battery.secsleft > 0:
            minutes_remaining = sanitize_minutes_remaining(battery.secsleft // 60)

        minutes_to_full = None
        if charging:
            minutes_to_full = read_sysfs_minutes_to_full(self._power_supply_root)

        return BatteryStatus(
            percent=percent,
            on_battery=on_battery,
            charging=charging,
            minutes_remaining=minutes_remaining,
            minutes_to_full=minutes_to_full,
        )
