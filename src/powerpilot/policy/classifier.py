"""Power policy classifier: recommended mode from load, temperature and battery.

Rules are evaluated in a fixed priority order; the first match wins:

1. On battery and charge < 25%                      → Min
2. On battery and charge < 40% and load < 40%       → Min
3. Temperature ≥ 85 °C or load ≥ 85%                → Max
4. On battery and load ≥ 70%                        → Max
5. On AC and load ≥ 65%                             → Max
6. On AC and load < 25% and temperature < 65 °C     → Min
7. Otherwise                                        → Balanced

Missing load and temperature count as 0 and a missing charge level as 100%,
so unavailable sensors never push the recommendation to an extreme on their own.
"""

from powerpilot.types import BatteryStatus, Mode

CRITICAL_BATTERY_PERCENT = 25
LOW_BATTERY_PERCENT = 40
LOW_BATTERY_LOAD_PERCENT = 40

HOT_TEMP_CELSIUS = 85.0
HEAVY_LOAD_PERCENT = 85.0
BATTERY_BUSY_LOAD_PERCENT = 70.0
AC_BUSY_LOAD_PERCENT = 65.0
AC_IDLE_LOAD_PERCENT = 25.0
AC_IDLE_TEMP_CELSIUS = 65.0


def classify(
    load_percent: float | None,
    max_temp_celsius: float | None,
    battery: BatteryStatus,
) -> Mode:
    """Return the recommended operating mode.

    Pure and deterministic.

    Args:
        load_percent: Fused CPU load, None if unavailable.
        max_temp_celsius: Hottest CPU temperature, None if unavailable.
        battery: Current battery status.

    Returns:
        Recommended Mode.

    Example:
        >>> classify(90, 50, BatteryStatus(percent=100, on_battery=False))
        <Mode.MAX: 'Max'>
    """
    load = load_percent if load_percent is not None else 0.0
    temp = max_temp_celsius if max_temp_celsius is not None else 0.0
    charge = battery.percent if battery.percent is not None else 100
    on_battery = battery.on_battery

    if on_battery and charge < CRITICAL_BATTERY_PERCENT:
        return Mode.MIN
    if on_battery and charge < LOW_BATTERY_PERCENT and load < LOW_BATTERY_LOAD_PERCENT:
        return Mode.MIN
    if temp >= HOT_TEMP_CELSIUS or load >= HEAVY_LOAD_PERCENT:
        return Mode.MAX
    if on_battery and load >= BATTERY_BUSY_LOAD_PERCENT:
        return Mode.MAX
    if not on_battery and load >= AC_BUSY_LOAD_PERCENT:
        return Mode.MAX
    if not on_battery and load < AC_IDLE_LOAD_PERCENT and temp < AC_IDLE_TEMP_CELSIUS:
        return Mode.MIN
    return Mode.BALANCED
