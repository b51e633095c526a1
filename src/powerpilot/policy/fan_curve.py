"""Stepped laptop fan curve.

Many laptops (e.g. Dell Latitude) drive the fan in discrete RPM steps
instead of a continuous duty cycle. The curve maps the hottest CPU
temperature to a step; fan speed itself is never read back.
"""

from dataclasses import dataclass

RPM_STEPS: tuple[int, ...] = (0, 2400, 5300)

# Upper temperature bound (°C, inclusive) of each step below the last
STEP_UPPER_BOUNDS_CELSIUS: tuple[float, ...] = (20.0, 60.0)


@dataclass(frozen=True)
class FanLevel:
    """Fan step recommended for a temperature.

    Attributes:
        step_index: Index into RPM_STEPS.
        rpm: Nominal RPM of the step.
        percent: Share of full fan power (rpm / max rpm).
    """

    step_index: int
    rpm: int
    percent: float

    @property
    def description(self) -> str:
        """Display text of the step."""
        return describe_step(self.step_index)


def fan_level_for(max_temp_celsius: float) -> FanLevel:
    """Return the fan step for a CPU temperature.

    ≤ 20 °C → 0 RPM, ≤ 60 °C → 2400 RPM, hotter → 5300 RPM.

    Example:
        >>> fan_level_for(45).rpm
        2400
    """
    for index, upper in enumerate(STEP_UPPER_BOUNDS_CELSIUS):
        if max_temp_celsius <= upper:
            return FanLevel(index, RPM_STEPS[index], 100.0 * RPM_STEPS[index] / RPM_STEPS[-1])
    last = len(RPM_STEPS) - 1
    return FanLevel(last, RPM_STEPS[last], 100.0)


def describe_step(step_index: int) -> str:
    """Describe a fan step, e.g. "0 RPM (off)" or "2400 RPM"; "?" if out of range."""
    if step_index < 0 or step_index >= len(RPM_STEPS):
        return "?"
    rpm = RPM_STEPS[step_index]
    return "0 RPM (off)" if rpm == 0 else f"{rpm} RPM"
