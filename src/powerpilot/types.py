"""Core data types shared by the sampling pipeline and the power policy.

This module defines:
- SensorKind: the three CPU quantities the pipeline tracks
- SensorSample: one raw reading from one hardware sensor
- FusedReading: the canonical per-poll value of each quantity
- BatteryStatus: sanitized battery/AC state
- Mode: the recognized operating profiles
- SeriesSnapshot: ordered history of one metric plus its display range
"""

import math
from dataclasses import dataclass, field
from enum import Enum


class SensorKind(str, Enum):
    """Quantity reported by a sensor (also used to name the history series)."""

    LOAD = "load"
    FREQUENCY = "frequency"
    TEMPERATURE = "temperature"


class Mode(str, Enum):
    """Operating profiles, each bound to an external scheme identifier."""

    MIN = "Min"
    BALANCED = "Balanced"
    MAX = "Max"


@dataclass(frozen=True)
class SensorSample:
    """A single sensor reading as reported by a hardware sensor provider.

    Attributes:
        kind: Quantity measured.
        hardware_id: Stable identifier of the hardware node (e.g. "cpu", "coretemp").
        value: Raw value; None when the sensor has no reading this poll.
        name: Sensor label, e.g. "CPU Total" or "Core 3".
        hardware_name: Display name of the hardware node.
        is_cpu: Set by the provider when the node is known to be a CPU.
    """

    kind: SensorKind
    hardware_id: str
    value: float | None
    name: str = ""
    hardware_name: str = ""
    is_cpu: bool = False

    @property
    def is_valid(self) -> bool:
        """True when the sample carries a finite value."""
        return self.value is not None and math.isfinite(self.value)

    @property
    def is_cpu_hardware(self) -> bool:
        """True when tagged as CPU or the hardware name mentions "CPU"."""
        if self.is_cpu:
            return True
        label = self.hardware_name or self.hardware_id
        return "cpu" in label.lower()


@dataclass(frozen=True)
class FusedReading:
    """One canonical value per metric for a single poll.

    Any field is None when no valid sensor of that kind reported this poll.
    Frequency is always in MHz.
    """

    load_percent: float | None = None
    frequency_mhz: float | None = None
    max_temp_celsius: float | None = None

    @classmethod
    def empty(cls) -> "FusedReading":
        """Reading with every metric unavailable."""
        return cls()

    def value_for(self, kind: SensorKind) -> float | None:
        """Return the fused value for a metric kind."""
        if kind is SensorKind.LOAD:
            return self.load_percent
        if kind is SensorKind.FREQUENCY:
            return self.frequency_mhz
        return self.max_temp_celsius

    @property
    def is_empty(self) -> bool:
        """True when no metric is available."""
        return (
            self.load_percent is None
            and self.frequency_mhz is None
            and self.max_temp_celsius is None
        )


@dataclass(frozen=True)
class BatteryStatus:
    """Battery and power-source state.

    Attributes:
        percent: Charge level 0-100, None when unknown or no battery.
        on_battery: True when running from the battery (not on AC).
        charging: True while the battery is charging.
        minutes_remaining: Estimated runtime, None unless a sane estimate exists.
        minutes_to_full: Estimated time to full charge, None unless known.
    """

    percent: int | None = None
    on_battery: bool = False
    charging: bool = False
    minutes_remaining: int | None = None
    minutes_to_full: int | None = None

    @classmethod
    def unknown(cls) -> "BatteryStatus":
        """Status used when the battery could not be queried (assumes AC)."""
        return cls()


@dataclass(frozen=True)
class SeriesSnapshot:
    """Copy of a metric history, oldest first, with a padded display range."""

    metric: SensorKind
    values: list[float] = field(default_factory=list)
    padded_range: tuple[float, float] = (0.0, 100.0)
