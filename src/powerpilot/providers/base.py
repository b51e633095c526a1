"""Interfaces of the external collaborators used by the engine.

Each collaborator is an injected instance with an explicit lifecycle; nothing
in the pipeline relies on module-level device handles.
"""

from typing import Protocol, runtime_checkable

from powerpilot.types import BatteryStatus, SensorSample


@runtime_checkable
class HardwareSensorProvider(Protocol):
    """Source of raw CPU sensor samples."""

    def open(self) -> None:
        """Acquire device handles. Called once before the first poll."""

    def close(self) -> None:
        """Release device handles."""

    def poll(self) -> list[SensorSample]:
        """Return every sensor sample for this instant.

        May return an empty list when nothing is available. Raises only for
        unrecoverable provider failures.
        """


@runtime_checkable
class BatteryStatusProvider(Protocol):
    """Source of battery and power-source state."""

    def query(self) -> BatteryStatus:
        """Return the current battery status (unknown status when unavailable)."""


@runtime_checkable
class SchemeApplier(Protocol):
    """Switches the operating system's active power scheme."""

    def get_active(self) -> str | None:
        """Return the identifier of the active scheme, or None if unknown."""

    def set_active(self, identifier: str) -> None:
        """Activate a scheme. Raises SchemeApplyError on failure."""


@runtime_checkable
class BrightnessController(Protocol):
    """Reads and writes the display brightness in percent."""

    def get_brightness(self) -> int | None:
        """Return brightness 0-100, or None when it cannot be read."""

    def set_brightness(self, percent: int) -> None:
        """Set brightness 0-100."""
