"""Warm display tint ("eye protection") through the gamma ramp.

Intensity 0% leaves the colors untouched; 100% removes blue entirely and
dims green by a quarter. The ramp the display had before the first change
is kept so restore() can put it back.

The gamma backend (X11 xrandr/XF86VidMode, Windows SetDeviceGammaRamp, ...)
is supplied by the host application.
"""

import threading
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from powerpilot.telemetry import TINT_APPLIED, TINT_BACKEND_FAILED, TINT_RESTORED, get_logger

log = get_logger(__name__)

RAMP_SIZE = 256
RAMP_MAX = 65535

GREEN_REDUCTION = 0.25


@dataclass(frozen=True)
class GammaRamp:
    """16-bit gamma lookup tables, RAMP_SIZE entries per channel."""

    red: tuple[int, ...]
    green: tuple[int, ...]
    blue: tuple[int, ...]

    def is_complete(self) -> bool:
        """True when every channel has RAMP_SIZE entries."""
        return len(self.red) == len(self.green) == len(self.blue) == RAMP_SIZE


@runtime_checkable
class GammaBackend(Protocol):
    """Reads and writes the display's gamma ramp."""

    def read_ramp(self) -> GammaRamp | None:
        """Return the current ramp, or None if it cannot be read."""

    def write_ramp(self, ramp: GammaRamp) -> None:
        """Apply a ramp. May raise on failure."""


def linear_ramp() -> GammaRamp:
    """Identity ramp: entry i is ``(i << 8) | i`` on every channel."""
    values = tuple((i << 8) | i for i in range(RAMP_SIZE))
    return GammaRamp(red=values, green=values, blue=values)


def _scale(values: tuple[int, ...], factor: float) -> tuple[int, ...]:
    return tuple(int(max(0.0, min(float(RAMP_MAX), v * factor))) for v in values)


def tinted_ramp(base: GammaRamp, percent: int) -> GammaRamp:
    """Apply a warm tint of the given intensity to a base ramp.

    Red is unchanged, green is scaled by ``1 - 0.25k`` and blue by ``1 - k``
    where ``k = percent / 100`` (percent clamped to 0-100).

    Example:
        >>> tinted_ramp(linear_ramp(), 100).blue[255]
        0
    """
    k = max(0, min(100, percent)) / 100.0
    return GammaRamp(
        red=base.red,
        green=_scale(base.green, 1.0 - GREEN_REDUCTION * k),
        blue=_scale(base.blue, 1.0 - k),
    )


class DisplayTintController:
    """Keeps the base gamma ramp and applies tint intensities on top of it."""

    def __init__(self, backend: GammaBackend) -> None:
        self._backend = backend
        self._base: GammaRamp | None = None
        self._intensity = 0
        self._lock = threading.Lock()

    @property
    def base_ramp(self) -> GammaRamp | None:
        """Ramp captured before the first change, None until then."""
        return self._base

    @property
    def current_intensity(self) -> int | None:
        """Applied intensity 0-100, None until a base ramp has been captured."""
        return self._intensity if self._base is not None else None

    def set_intensity(self, percent: int) -> None:
        """Apply a tint intensity (clamped to 0-100). Backend errors are logged."""
        percent = max(0, min(100, int(percent)))
        with self._lock:
            self._intensity = percent
            base = self._ensure_base()
            try:
                self._backend.write_ramp(tinted_ramp(base, percent))
            except Exception as e:
                log.warning(
                    TINT_BACKEND_FAILED,
                    operation="write",
                    intensity=percent,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return
        log.debug(TINT_APPLIED, intensity=percent)

    def restore(self) -> None:
        """Write the saved base ramp back and reset the intensity to 0."""
        with self._lock:
            if self._base is None:
                return
            try:
                self._backend.write_ramp(self._base)
            except Exception as e:
                log.warning(
                    TINT_BACKEND_FAILED,
                    operation="restore",
                    error=str(e),
                    error_type=type(e).__name__,
                )
            self._intensity = 0
        log.debug(TINT_RESTORED)

    def _ensure_base(self) -> GammaRamp:
        """Capture the base ramp once, falling back to the linear ramp."""
        if self._base is not None:
            return self._base

        ramp: GammaRamp | None = None
        try:
            ramp = self._backend.read_ramp()
        except Exception as e:
            log.warning(
                TINT_BACKEND_FAILED,
                operation="read",
                error=str(e),
                error_type=type(e).__name__,
            )

        if ramp is None or not ramp.is_complete():
            ramp = linear_ramp()
        self._base = ramp
        return ramp
