"""Display brightness: sysfs backlight control and post-switch restore.

Switching the power scheme can reset the panel brightness to the new
scheme's default. BrightnessRestorer remembers the level before a switch
and re-applies it shortly afterwards on a timer thread.
"""

import threading
from pathlib import Path

from powerpilot.providers.base import BrightnessController
from powerpilot.telemetry import BRIGHTNESS_RESTORE_FAILED, BRIGHTNESS_RESTORED, get_logger

log = get_logger(__name__)

BACKLIGHT_ROOT = Path("/sys/class/backlight")
DEFAULT_RESTORE_DELAY_MS = 400


def _clamp_percent(percent: int) -> int:
    return max(0, min(100, int(percent)))


class SysfsBacklightController:
    """BrightnessController for ``/sys/class/backlight/<device>``.

    Values are converted between percent and the device's raw range
    (``brightness`` / ``max_brightness``). Writing usually requires the
    user to be in the ``video`` group or a udev rule.
    """

    def __init__(self, device: str | None = None, root: Path = BACKLIGHT_ROOT) -> None:
        """Initialize the controller.

        Args:
            device: Backlight device name (e.g. "intel_backlight"). If None,
                the first device under root is used.
            root: Backlight class directory.
        """
        self._root = root
        self._device = device

    @property
    def device_path(self) -> Path | None:
        """Directory of the selected backlight device, None if there is none."""
        if self._device is not None:
            path = self._root / self._device
            return path if path.is_dir() else None
        if not self._root.is_dir():
            return None
        devices = sorted(p for p in self._root.iterdir() if (p / "max_brightness").exists())
        return devices[0] if devices else None

    def _max_brightness(self, path: Path) -> int | None:
        try:
            value = int((path / "max_brightness").read_text().strip())
        except (OSError, ValueError):
            return None
        return value if value > 0 else None

    def get_brightness(self) -> int | None:
        """Return the brightness in percent, or None when unreadable."""
        path = self.device_path
        if path is None:
            return None
        maximum = self._max_brightness(path)
        if maximum is None:
            return None
        try:
            raw = int((path / "brightness").read_text().strip())
        except (OSError, ValueError):
            return None
        return _clamp_percent(round(raw * 100 / maximum))

    def set_brightness(self, percent: int) -> None:
        """Set the brightness in percent.

        Raises:
            OSError: If no device exists or the value cannot be written.
        """
        path = self.device_path
        if path is None:
            raise OSError(f"No backlight device under {self._root}")
        maximum = self._max_brightness(path)
        if maximum is None:
            raise OSError(f"Unreadable max_brightness for {path.name}")
        raw = round(_clamp_percent(percent) * maximum / 100)
        (path / "brightness").write_text(f"{raw}\n")


class BrightnessRestorer:
    """Re-applies a remembered brightness after a power scheme switch.

    Usage:
        restorer.remember()           # before the switch
        applier.set_active(guid)
        restorer.restore_later()      # after a successful switch

    Only the most recent pending restore survives; scheduling a new one
    cancels the previous timer.
    """

    def __init__(
        self,
        controller: BrightnessController,
        delay_ms: int = DEFAULT_RESTORE_DELAY_MS,
    ) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self.delay_ms = delay_ms
        self._controller = controller
        self._remembered: int | None = None
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def remembered(self) -> int | None:
        """Level captured by the last remember() call."""
        return self._remembered

    @property
    def pending(self) -> bool:
        """True while a restore is scheduled."""
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def remember(self) -> int | None:
        """Capture the current brightness. Failures leave the previous value."""
        try:
            level = self._controller.get_brightness()
        except Exception as e:
            log.debug(BRIGHTNESS_RESTORE_FAILED, stage="read", error=str(e))
            return self._remembered
        if level is not None:
            self._remembered = _clamp_percent(level)
        return self._remembered

    def restore_later(self, level: int | None = None) -> bool:
        """Schedule the brightness to be re-applied after delay_ms.

        Args:
            level: Level to apply; defaults to the remembered one.

        Returns:
            True if a restore was scheduled.
        """
        target = level if level is not None else self._remembered
        if target is None:
            return False
        target = _clamp_percent(target)

        timer = threading.Timer(self.delay_ms / 1000.0, self._restore, args=(target,))
        timer.daemon = True
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = timer
        timer.start()
        return True

    def cancel(self) -> None:
        """Cancel a pending restore."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _restore(self, level: int) -> None:
        try:
            self._controller.set_brightness(level)
        except Exception as e:
            log.warning(
                BRIGHTNESS_RESTORE_FAILED,
                level=level,
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        log.debug(BRIGHTNESS_RESTORED, level=level)
