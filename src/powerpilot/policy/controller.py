"""Auto-apply controller: debounced, idempotent power scheme switching.

Each evaluation classifies the reading and remembers the recommendation.
When auto mode is on and the debounce window has elapsed, the controller
compares the recommendation with the scheme the OS reports as active and
switches only if they differ.

Blocking: get_active()/set_active() spawn processes, so evaluate() is meant
to run on a worker thread (the engine uses ``asyncio.to_thread``).
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from powerpilot.config.validators import (
    DEFAULT_DEBOUNCE_INTERVAL_MS,
    validate_debounce_interval_ms,
)
from powerpilot.policy.classifier import classify
from powerpilot.policy.models import SchemeBindings
from powerpilot.providers.base import SchemeApplier
from powerpilot.providers.brightness import BrightnessRestorer
from powerpilot.telemetry import (
    AUTO_MODE_CHANGED,
    DEBOUNCE_INTERVAL_CHANGED,
    MODE_RECOMMENDED,
    MODE_TRANSITION,
    SCHEME_APPLY_FAILED,
    SCHEME_BINDING_MISSING,
    SCHEME_QUERY_FAILED,
    get_logger,
)
from powerpilot.types import BatteryStatus, FusedReading, Mode

log = get_logger(__name__)


@dataclass
class PolicyState:
    """Mutable state of the auto-apply controller.

    Attributes:
        last_applied_mode: Mode of the last successful switch, None if none yet.
        last_check_timestamp: Clock value (seconds) of the last evaluation
            that passed the debounce gate.
    """

    last_applied_mode: Mode | None = None
    last_check_timestamp: float | None = None


class AutoApplyController:
    """Applies the classifier's recommendation through a SchemeApplier.

    Attributes:
        state: Last applied mode and last debounced check.
        enabled: Whether evaluations may switch schemes.
        debounce_ms: Minimum time between two apply checks.
        apply_count: Number of successful switches.
    """

    def __init__(
        self,
        applier: SchemeApplier | None,
        bindings: SchemeBindings,
        debounce_ms: int = DEFAULT_DEBOUNCE_INTERVAL_MS,
        enabled: bool = False,
        brightness: BrightnessRestorer | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the controller.

        Args:
            applier: Scheme applier; None disables switching entirely.
            bindings: Mode → scheme identifier bindings.
            debounce_ms: Debounce preset in milliseconds.
            enabled: Initial auto mode flag.
            brightness: Optional restorer triggered after each switch.
            clock: Monotonic clock in seconds (injectable for tests).

        Raises:
            ValueError: If debounce_ms is not a recognized preset.
        """
        self.debounce_ms = validate_debounce_interval_ms(debounce_ms)
        self.enabled = enabled
        self.state = PolicyState()
        self.apply_count = 0

        self._applier = applier
        self._bindings = bindings
        self._brightness = brightness
        self._clock = clock
        self._recommendation: Mode | None = None
        self._lock = threading.Lock()

    @property
    def recommendation(self) -> Mode | None:
        """Latest recommended mode, None before the first evaluation."""
        return self._recommendation

    @property
    def bindings(self) -> SchemeBindings:
        """Mode → scheme identifier bindings in use."""
        return self._bindings

    def set_enabled(self, enabled: bool) -> None:
        """Turn auto mode on or off. Never applies by itself and keeps state."""
        if enabled == self.enabled:
            return
        self.enabled = enabled
        log.info(AUTO_MODE_CHANGED, enabled=enabled)

    def set_debounce_interval(self, debounce_ms: int) -> None:
        """Change the debounce interval.

        Raises:
            ValueError: If debounce_ms is not a recognized preset.
        """
        new_value = validate_debounce_interval_ms(debounce_ms)
        old_value = self.debounce_ms
        self.debounce_ms = new_value
        log.info(DEBOUNCE_INTERVAL_CHANGED, old_debounce_ms=old_value, debounce_ms=new_value)

    def evaluate(self, reading: FusedReading, battery: BatteryStatus) -> Mode:
        """Classify a reading and, if due, switch the active scheme.

        Args:
            reading: Fused sensor reading of the current poll.
            battery: Battery status of the current poll.

        Returns:
            The recommended mode (whether or not it was applied).
        """
        recommended = classify(reading.load_percent, reading.max_temp_celsius, battery)
        if recommended != self._recommendation:
            log.debug(
                MODE_RECOMMENDED,
                mode=recommended.value,
                load_percent=reading.load_percent,
                max_temp_celsius=reading.max_temp_celsius,
                battery_percent=battery.percent,
                on_battery=battery.on_battery,
            )
        self._recommendation = recommended

        if not self.enabled or self._applier is None:
            return recommended

        with self._lock:
            now = self._clock()
            last = self.state.last_check_timestamp
            if last is not None and (now - last) * 1000.0 < self.debounce_ms:
                return recommended
            self.state.last_check_timestamp = now
            self._apply_if_needed(recommended)

        return recommended

    def _apply_if_needed(self, recommended: Mode) -> None:
        """Switch to the recommended scheme unless it is already active."""
        if self._applier is None:
            return

        try:
            active_id = self._applier.get_active()
        except Exception as e:
            log.warning(SCHEME_QUERY_FAILED, error=str(e), error_type=type(e).__name__)
            active_id = None

        current_mode = self._bindings.mode_for(active_id)
        if current_mode == recommended:
            return

        target_id = self._bindings.identifier_for(recommended)
        if target_id is None:
            log.warning(SCHEME_BINDING_MISSING, mode=recommended.value)
            return

        if self._brightness is not None:
            self._brightness.remember()

        try:
            self._applier.set_active(target_id)
        except Exception as e:
            log.warning(
                SCHEME_APPLY_FAILED,
                mode=recommended.value,
                scheme=target_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        previous = self.state.last_applied_mode
        self.state.last_applied_mode = recommended
        self.apply_count += 1
        log.info(
            MODE_TRANSITION,
            from_mode=current_mode.value if current_mode else None,
            to_mode=recommended.value,
            previous_applied_mode=previous.value if previous else None,
            scheme=target_id,
        )

        if self._brightness is not None:
            self._brightness.restore_later()
