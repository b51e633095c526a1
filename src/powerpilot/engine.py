"""PowerPolicyEngine: sampling, history and auto-apply wired together.

Per completed poll, in order:

    acquire → fuse → append to ring series → classify → (maybe) auto-apply
            → notify reading listeners

Usage:
    engine = PowerPolicyEngine.from_settings()
    engine.add_reading_listener(lambda reading, battery: print(reading))
    await engine.start()
    ...
    await engine.stop()
"""

import asyncio
from collections.abc import Callable
from typing import Any

from powerpilot.config.scheme_loader import load_scheme_bindings
from powerpilot.config.settings import AppConfig, get_settings
from powerpilot.policy.controller import AutoApplyController
from powerpilot.policy.models import SchemeBindings
from powerpilot.providers.base import (
    BatteryStatusProvider,
    HardwareSensorProvider,
    SchemeApplier,
)
from powerpilot.providers.battery import PsutilBatteryProvider
from powerpilot.providers.brightness import BrightnessRestorer, SysfsBacklightController
from powerpilot.providers.psutil_sensors import PsutilSensorProvider
from powerpilot.providers.schemes import PowerProfilesSchemeApplier, create_scheme_applier
from powerpilot.sampling.ring_series import RingTimeSeries
from powerpilot.sampling.scheduler import PollScheduler
from powerpilot.telemetry import (
    ENGINE_STARTED,
    ENGINE_STOPPED,
    READING_LISTENER_FAILED,
    get_logger,
)
from powerpilot.types import BatteryStatus, FusedReading, Mode, SensorKind, SeriesSnapshot

log = get_logger(__name__)

ReadingListener = Callable[[FusedReading, BatteryStatus], Any]
Dispatcher = Callable[[Callable[[], None]], Any]


class PowerPolicyEngine:
    """Facade over the poll scheduler, history series and auto-apply controller.

    Attributes:
        controller: Auto-apply controller (owns the recommendation and policy state).
        scheduler: Poll scheduler driving acquisition.
        running: True between start() and stop().
    """

    def __init__(
        self,
        sensor_provider: HardwareSensorProvider,
        battery_provider: BatteryStatusProvider,
        controller: AutoApplyController,
        poll_interval_ms: int | None = None,
        history_capacity: int | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            sensor_provider: Hardware sensor source; opened by start(), closed by stop().
            battery_provider: Battery status source.
            controller: Auto-apply controller.
            poll_interval_ms: Poll preset. Defaults to settings.poll_interval_ms.
            history_capacity: Ring capacity per metric. Defaults to settings.history_capacity.
            dispatcher: Marshals listener calls onto a presentation thread
                (e.g. ``loop.call_soon_threadsafe``). Listeners run inline when None.

        Raises:
            ValueError: If the interval or capacity is invalid.
        """
        if poll_interval_ms is None or history_capacity is None:
            settings = get_settings()
            if poll_interval_ms is None:
                poll_interval_ms = settings.poll_interval_ms
            if history_capacity is None:
                history_capacity = settings.history_capacity

        self.controller = controller
        self.running = False
        self._sensor_provider = sensor_provider
        self._dispatcher = dispatcher
        self._listeners: list[ReadingListener] = []
        self._series: dict[SensorKind, RingTimeSeries] = {
            kind: RingTimeSeries(history_capacity) for kind in SensorKind
        }
        self._latest_reading: FusedReading | None = None
        self._latest_battery: BatteryStatus | None = None

        self.scheduler = PollScheduler(
            sensor_provider,
            battery_provider,
            consumer=self._on_poll,
            interval_ms=poll_interval_ms,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppConfig | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> "PowerPolicyEngine":
        """Build an engine with the psutil providers and the configured scheme backend.

        Args:
            settings: Configuration; defaults to get_settings().
            dispatcher: Optional listener dispatcher.

        Raises:
            SchemeBindingsError: If a bindings file exists but is invalid.
        """
        settings = settings or get_settings()

        applier = create_scheme_applier(
            settings.scheme_backend,
            timeout_seconds=settings.scheme_command_timeout_seconds,
        )
        bindings = resolve_scheme_bindings(settings, applier)

        brightness = None
        if settings.brightness_restore_enabled:
            brightness = BrightnessRestorer(
                SysfsBacklightController(),
                delay_ms=settings.brightness_restore_delay_ms,
            )

        controller = AutoApplyController(
            applier,
            bindings,
            debounce_ms=settings.auto_check_interval_ms,
            enabled=settings.auto_mode_enabled,
            brightness=brightness,
        )
        return cls(
            PsutilSensorProvider(),
            PsutilBatteryProvider(),
            controller,
            poll_interval_ms=settings.poll_interval_ms,
            history_capacity=settings.history_capacity,
            dispatcher=dispatcher,
        )

    async def start(self) -> None:
        """Open the sensor provider and start polling."""
        if self.running:
            log.warning("engine_already_running")
            return

        await asyncio.to_thread(self._sensor_provider.open)
        self.running = True
        await self.scheduler.start()
        log.info(
            ENGINE_STARTED,
            poll_interval_ms=self.scheduler.interval_ms,
            auto_mode=self.controller.enabled,
            debounce_ms=self.controller.debounce_ms,
        )

    async def stop(self) -> None:
        """Stop polling, wait for in-flight work and close the sensor provider."""
        if not self.running:
            return

        self.running = False
        await self.scheduler.stop()
        await asyncio.to_thread(self._sensor_provider.close)
        log.info(ENGINE_STOPPED, delivered_count=self.scheduler.delivered_count)

    async def poll_once(self) -> tuple[FusedReading, BatteryStatus] | None:
        """Run one acquisition and delivery outside the timer.

        Returns None when another poll was still in flight.
        """
        return await self.scheduler.poll_once()

    def add_reading_listener(self, listener: ReadingListener) -> None:
        """Register a callback(reading, battery), called once per completed poll."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_reading_listener(self, listener: ReadingListener) -> None:
        """Unregister a callback. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def current_series(self, metric: SensorKind) -> SeriesSnapshot:
        """Snapshot of one metric's history with its padded display range."""
        series = self._series[SensorKind(metric)]
        return SeriesSnapshot(
            metric=SensorKind(metric),
            values=series.read_ordered(),
            padded_range=series.min_max_padded(),
        )

    def current_recommendation(self) -> Mode | None:
        """Latest recommended mode, None until the first poll has been evaluated."""
        return self.controller.recommendation

    @property
    def latest_reading(self) -> FusedReading | None:
        """Fused reading of the last delivered poll."""
        return self._latest_reading

    @property
    def latest_battery(self) -> BatteryStatus | None:
        """Battery status of the last delivered poll."""
        return self._latest_battery

    def set_auto_mode(self, enabled: bool) -> None:
        """Enable or disable automatic scheme switching."""
        self.controller.set_enabled(enabled)

    def set_poll_interval(self, interval_ms: int) -> None:
        """Change the polling interval (preset). Raises ValueError otherwise."""
        self.scheduler.reconfigure(interval_ms)

    def set_debounce_interval(self, debounce_ms: int) -> None:
        """Change the auto-apply debounce interval (preset). Raises ValueError otherwise."""
        self.controller.set_debounce_interval(debounce_ms)

    async def _on_poll(self, reading: FusedReading, battery: BatteryStatus) -> None:
        """Scheduler consumer: record, evaluate, then notify."""
        for kind, series in self._series.items():
            value = reading.value_for(kind)
            if value is not None:
                series.append(value)

        self._latest_reading = reading
        self._latest_battery = battery

        await asyncio.to_thread(self.controller.evaluate, reading, battery)

        for listener in list(self._listeners):
            if self._dispatcher is None:
                self._invoke_listener(listener, reading, battery)
            else:
                self._dispatcher(
                    lambda listener=listener: self._invoke_listener(listener, reading, battery)
                )

    def _invoke_listener(
        self, listener: ReadingListener, reading: FusedReading, battery: BatteryStatus
    ) -> None:
        try:
            listener(reading, battery)
        except Exception as e:
            log.error(
                READING_LISTENER_FAILED,
                listener=getattr(listener, "__name__", repr(listener)),
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )


def resolve_scheme_bindings(
    settings: AppConfig, applier: SchemeApplier | None
) -> SchemeBindings:
    """Load the configured bindings, falling back to defaults when the file is absent.

    power-profiles-daemon has fixed profile names, so its defaults apply when
    no bindings file exists. Other backends get empty bindings (nothing can
    be applied) and a warning.

    Raises:
        SchemeBindingsError: If the file exists but cannot be parsed or validated.
    """
    path = settings.scheme_bindings_path
    if path.exists():
        return load_scheme_bindings(path)

    if isinstance(applier, PowerProfilesSchemeApplier):
        log.info("scheme_bindings_defaulted", backend="powerprofiles", path=str(path))
        return SchemeBindings.for_power_profiles()

    if applier is not None:
        log.warning("scheme_bindings_not_found", path=str(path))
    return SchemeBindings()
