"""Periodic, non-overlapping sensor and battery acquisition.

The PollScheduler drives acquisition on a fixed interval and hands each
result to a single consumer:

    timer tick → worker thread: provider.poll() → fuse → battery.query()
               → event loop: consumer(reading, battery)

Rules:
- One in-flight flag covers a whole poll: it is set when a tick starts
  acquiring and cleared only after the result has been delivered. Two
  acquisitions never overlap.
- The timer never waits for a slow poll. A tick that finds the flag set is
  skipped (counted and logged), not queued.
- Provider exceptions become an empty reading / unknown battery status for
  that tick. The next tick is the retry.

Usage:
    scheduler = PollScheduler(sensors, battery, consumer=on_reading)
    await scheduler.start(interval_ms=1000)
    # ... later ...
    scheduler.reconfigure(2000)
    await scheduler.stop()
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

from powerpilot.config.validators import DEFAULT_POLL_INTERVAL_MS, validate_poll_interval_ms
from powerpilot.providers.base import BatteryStatusProvider, HardwareSensorProvider
from powerpilot.sampling.fusion import SensorFusion
from powerpilot.telemetry import (
    BATTERY_QUERY_FAILED,
    POLL_CONSUMER_FAILED,
    POLL_DELIVERY_SKIPPED,
    POLL_INTERVAL_CHANGED,
    POLL_RESULT_DISCARDED,
    PROVIDER_POLL_FAILED,
    SCHEDULER_STARTED,
    SCHEDULER_STOPPED,
    SENSOR_POLL,
    get_logger,
)
from powerpilot.types import BatteryStatus, FusedReading

log = get_logger(__name__)

ReadingConsumer = Callable[[FusedReading, BatteryStatus], Awaitable[None] | None]


class PollScheduler:
    """Fixed-cadence acquisition guarded by a single in-flight flag.

    Attributes:
        interval_ms: Current polling interval in milliseconds.
        running: True between start() and stop().
        delivered_count: Number of results handed to the consumer.
        skipped_count: Number of polls skipped because the previous one was in flight.
    """

    def __init__(
        self,
        sensor_provider: HardwareSensorProvider,
        battery_provider: BatteryStatusProvider,
        consumer: ReadingConsumer,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        fusion: SensorFusion | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            sensor_provider: Hardware sensor source (already opened by the owner).
            battery_provider: Battery status source.
            consumer: Called with each delivered (reading, battery); may be a coroutine function.
            interval_ms: Polling interval, one of the recognized presets.
            fusion: Fusion step; defaults to SensorFusion().

        Raises:
            ValueError: If interval_ms is not a recognized preset.
        """
        self.interval_ms = validate_poll_interval_ms(interval_ms)
        self.running = False
        self.delivered_count = 0
        self.skipped_count = 0

        self._sensor_provider = sensor_provider
        self._battery_provider = battery_provider
        self._consumer = consumer
        self._fusion = fusion or SensorFusion()

        self._timer_task: asyncio.Task[None] | None = None
        self._tick_tasks: set[asyncio.Task[None]] = set()
        self._busy = False
        self._run_id = 0
        self._next_seq = 0

    @property
    def busy(self) -> bool:
        """True from the start of an acquisition until its result is delivered."""
        return self._busy

    @property
    def in_flight(self) -> int:
        """Number of timer ticks whose acquisition or delivery has not finished."""
        return sum(1 for task in self._tick_tasks if not task.done())

    async def start(self, interval_ms: int | None = None) -> None:
        """Start the periodic timer. The first tick fires immediately.

        Args:
            interval_ms: Optional new interval (recognized preset).
        """
        if self.running:
            log.warning("poll_scheduler_already_running", interval_ms=self.interval_ms)
            return

        if interval_ms is not None:
            self.interval_ms = validate_poll_interval_ms(interval_ms)

        self.running = True
        self._run_id += 1
        self._timer_task = asyncio.create_task(self._timer_loop(self._run_id))
        log.info(SCHEDULER_STARTED, interval_ms=self.interval_ms)

    def reconfigure(self, interval_ms: int) -> None:
        """Change the interval, restarting the timer.

        In-flight acquisitions are not aborted and may still deliver.
        Must be called from the event loop thread while running.

        Raises:
            ValueError: If interval_ms is not a recognized preset.
        """
        new_interval = validate_poll_interval_ms(interval_ms)
        old_interval = self.interval_ms
        self.interval_ms = new_interval

        if self.running:
            if self._timer_task is not None:
                self._timer_task.cancel()
            self._timer_task = asyncio.create_task(self._timer_loop(self._run_id))

        log.info(POLL_INTERVAL_CHANGED, old_interval_ms=old_interval, interval_ms=new_interval)

    async def stop(self) -> None:
        """Stop the timer and wait for in-flight acquisitions.

        Results of acquisitions that finish after stop() are discarded.
        """
        was_running = self.running
        self.running = False
        self._run_id += 1

        if self._timer_task is not None:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass  # Expected
            self._timer_task = None

        pending = [task for task in self._tick_tasks if not task.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if was_running:
            log.info(
                SCHEDULER_STOPPED,
                delivered_count=self.delivered_count,
                skipped_count=self.skipped_count,
            )

    async def poll_once(self) -> tuple[FusedReading, BatteryStatus] | None:
        """Acquire once and deliver, outside the timer.

        Subject to the same in-flight flag as timer ticks.

        Returns:
            The acquired (reading, battery) pair, or None if another poll
            was still in flight and this one was skipped.
        """
        if self._busy:
            self._skip(reason="poll_once")
            return None

        self._busy = True
        seq = self._take_seq()
        try:
            reading, battery = await asyncio.to_thread(self.acquire)
            await self._deliver(seq, reading, battery)
        finally:
            self._busy = False
        return reading, battery

    def acquire(self) -> tuple[FusedReading, BatteryStatus]:
        """Poll both providers and fuse the sensor samples (blocking).

        Never raises: provider failures degrade to empty/unknown values.
        """
        try:
            samples = self._sensor_provider.poll()
            reading = self._fusion.fuse(samples or [])
        except Exception as e:
            log.debug(PROVIDER_POLL_FAILED, error=str(e), error_type=type(e).__name__)
            reading = FusedReading.empty()

        try:
            battery = self._battery_provider.query() or BatteryStatus.unknown()
        except Exception as e:
            log.debug(BATTERY_QUERY_FAILED, error=str(e), error_type=type(e).__name__)
            battery = BatteryStatus.unknown()

        log.debug(
            SENSOR_POLL,
            load_percent=reading.load_percent,
            frequency_mhz=reading.frequency_mhz,
            max_temp_celsius=reading.max_temp_celsius,
            battery_percent=battery.percent,
            on_battery=battery.on_battery,
        )
        return reading, battery

    def _take_seq(self) -> int:
        seq = self._next_seq
        self._next_seq += 1
        return seq

    def _skip(self, reason: str) -> None:
        self.skipped_count += 1
        log.debug(POLL_DELIVERY_SKIPPED, reason=reason, skipped_count=self.skipped_count)

    def _spawn_tick(self, run_id: int) -> None:
        # Set before the task is scheduled; the next timer iteration checks it.
        self._busy = True
        task = asyncio.create_task(self._tick(run_id, self._take_seq()))
        self._tick_tasks.add(task)
        task.add_done_callback(self._tick_tasks.discard)

    async def _timer_loop(self, run_id: int) -> None:
        """Fire a tick, then sleep one interval, until stopped or reconfigured."""
        while self.running and run_id == self._run_id:
            if self._busy:
                self._skip(reason="in_flight")
            else:
                self._spawn_tick(run_id)
            await asyncio.sleep(self.interval_ms / 1000.0)

    async def _tick(self, run_id: int, seq: int) -> None:
        try:
            reading, battery = await asyncio.to_thread(self.acquire)

            if not self.running or run_id != self._run_id:
                log.debug(POLL_RESULT_DISCARDED, seq=seq, reason="stopped")
                return

            await self._deliver(seq, reading, battery)
        finally:
            self._busy = False

    async def _deliver(self, seq: int, reading: FusedReading, battery: BatteryStatus) -> None:
        try:
            result = self._consumer(reading, battery)
            if inspect.isawaitable(result):
                await result
            self.delivered_count += 1
        except Exception as e:
            log.error(
                POLL_CONSUMER_FAILED,
                seq=seq,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
