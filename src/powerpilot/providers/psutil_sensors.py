"""Cross-platform CPU sensors using psutil.

Produces a flat list of SensorSample per poll:
- LOAD: one sample per logical core ("Core N") plus a "CPU Total" aggregate
- FREQUENCY: one sample per core (or a single package value) in MHz
- TEMPERATURE: every reading from CPU thermal chips, where the platform
  exposes ``psutil.sensors_temperatures()`` (Linux, FreeBSD)

Fusion picks the canonical value per kind; this module only reports.
"""

import psutil

from powerpilot.telemetry import get_logger
from powerpilot.types import SensorKind, SensorSample

log = get_logger(__name__)

CPU_HARDWARE_ID = "cpu"
CPU_HARDWARE_NAME = "CPU"
TOTAL_LOAD_NAME = "CPU Total"

# Thermal chips that report CPU package/core temperatures
CPU_THERMAL_CHIPS = frozenset({"coretemp", "k10temp", "zenpower", "cpu_thermal", "cpu-thermal"})


class PsutilSensorProvider:
    """HardwareSensorProvider backed by psutil.

    ``psutil.cpu_percent(interval=None)`` reports usage since the previous
    call, so open() primes the counters and each poll measures the time
    since the last one.
    """

    def __init__(self, include_temperatures: bool = True) -> None:
        self.include_temperatures = include_temperatures
        self._opened = False

    @property
    def is_open(self) -> bool:
        """True between open() and close()."""
        return self._opened

    def open(self) -> None:
        """Prime the cpu_percent counters."""
        psutil.cpu_percent(interval=None, percpu=True)
        self._opened = True
        log.debug("psutil_sensor_provider_opened", cpu_count=psutil.cpu_count())

    def close(self) -> None:
        """Nothing to release; marks the provider closed."""
        self._opened = False

    def poll(self) -> list[SensorSample]:
        """Return load, frequency and temperature samples for this instant."""
        samples: list[SensorSample] = []
        samples.extend(self._load_samples())
        samples.extend(self._frequency_samples())
        if self.include_temperatures:
            samples.extend(self._temperature_samples())
        return samples

    def _load_samples(self) -> list[SensorSample]:
        per_core = psutil.cpu_percent(interval=None, percpu=True)
        samples = [
            SensorSample(
                kind=SensorKind.LOAD,
                hardware_id=CPU_HARDWARE_ID,
                value=float(value),
                name=f"Core {index}",
                hardware_name=CPU_HARDWARE_NAME,
                is_cpu=True,
            )
            for index, value in enumerate(per_core)
        ]
        if per_core:
            samples.append(
                SensorSample(
                    kind=SensorKind.LOAD,
                    hardware_id=CPU_HARDWARE_ID,
                    value=sum(per_core) / len(per_core),
                    name=TOTAL_LOAD_NAME,
                    hardware_name=CPU_HARDWARE_NAME,
                    is_cpu=True,
                )
            )
        return samples

    def _frequency_samples(self) -> list[SensorSample]:
        try:
            frequencies = psutil.cpu_freq(percpu=True) or []
        except (AttributeError, NotImplementedError, OSError) as e:
            log.debug("cpu_frequency_unavailable", error=str(e))
            return []

        return [
            SensorSample(
                kind=SensorKind.FREQUENCY,
                hardware_id=CPU_HARDWARE_ID,
                value=float(freq.current) if freq.current else None,
                name=f"Core {index} Clock" if len(frequencies) > 1 else "CPU Clock",
                hardware_name=CPU_HARDWARE_NAME,
                is_cpu=True,
            )
            for index, freq in enumerate(frequencies)
        ]

    def _temperature_samples(self) -> list[SensorSample]:
        read_temperatures = getattr(psutil, "sensors_temperatures", None)
        if read_temperatures is None:
            return []
        try:
            chips = read_temperatures()
        except (NotImplementedError, OSError) as e:
            log.debug("cpu_temperature_unavailable", error=str(e))
            return []

        samples = []
        for chip, entries in (chips or {}).items():
            is_cpu = chip.lower() in CPU_THERMAL_CHIPS
            for index, entry in enumerate(entries):
                samples.append(
                    SensorSample(
                        kind=SensorKind.TEMPERATURE,
                        hardware_id=chip,
                        value=entry.current,
                        name=entry.label or f"{chip} {index}",
                        hardware_name=chip,
                        is_cpu=is_cpu,
                    )
                )
        return samples
