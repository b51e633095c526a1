"""Sensor fusion: one canonical value per metric from redundant CPU sensors.

A machine usually exposes several sensors for the same quantity (one load
sensor per core plus a package total, one clock per core, several thermal
zones). The pipeline tracks a single number per quantity:

- Temperature and frequency: the maximum across CPU sensors (the hottest
  point and the fastest core are what matter, not an average).
- Load: the maximum across sensors, unless there are several load sensors and
  one of them is a package aggregate labelled "Total", which is used instead.

Frequencies above 10,000 are assumed to be kHz and converted to MHz.
"""

from collections.abc import Iterable

from powerpilot.types import FusedReading, SensorKind, SensorSample

KHZ_THRESHOLD = 10_000.0
AGGREGATE_LOAD_LABEL = "total"


def normalize_frequency_mhz(value: float) -> float:
    """Convert a raw clock reading to MHz.

    Args:
        value: Raw sensor value (MHz, or kHz when above 10,000).

    Returns:
        Frequency in MHz.
    """
    if value > KHZ_THRESHOLD:
        return value / 1000.0
    return value


def _max_or_none(values: Iterable[float]) -> float | None:
    result: float | None = None
    for value in values:
        if result is None or value > result:
            result = value
    return result


def fuse_samples(samples: Iterable[SensorSample]) -> FusedReading:
    """Collapse all samples of one poll into a FusedReading.

    Invalid samples (missing or non-finite values) and non-CPU hardware are
    ignored. Never raises for bad data: a metric with no usable sample is None.

    Args:
        samples: Every sensor sample reported by the provider for this poll.

    Returns:
        FusedReading with load %, frequency in MHz and hottest temperature.
    """
    loads: list[SensorSample] = []
    clocks: list[float] = []
    temps: list[float] = []

    for sample in samples:
        if not sample.is_valid or not sample.is_cpu_hardware:
            continue
        value = float(sample.value)  # type: ignore[arg-type]
        if sample.kind is SensorKind.LOAD:
            loads.append(sample)
        elif sample.kind is SensorKind.FREQUENCY:
            clocks.append(normalize_frequency_mhz(value))
        elif sample.kind is SensorKind.TEMPERATURE:
            temps.append(value)

    return FusedReading(
        load_percent=_fuse_load(loads),
        frequency_mhz=_max_or_none(clocks),
        max_temp_celsius=_max_or_none(temps),
    )


def _fuse_load(loads: list[SensorSample]) -> float | None:
    """Pick the package total when available, else the busiest sensor."""
    load = _max_or_none(float(s.value) for s in loads)  # type: ignore[arg-type]
    if len(loads) > 1:
        for sample in loads:
            if AGGREGATE_LOAD_LABEL in sample.name.lower():
                return float(sample.value)  # type: ignore[arg-type]
    return load


class SensorFusion:
    """Stateless fusion step used by the poll scheduler.

    Kept as a class so the scheduler can be handed an alternative fusion
    strategy in tests.
    """

    def fuse(self, samples: Iterable[SensorSample]) -> FusedReading:
        """Fuse one poll's samples. See fuse_samples()."""
        return fuse_samples(samples)
