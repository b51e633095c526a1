"""Tests for sensor fusion."""

import math

import pytest

from powerpilot.sampling.fusion import SensorFusion, fuse_samples, normalize_frequency_mhz
from powerpilot.types import FusedReading, SensorKind, SensorSample


def _cpu(kind: SensorKind, value: float | None, name: str = "") -> SensorSample:
    return SensorSample(kind=kind, hardware_id="cpu", value=value, name=name, is_cpu=True)


class TestFrequencyNormalization:
    """Test kHz → MHz normalization."""

    def test_khz_converted(self) -> None:
        """Test values above 10,000 are divided by 1000."""
        assert normalize_frequency_mhz(3_600_000.0) == 3600.0

    def test_mhz_unchanged(self) -> None:
        """Test MHz values pass through."""
        assert normalize_frequency_mhz(3600.0) == 3600.0

    def test_threshold_is_exclusive(self) -> None:
        """Test exactly 10,000 is treated as MHz."""
        assert normalize_frequency_mhz(10_000.0) == 10_000.0

    def test_fused_frequency_mixes_units(self) -> None:
        """Test kHz and MHz sensors are compared after normalization."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.FREQUENCY, 3_900_000.0),
                _cpu(SensorKind.FREQUENCY, 3200.0),
            ]
        )
        assert reading.frequency_mhz == 3900.0


class TestFusionRules:
    """Test per-kind fusion rules."""

    def test_temperature_is_maximum(self) -> None:
        """Test the hottest CPU sensor wins."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.TEMPERATURE, 55.0),
                _cpu(SensorKind.TEMPERATURE, 71.5),
                _cpu(SensorKind.TEMPERATURE, 60.0),
            ]
        )
        assert reading.max_temp_celsius == 71.5

    def test_load_is_maximum_without_total(self) -> None:
        """Test the busiest core wins when no aggregate exists."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, 12.0, "Core 0"),
                _cpu(SensorKind.LOAD, 80.0, "Core 1"),
            ]
        )
        assert reading.load_percent == 80.0

    def test_total_load_preferred(self) -> None:
        """Test a "Total" aggregate overrides the maximum."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, 90.0, "Core 0"),
                _cpu(SensorKind.LOAD, 10.0, "Core 1"),
                _cpu(SensorKind.LOAD, 50.0, "CPU Total"),
            ]
        )
        assert reading.load_percent == 50.0

    def test_total_match_is_case_insensitive(self) -> None:
        """Test the aggregate label match ignores case."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, 90.0, "core 0"),
                _cpu(SensorKind.LOAD, 33.0, "cpu total"),
            ]
        )
        assert reading.load_percent == 33.0

    def test_first_total_wins(self) -> None:
        """Test the first of several aggregates is used."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, 40.0, "CPU Total"),
                _cpu(SensorKind.LOAD, 60.0, "Package Total"),
            ]
        )
        assert reading.load_percent == 40.0

    def test_single_total_sample_is_just_maximum(self) -> None:
        """Test a lone load sample is used as-is."""
        reading = fuse_samples([_cpu(SensorKind.LOAD, 42.0, "CPU Total")])
        assert reading.load_percent == 42.0


class TestSampleFiltering:
    """Test that invalid and non-CPU samples are ignored."""

    @pytest.mark.parametrize("bad", [None, math.nan, math.inf, -math.inf])
    def test_invalid_values_ignored(self, bad: float | None) -> None:
        """Test missing and non-finite values never reach the result."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.TEMPERATURE, bad),
                _cpu(SensorKind.TEMPERATURE, 50.0),
            ]
        )
        assert reading.max_temp_celsius == 50.0

    def test_all_invalid_yields_empty(self) -> None:
        """Test all-invalid input gives an all-None reading."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, None),
                _cpu(SensorKind.FREQUENCY, math.nan),
                _cpu(SensorKind.TEMPERATURE, math.inf),
            ]
        )
        assert reading == FusedReading.empty()
        assert reading.is_empty

    def test_empty_input(self) -> None:
        """Test no samples gives an empty reading."""
        assert fuse_samples([]).is_empty

    def test_non_cpu_hardware_ignored(self) -> None:
        """Test GPU or disk sensors are excluded."""
        reading = fuse_samples(
            [
                SensorSample(SensorKind.TEMPERATURE, "gpu", 95.0, hardware_name="NVIDIA GPU"),
                _cpu(SensorKind.TEMPERATURE, 60.0),
            ]
        )
        assert reading.max_temp_celsius == 60.0

    def test_cpu_detected_from_hardware_name(self) -> None:
        """Test untagged samples count as CPU when their name says so."""
        reading = fuse_samples(
            [SensorSample(SensorKind.TEMPERATURE, "k10temp", 66.0, hardware_name="AMD CPU")]
        )
        assert reading.max_temp_celsius == 66.0

    def test_cpu_detected_from_hardware_id(self) -> None:
        """Test the hardware id is used when there is no display name."""
        reading = fuse_samples([SensorSample(SensorKind.LOAD, "/intelcpu/0", 25.0)])
        assert reading.load_percent == 25.0

    def test_invalid_total_does_not_override(self) -> None:
        """Test an invalid aggregate never replaces valid core loads."""
        reading = fuse_samples(
            [
                _cpu(SensorKind.LOAD, 70.0, "Core 0"),
                _cpu(SensorKind.LOAD, 30.0, "Core 1"),
                _cpu(SensorKind.LOAD, None, "CPU Total"),
            ]
        )
        assert reading.load_percent == 70.0


class TestSensorFusion:
    """Test the fusion step object."""

    def test_fuse_is_idempotent(self) -> None:
        """Test fusing the same samples twice gives equal readings."""
        samples = [
            _cpu(SensorKind.LOAD, 20.0, "Core 0"),
            _cpu(SensorKind.FREQUENCY, 2800.0),
            _cpu(SensorKind.TEMPERATURE, 48.0),
        ]
        fusion = SensorFusion()
        assert fusion.fuse(samples) == fusion.fuse(samples)
        assert fusion.fuse(samples) == FusedReading(20.0, 2800.0, 48.0)

    def test_accepts_generator(self) -> None:
        """Test any iterable of samples is accepted."""
        reading = SensorFusion().fuse(
            _cpu(SensorKind.TEMPERATURE, float(t)) for t in (40, 45, 42)
        )
        assert reading.max_temp_celsius == 45.0
