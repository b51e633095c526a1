"""Tests for the power policy classifier."""

import pytest

from powerpilot.policy.classifier import classify
from powerpilot.types import BatteryStatus, Mode

AC = BatteryStatus(percent=100, on_battery=False)


def on_battery(percent: int | None) -> BatteryStatus:
    return BatteryStatus(percent=percent, on_battery=True)


class TestBatteryRules:
    """Test the low-battery rules, which take priority over everything."""

    def test_critical_battery_forces_min(self) -> None:
        """Test charge below 25% on battery recommends Min even under full load."""
        assert classify(99, 95, on_battery(20)) is Mode.MIN

    def test_low_battery_and_light_load(self) -> None:
        """Test charge below 40% with load below 40% recommends Min."""
        assert classify(30, 50, on_battery(35)) is Mode.MIN

    def test_low_battery_busy_falls_through(self) -> None:
        """Test low battery with heavy load reaches the Max rules."""
        assert classify(75, 50, on_battery(35)) is Mode.MAX

    def test_boundary_25_percent_not_critical(self) -> None:
        """Test exactly 25% is not critical."""
        assert classify(50, 50, on_battery(25)) is Mode.BALANCED

    def test_unknown_charge_counts_as_full(self) -> None:
        """Test a missing charge level never triggers the battery rules."""
        assert classify(10, 40, on_battery(None)) is Mode.BALANCED


class TestThermalAndLoadRules:
    """Test the Max rules."""

    def test_hot_cpu_forces_max(self) -> None:
        """Test 85 °C recommends Max regardless of load."""
        assert classify(5, 85, AC) is Mode.MAX

    def test_heavy_load_forces_max_on_battery(self) -> None:
        """Test load >= 85% recommends Max with a healthy battery."""
        assert classify(85, 40, on_battery(80)) is Mode.MAX

    def test_busy_on_battery(self) -> None:
        """Test load >= 70% on battery recommends Max."""
        assert classify(70, 40, on_battery(80)) is Mode.MAX

    def test_moderate_on_battery_is_balanced(self) -> None:
        """Test load between 40 and 70 on battery is Balanced."""
        assert classify(65, 40, on_battery(80)) is Mode.BALANCED

    def test_busy_on_ac(self) -> None:
        """Test load >= 65% on AC recommends Max."""
        assert classify(65, 40, AC) is Mode.MAX


class TestIdleRule:
    """Test the idle-on-AC rule."""

    def test_idle_cool_on_ac(self) -> None:
        """Test low load and cool CPU on AC recommends Min."""
        assert classify(10, 50, AC) is Mode.MIN

    def test_idle_but_warm_on_ac(self) -> None:
        """Test idle but 65 °C on AC stays Balanced."""
        assert classify(10, 65, AC) is Mode.BALANCED

    def test_idle_on_battery_is_not_this_rule(self) -> None:
        """Test the idle rule applies only on AC."""
        assert classify(10, 50, on_battery(80)) is Mode.BALANCED

    def test_missing_sensors_on_ac(self) -> None:
        """Test missing load and temperature count as 0 (idle)."""
        assert classify(None, None, AC) is Mode.MIN


class TestDefault:
    """Test the fallback recommendation."""

    @pytest.mark.parametrize(
        ("load", "temp", "battery"),
        [
            (40, 60, AC),
            (64.9, 84.9, AC),
            (50, 70, on_battery(60)),
        ],
    )
    def test_balanced_otherwise(self, load: float, temp: float, battery: BatteryStatus) -> None:
        """Test values matching no rule recommend Balanced."""
        assert classify(load, temp, battery) is Mode.BALANCED

    def test_deterministic(self) -> None:
        """Test the same inputs always give the same mode."""
        results = {classify(50, 50, AC) for _ in range(10)}
        assert results == {Mode.BALANCED}
