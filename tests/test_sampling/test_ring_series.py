"""Tests for the fixed-capacity ring time series."""

import threading

import pytest

from powerpilot.sampling.ring_series import RingTimeSeries


class TestRingConstruction:
    """Test capacity validation and defaults."""

    def test_default_capacity(self) -> None:
        """Test the default capacity is 80 samples."""
        series = RingTimeSeries()
        assert series.capacity == 80
        assert series.count == 0
        assert len(series) == 0

    @pytest.mark.parametrize("capacity", [0, -1, -80])
    def test_non_positive_capacity_rejected(self, capacity: int) -> None:
        """Test that capacity <= 0 raises ValueError."""
        with pytest.raises(ValueError, match="capacity"):
            RingTimeSeries(capacity)


class TestRingAppend:
    """Test append and wrap-around behaviour."""

    def test_count_grows_until_capacity(self) -> None:
        """Test count never exceeds capacity."""
        series = RingTimeSeries(capacity=3)
        for i in range(10):
            series.append(float(i))
            assert series.count == min(i + 1, 3)

    def test_read_before_wrap(self) -> None:
        """Test readout order before the buffer is full."""
        series = RingTimeSeries(capacity=5)
        for v in (1.0, 2.0, 3.0):
            series.append(v)
        assert series.read_ordered() == [1.0, 2.0, 3.0]

    def test_read_after_wrap_is_chronological(self) -> None:
        """Test the oldest values are overwritten and order stays oldest→newest."""
        series = RingTimeSeries(capacity=3)
        for v in (1.0, 2.0, 3.0, 4.0, 5.0):
            series.append(v)
        assert series.read_ordered() == [3.0, 4.0, 5.0]

    def test_exactly_full(self) -> None:
        """Test readout when the cursor has wrapped back to zero."""
        series = RingTimeSeries(capacity=4)
        for v in (1.0, 2.0, 3.0, 4.0):
            series.append(v)
        assert series.read_ordered() == [1.0, 2.0, 3.0, 4.0]

    def test_integers_stored_as_floats(self) -> None:
        """Test appended ints read back as floats."""
        series = RingTimeSeries(capacity=2)
        series.append(7)
        assert series.read_ordered() == [7.0]
        assert isinstance(series.read_ordered()[0], float)


class TestReadOrdered:
    """Test bounded readout."""

    def test_empty(self) -> None:
        """Test empty buffer reads as an empty list."""
        assert RingTimeSeries(capacity=3).read_ordered() == []

    def test_max_len_returns_most_recent(self) -> None:
        """Test max_len keeps the newest values in chronological order."""
        series = RingTimeSeries(capacity=5)
        for v in (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0):
            series.append(v)
        assert series.read_ordered(max_len=2) == [6.0, 7.0]

    def test_max_len_larger_than_count(self) -> None:
        """Test max_len above count returns everything."""
        series = RingTimeSeries(capacity=5)
        series.append(1.0)
        series.append(2.0)
        assert series.read_ordered(max_len=10) == [1.0, 2.0]

    def test_max_len_zero(self) -> None:
        """Test max_len of zero returns nothing."""
        series = RingTimeSeries(capacity=5)
        series.append(1.0)
        assert series.read_ordered(max_len=0) == []

    def test_returns_fresh_list(self) -> None:
        """Test mutating the result does not affect the buffer."""
        series = RingTimeSeries(capacity=3)
        series.append(1.0)
        values = series.read_ordered()
        values.append(99.0)
        assert series.read_ordered() == [1.0]


class TestMinMaxPadded:
    """Test the padded display range."""

    def test_empty_range(self) -> None:
        """Test empty buffer returns (0, 100)."""
        assert RingTimeSeries(capacity=3).min_max_padded() == (0.0, 100.0)

    def test_flat_series_gets_minimum_padding(self) -> None:
        """Test a flat series is padded by 1.0 on each side."""
        series = RingTimeSeries(capacity=5)
        for _ in range(3):
            series.append(10.0)
        assert series.min_max_padded() == (9.0, 11.0)

    def test_proportional_padding(self) -> None:
        """Test padding is 10% of the span when that exceeds 1.0."""
        series = RingTimeSeries(capacity=5)
        series.append(0.0)
        series.append(50.0)
        low, high = series.min_max_padded()
        assert low == pytest.approx(-5.0)
        assert high == pytest.approx(55.0)

    def test_range_uses_only_live_samples(self) -> None:
        """Test overwritten samples no longer affect the range."""
        series = RingTimeSeries(capacity=2)
        for v in (100.0, 20.0, 20.0):
            series.append(v)
        assert series.min_max_padded() == (19.0, 21.0)


class TestConcurrentAccess:
    """Test that reads during appends stay consistent."""

    def test_reads_while_appending(self) -> None:
        """Test concurrent reads always see a bounded, ordered slice."""
        series = RingTimeSeries(capacity=16)
        stop = threading.Event()
        errors: list[str] = []

        def reader() -> None:
            while not stop.is_set():
                values = series.read_ordered()
                if len(values) > 16:
                    errors.append(f"too many values: {len(values)}")
                if values != sorted(values):
                    errors.append(f"out of order: {values}")

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for i in range(5000):
                series.append(float(i))
        finally:
            stop.set()
            thread.join()

        assert errors == []
        assert series.read_ordered() == [float(i) for i in range(4984, 5000)]
