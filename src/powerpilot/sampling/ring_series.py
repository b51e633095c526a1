"""Fixed-capacity ring buffer of scalar samples for graphs and range scaling."""

import threading

EMPTY_RANGE: tuple[float, float] = (0.0, 100.0)
MIN_RANGE_PADDING = 1.0
RANGE_PADDING_RATIO = 0.1


class RingTimeSeries:
    """Circular buffer of floats with O(1) append.

    Storage is allocated once; when full, each append overwrites the oldest
    slot. Readout is always oldest to newest regardless of the write cursor.

    Usage:
        >>> series = RingTimeSeries(capacity=3)
        >>> for v in (1.0, 2.0, 3.0, 4.0):
        ...     series.append(v)
        >>> series.read_ordered()
        [2.0, 3.0, 4.0]
    """

    def __init__(self, capacity: int = 80) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._data: list[float] = [0.0] * capacity
        self._index = 0
        self._count = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Maximum number of samples kept."""
        return len(self._data)

    @property
    def count(self) -> int:
        """Number of live samples (0..capacity)."""
        return self._count

    def __len__(self) -> int:
        return self._count

    def append(self, value: float) -> None:
        """Append a sample, overwriting the oldest one when full."""
        with self._lock:
            self._data[self._index] = float(value)
            self._index = (self._index + 1) % len(self._data)
            if self._count < len(self._data):
                self._count += 1

    def read_ordered(self, max_len: int | None = None) -> list[float]:
        """Return a fresh list of the most recent samples, oldest first.

        Args:
            max_len: Upper bound on the number of values returned. Defaults to capacity.

        Returns:
            Up to min(count, max_len) values in chronological order.
        """
        with self._lock:
            limit = self._count if max_len is None else min(self._count, max_len)
            if limit <= 0:
                return []
            capacity = len(self._data)
            # Oldest live slot is the write cursor once the buffer has wrapped
            start = self._index if self._count == capacity else 0
            skip = self._count - limit
            return [self._data[(start + skip + i) % capacity] for i in range(limit)]

    def min_max_padded(self) -> tuple[float, float]:
        """Return the (low, high) display range of the live samples.

        The natural range is widened on each side by 10% of its span, but by
        at least 1.0 so a flat series still gets a non-zero height.
        """
        with self._lock:
            if self._count < 1:
                return EMPTY_RANGE
            capacity = len(self._data)
            start = self._index if self._count == capacity else 0
            live = [self._data[(start + i) % capacity] for i in range(self._count)]

        low = min(live)
        high = max(live)
        pad = max((high - low) * RANGE_PADDING_RATIO, MIN_RANGE_PADDING)
        return (low - pad, high + pad)
