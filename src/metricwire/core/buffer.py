"""Bounded per-metric sample storage.

Provides a fixed-capacity buffer that automatically evicts the oldest
sample when full, so memory per metric stays predictable.
"""

from collections import deque

from metricwire.core.models import Sample


class MetricBuffer:
    """Ring buffer of samples for a single metric.

    Stores samples in a fixed-size circular buffer. When the buffer
    is full, the oldest sample is evicted before the new one is appended.

    Not synchronized on its own; SourceRegistry serializes access.

    Args:
        capacity: Maximum number of samples to retain.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._buffer: deque[Sample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Maximum number of retained samples."""
        # maxlen is always set by __init__
        return self._buffer.maxlen  # type: ignore[return-value]

    def __len__(self) -> int:
        return len(self._buffer)

    def record(self, timestamp: int, value: float) -> Sample:
        """Append a sample, evicting the oldest one if the buffer is full."""
        sample = Sample(timestamp=timestamp, value=value)
        self._buffer.append(sample)
        return sample

    def snapshot(self) -> list[Sample]:
        """Return a copy of the retained samples, oldest first."""
        return list(self._buffer)
