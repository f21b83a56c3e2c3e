"""Registered data sources and their metrics."""

from metricwire.core.buffer import MetricBuffer
from metricwire.core.errors import UnknownMetric
from metricwire.core.models import Sample, SourceInfo


class Source:
    """A named data source owning one buffer per metric.

    Buffers are created on the first write to a metric name, so a metric
    that exists always holds at least one sample.

    Args:
        name: Unique source name.
        kind: Free-form type tag.
        capacity: Retention capacity for each metric buffer.
    """

    def __init__(self, name: str, kind: str, capacity: int) -> None:
        self.name = name
        self.kind = kind
        self._capacity = capacity
        # dicts keep insertion order, which gives first-seen metric order
        self._metrics: dict[str, MetricBuffer] = {}

    @property
    def info(self) -> SourceInfo:
        return SourceInfo(name=self.name, kind=self.kind)

    def metric_names(self) -> list[str]:
        """Return recorded metric names in first-seen order."""
        return list(self._metrics)

    def record_metric(self, name: str, timestamp: int, value: float) -> Sample:
        """Record a sample, creating the metric buffer on first use."""
        buffer = self._metrics.get(name)
        if buffer is None:
            buffer = MetricBuffer(self._capacity)
            self._metrics[name] = buffer
        return buffer.record(timestamp, value)

    def get_metric(self, name: str) -> MetricBuffer:
        """Return the buffer for a metric.

        Raises:
            UnknownMetric: If no sample was ever recorded under the name.
        """
        try:
            return self._metrics[name]
        except KeyError:
            raise UnknownMetric(self.name, name) from None
