"""Thread-safe registry of sources shared by all connections."""

from __future__ import annotations

import logging
import threading

from metricwire.core.clock import SystemClock
from metricwire.core.errors import DuplicateSource, MalformedCommand, UnknownSource
from metricwire.core.models import Sample, SourceInfo
from metricwire.core.ports import ClockPort
from metricwire.core.source import Source

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Registry mapping source names to sources.

    Implements SourceRegistryPort. A single ``threading.Lock`` guards every
    entry point, so the registry is safe to share between asyncio tasks and
    plain threads. Reads return copies taken under the lock.

    Args:
        capacity: Number of samples retained per metric.
        clock: Clock used to timestamp recorded samples.
    """

    def __init__(self, capacity: int, clock: ClockPort | None = None) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._clock = clock if clock is not None else SystemClock()
        self._sources: dict[str, Source] = {}
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def register(self, name: str, kind: str) -> SourceInfo:
        """Register a new source.

        Args:
            name: Unique, non-empty source name.
            kind: Non-empty type tag.

        Returns:
            The registered source's name and kind.

        Raises:
            MalformedCommand: If name or kind is empty.
            DuplicateSource: If the name is already registered.
        """
        if not name or not kind:
            raise MalformedCommand("source name and kind must be non-empty")
        with self._lock:
            if name in self._sources:
                raise DuplicateSource(name)
            source = Source(name, kind, self._capacity)
            self._sources[name] = source
        logger.info("Registered source %s (%s)", name, kind)
        return source.info

    def list(self) -> list[SourceInfo]:
        """Return all registered sources in registration order."""
        with self._lock:
            return [source.info for source in self._sources.values()]

    def lookup(self, name: str) -> Source:
        """Return the source registered under a name.

        Raises:
            UnknownSource: If the name is not registered.
        """
        with self._lock:
            return self._get(name)

    def record_metric(self, source_name: str, metric_name: str, value: float) -> Sample:
        """Record a value stamped with the current clock time.

        Raises:
            UnknownSource: If the source is not registered.
        """
        with self._lock:
            source = self._get(source_name)
            return source.record_metric(metric_name, self._clock.now(), value)

    def query_metric_names(self, source_name: str) -> list[str]:
        """Return the source's metric names in first-seen order.

        Raises:
            UnknownSource: If the source is not registered.
        """
        with self._lock:
            return self._get(source_name).metric_names()

    def query_samples(self, source_name: str, metric_name: str) -> list[Sample]:
        """Return a metric's retained samples, oldest first.

        Raises:
            UnknownSource: If the source is not registered.
            UnknownMetric: If nothing was recorded under the metric name.
        """
        with self._lock:
            return self._get(source_name).get_metric(metric_name).snapshot()

    def _get(self, name: str) -> Source:
        # caller holds self._lock
        try:
            return self._sources[name]
        except KeyError:
            raise UnknownSource(name) from None
