"""Port interfaces for the clock and the source registry.

These protocols define the contracts that adapters depend on.
The TCP server and the HTTP view depend only on these interfaces,
not on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from metricwire.core.models import Sample, SourceInfo


@runtime_checkable
class ClockPort(Protocol):
    """Port for reading the current logical time.

    Examples: SystemClock, ManualClock.
    """

    def now(self) -> int:
        """Return the current time as whole Unix seconds."""
        ...


@runtime_checkable
class SourceRegistryPort(Protocol):
    """Port for registering sources and reading their metrics.

    Examples: SourceRegistry.
    """

    def register(self, name: str, kind: str) -> SourceInfo:
        """Register a new source.

        Raises:
            DuplicateSource: If the name is already registered.
        """
        ...

    def list(self) -> list[SourceInfo]:
        """Return all registered sources in registration order."""
        ...

    def record_metric(self, source_name: str, metric_name: str, value: float) -> Sample:
        """Record a value for a source's metric, stamped with the current time.

        Raises:
            UnknownSource: If the source is not registered.
        """
        ...

    def query_metric_names(self, source_name: str) -> list[str]:
        """Return the metric names recorded for a source, first-seen order.

        Raises:
            UnknownSource: If the source is not registered.
        """
        ...

    def query_samples(self, source_name: str, metric_name: str) -> Sequence[Sample]:
        """Return the retained samples of a metric, oldest first.

        Raises:
            UnknownSource: If the source is not registered.
            UnknownMetric: If nothing was recorded under the metric name.
        """
        ...
