"""metricwire - a line-protocol metrics collection service."""

from metricwire.core.buffer import MetricBuffer
from metricwire.core.clock import ManualClock, SystemClock
from metricwire.core.errors import (
    DuplicateSource,
    InvalidValue,
    MalformedCommand,
    MetricwireError,
    SessionNotBound,
    UnknownMetric,
    UnknownSource,
    UnrecognizedCommand,
)
from metricwire.core.models import Sample, SourceInfo
from metricwire.core.registry import SourceRegistry
from metricwire.core.session import Session

__version__ = "0.1.0"

__all__ = [
    "DuplicateSource",
    "InvalidValue",
    "MalformedCommand",
    "ManualClock",
    "MetricBuffer",
    "MetricwireError",
    "Sample",
    "Session",
    "SessionNotBound",
    "SourceInfo",
    "SourceRegistry",
    "SystemClock",
    "UnknownMetric",
    "UnknownSource",
    "UnrecognizedCommand",
    "__version__",
]
