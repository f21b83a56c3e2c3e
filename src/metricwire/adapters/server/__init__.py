"""Network servers exposing the line protocol."""

from metricwire.adapters.server.tcp import MetricServer

__all__ = ["MetricServer"]
