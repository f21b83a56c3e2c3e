"""Errors raised by the registry and the command protocol.

Every error here is recoverable per command: the session turns it into a
reply line and keeps reading from the same connection.
"""


class MetricwireError(Exception):
    """Base class for all metricwire errors."""


class MalformedCommand(MetricwireError):
    """A command has the wrong number of arguments or an empty field."""


class UnrecognizedCommand(MalformedCommand):
    """A command line does not start with a known keyword."""


class DuplicateSource(MetricwireError):
    """A source with the requested name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"source {name!r} already registered")
        self.name = name


class UnknownSource(MetricwireError):
    """No source with the requested name is registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown source {name!r}")
        self.name = name


class UnknownMetric(MetricwireError):
    """The source has never recorded a sample under the requested metric."""

    def __init__(self, source: str, metric: str) -> None:
        super().__init__(f"unknown metric {metric!r} for source {source!r}")
        self.source = source
        self.metric = metric


class InvalidValue(MetricwireError):
    """A metric value is not a finite number."""


class SessionNotBound(MetricwireError):
    """The connection has not registered a source yet."""
