"""Per-connection protocol state machine."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from metricwire.core import protocol
from metricwire.core.errors import (
    MalformedCommand,
    MetricwireError,
    SessionNotBound,
    UnrecognizedCommand,
)
from metricwire.core.ports import SourceRegistryPort
from metricwire.core.protocol import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unbound:
    """No source has been registered over this connection yet."""


@dataclass(frozen=True)
class Bound:
    """The connection registered ``source_name`` and records metrics against it."""

    source_name: str


SessionState = Unbound | Bound


class Session:
    """Protocol handler for one client connection.

    Starts Unbound and moves to Bound on the first successful REGISTER.
    The binding never changes afterwards. The session keeps only the bound
    source's name; all reads and writes go through the shared registry.

    Args:
        registry: Registry shared by every connection on the server.
        peer: Label for the remote end, used in log messages.
    """

    def __init__(self, registry: SourceRegistryPort, peer: str = "-") -> None:
        self._registry = registry
        self._peer = peer
        self.state: SessionState = Unbound()
        self._handlers: dict[str, Callable[[Command], str]] = {
            protocol.REGISTER: self._register,
            protocol.LIST: self._list,
            protocol.METRIC: self._metric,
            protocol.METRICS: self._metrics,
        }

    @property
    def bound_source(self) -> str | None:
        """Name of the source this connection registered, if any."""
        if isinstance(self.state, Bound):
            return self.state.source_name
        return None

    def handle(self, line: str) -> str:
        """Execute one command line and return its reply, without newline.

        Errors never escape: they are turned into ``ERR`` or
        ``ERR UNRECOGNIZED CMD`` and the session stays usable.
        """
        try:
            command = protocol.parse_command(line)
            return self._handlers[command.keyword](command)
        except UnrecognizedCommand as e:
            logger.debug("%s: %s", self._peer, e)
            return protocol.ERR_UNRECOGNIZED
        except MetricwireError as e:
            logger.debug("%s: %s failed: %s", self._peer, line.rstrip("\r\n"), e)
            return protocol.ERR

    def _register(self, command: Command) -> str:
        name, kind = command.expect_args(2)
        self._registry.register(name, kind)
        if isinstance(self.state, Unbound):
            self.state = Bound(name)
        return protocol.ACK

    def _list(self, command: Command) -> str:
        command.expect_args(0)
        return protocol.format_list(self._registry.list())

    def _metric(self, command: Command) -> str:
        metric_name, raw_value = command.expect_args(2)
        if not metric_name:
            raise MalformedCommand("metric name must be non-empty")
        if not isinstance(self.state, Bound):
            raise SessionNotBound("REGISTER a source before sending metrics")
        value = protocol.parse_value(raw_value)
        self._registry.record_metric(self.state.source_name, metric_name, value)
        return protocol.ACK

    def _metrics(self, command: Command) -> str:
        args = command.expect_args(1, 2)
        source_name = args[0]
        if len(args) == 1:
            names = self._registry.query_metric_names(source_name)
            return protocol.format_metric_names(source_name, names)
        metric_name = args[1]
        samples = self._registry.query_samples(source_name, metric_name)
        return protocol.format_samples(source_name, metric_name, samples)
