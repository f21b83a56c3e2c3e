"""Line protocol parsing and reply formatting.

Commands are single lines of space-separated fields with a case-sensitive
keyword first. Every command produces exactly one reply line.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from metricwire.core.errors import InvalidValue, MalformedCommand, UnrecognizedCommand
from metricwire.core.models import Sample, SourceInfo

REGISTER = "REGISTER"
LIST = "LIST"
METRIC = "METRIC"
METRICS = "METRICS"

KEYWORDS = frozenset({REGISTER, LIST, METRIC, METRICS})

ACK = "ACK"
ERR = "ERR"
ERR_UNRECOGNIZED = "ERR UNRECOGNIZED CMD"


@dataclass(frozen=True)
class Command:
    """A parsed command line.

    Attributes:
        keyword: One of REGISTER, LIST, METRIC, METRICS.
        args: Fields following the keyword, in order.
    """

    keyword: str
    args: tuple[str, ...] = ()

    def expect_args(self, *counts: int) -> tuple[str, ...]:
        """Return the arguments if their number is one of ``counts``.

        Raises:
            MalformedCommand: If the argument count does not match.
        """
        if len(self.args) not in counts:
            raise MalformedCommand(
                f"{self.keyword} takes {' or '.join(map(str, counts))} "
                f"argument(s), got {len(self.args)}"
            )
        return self.args


def parse_command(line: str) -> Command:
    """Parse one command line.

    Args:
        line: Raw line, with or without its trailing newline.

    Returns:
        The parsed Command.

    Raises:
        UnrecognizedCommand: If the line is blank or the keyword is unknown.
    """
    fields = line.rstrip("\r\n").split(" ")
    keyword, args = fields[0], tuple(fields[1:])
    if keyword not in KEYWORDS:
        raise UnrecognizedCommand(f"unrecognized command {keyword!r}")
    return Command(keyword=keyword, args=args)


def parse_value(raw: str) -> float:
    """Parse a metric value.

    Rejects anything that is not a finite float, matching how timestamps
    and values are validated elsewhere.

    Raises:
        InvalidValue: If the value does not parse or is NaN or infinite.
    """
    try:
        value = float(raw)
    except ValueError:
        raise InvalidValue(f"cannot parse {raw!r} as a number") from None
    if math.isnan(value) or math.isinf(value):
        raise InvalidValue(f"value must be finite, got {raw!r}")
    return value


def format_sample(sample: Sample) -> str:
    """Render a sample as ``timestamp:value`` with two decimals."""
    return f"{sample.timestamp}:{sample.value:.2f}"


def _join(*parts: str | Iterable[str]) -> str:
    fields: list[str] = []
    for part in parts:
        if isinstance(part, str):
            fields.append(part)
        else:
            fields.extend(part)
    return " ".join(fields)


def format_list(sources: Iterable[SourceInfo]) -> str:
    """Render the LIST reply, e.g. ``LIST water:source``."""
    return _join(LIST, (f"{s.name}:{s.kind}" for s in sources))


def format_metric_names(source_name: str, names: Iterable[str]) -> str:
    """Render the ``METRICS <source>`` reply."""
    return _join(METRICS, source_name, names)


def format_samples(source_name: str, metric_name: str, samples: Iterable[Sample]) -> str:
    """Render the ``METRICS <source> <metric>`` reply, oldest sample first."""
    return _join(METRICS, source_name, metric_name, map(format_sample, samples))
