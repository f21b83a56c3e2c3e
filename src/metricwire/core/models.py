"""Core domain models for collected metric data."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """A single metric observation.

    Attributes:
        timestamp: Unix timestamp in whole seconds, taken from the clock.
        value: The observed value.
    """

    timestamp: int
    value: float


@dataclass(frozen=True)
class SourceInfo:
    """A registered source as reported by listings.

    Attributes:
        name: Unique source name (e.g., water).
        kind: Free-form type tag supplied at registration.
    """

    name: str
    kind: str
