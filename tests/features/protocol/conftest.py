"""BDD step definitions for protocol scenarios.

Scenarios drive Session objects directly; each named client connection
is one Session on the shared registry.
"""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from metricwire.core.clock import ManualClock
from metricwire.core.registry import SourceRegistry
from metricwire.core.session import Session


@dataclass
class ProtocolScenarioContext:
    """State shared between the steps of one scenario."""

    clock: ManualClock = field(default_factory=ManualClock)
    registry: SourceRegistry | None = None
    sessions: dict[str, Session] = field(default_factory=dict)
    replies: list[str] = field(default_factory=list)

    def session(self, name: str) -> Session:
        return self.sessions[name]

    def send(self, name: str, line: str) -> str:
        reply = self.session(name).handle(line)
        self.replies.append(reply)
        return reply


@pytest.fixture
def ctx() -> ProtocolScenarioContext:
    """Fresh scenario context for each test."""
    return ProtocolScenarioContext()


# === Background Steps ===
@given(parsers.parse("a registry retaining {capacity:d} samples per metric"))
def step_registry(ctx: ProtocolScenarioContext, capacity: int) -> None:
    ctx.registry = SourceRegistry(capacity=capacity, clock=ctx.clock)


@given(parsers.parse("a clock frozen at {timestamp:d}"))
def step_clock(ctx: ProtocolScenarioContext, timestamp: int) -> None:
    ctx.clock.set(timestamp)


@given(parsers.parse('a client connection "{name}"'))
def step_connection(ctx: ProtocolScenarioContext, name: str) -> None:
    assert ctx.registry is not None
    ctx.sessions[name] = Session(ctx.registry, peer=name)


@given(parsers.parse('"{client}" has registered "{source}" as "{kind}"'))
def step_registered(
    ctx: ProtocolScenarioContext, client: str, source: str, kind: str
) -> None:
    assert ctx.send(client, f"REGISTER {source} {kind}") == "ACK"
    ctx.replies.clear()


# === Action Steps ===
# Regex so that an empty command line can be sent
@when(parsers.re(r'"(?P<client>[^"]+)" sends "(?P<line>[^"]*)"'))
def step_send(ctx: ProtocolScenarioContext, client: str, line: str) -> None:
    ctx.send(client, line)


@when(parsers.parse('"{client}" sends metric "{metric}" values {first:d} through {last:d}'))
def step_send_values(
    ctx: ProtocolScenarioContext, client: str, metric: str, first: int, last: int
) -> None:
    ctx.replies.clear()
    for value in range(first, last + 1):
        ctx.send(client, f"METRIC {metric} {value}")


@when(parsers.parse("the clock advances {seconds:d} seconds"))
def step_advance(ctx: ProtocolScenarioContext, seconds: int) -> None:
    ctx.clock.advance(seconds)


# === Assertion Steps ===
@then(parsers.re(r'the reply is "(?P<reply>[^"]*)"'))
def step_reply(ctx: ProtocolScenarioContext, reply: str) -> None:
    assert ctx.replies[-1] == reply


@then(parsers.parse('every reply is "{reply}"'))
def step_every_reply(ctx: ProtocolScenarioContext, reply: str) -> None:
    assert ctx.replies
    assert all(r == reply for r in ctx.replies)
