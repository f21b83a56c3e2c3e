"""Shared test fixtures for all test modules."""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest

from metricwire.adapters.server.tcp import MetricServer
from metricwire.core.clock import ManualClock
from metricwire.core.registry import SourceRegistry
from metricwire.core.session import Session

# Capacity used by the protocol scenarios
SCENARIO_CAPACITY = 4


@pytest.fixture
def clock() -> ManualClock:
    """Clock frozen at the Unix epoch."""
    return ManualClock()


@pytest.fixture
def registry(clock: ManualClock) -> SourceRegistry:
    """Registry with scenario capacity and a manual clock."""
    return SourceRegistry(capacity=SCENARIO_CAPACITY, clock=clock)


@pytest.fixture
def session(registry: SourceRegistry) -> Session:
    """Fresh, unbound session on the shared registry."""
    return Session(registry, peer="test")


# === TCP Server Fixtures ===


@pytest.fixture
async def tcp_server(registry: SourceRegistry) -> AsyncGenerator[MetricServer, None]:
    """Running MetricServer on a free local port."""
    async with MetricServer(registry, host="127.0.0.1", port=0) as server:
        yield server


class LineClient:
    """Minimal line-oriented client for the command protocol."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer

    async def send(self, line: str) -> str:
        """Send one command and return the reply without its newline."""
        self.writer.write(f"{line}\n".encode("ascii"))
        await self.writer.drain()
        reply = await asyncio.wait_for(self.reader.readline(), timeout=5)
        assert reply.endswith(b"\n"), f"reply not newline-terminated: {reply!r}"
        return reply.decode("ascii").rstrip("\n")

    async def close(self) -> None:
        self.writer.close()
        await self.writer.wait_closed()


@pytest.fixture
async def connect(
    tcp_server: MetricServer,
) -> AsyncGenerator[Callable[[], Awaitable[LineClient]], None]:
    """Factory fixture opening client connections to ``tcp_server``.

    Usage:
        async def test_something(connect):
            client = await connect()
            assert await client.send("LIST") == "LIST"
    """
    clients: list[LineClient] = []

    async def _connect() -> LineClient:
        reader, writer = await asyncio.open_connection("127.0.0.1", tcp_server.port)
        client = LineClient(reader, writer)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        await client.close()
