"""End-to-end tests for the TCP line-protocol server."""

import asyncio

import pytest

from metricwire.adapters.server.tcp import MetricServer
from metricwire.core.registry import SourceRegistry

# All tests in this module are tier 2 (integration tests with socket I/O)
pytestmark = [pytest.mark.tier(2), pytest.mark.server]

SIMPLE_COMMAND_CASES = {
    "blank_list": [("LIST", "LIST")],
    "list_enforces_no_args": [("LIST SOMETHING", "ERR")],
    "register_then_list": [
        ("REGISTER water source", "ACK"),
        ("LIST", "LIST water:source"),
    ],
    "register_arity": [("REGISTER water", "ERR")],
    "metric_requires_registration": [("METRIC test 10.000", "ERR")],
    "metric_registration": [
        ("REGISTER water source", "ACK"),
        ("METRIC level 91.120", "ACK"),
        ("METRICS water", "METRICS water level"),
    ],
    "metric_requires_float": [
        ("REGISTER water source", "ACK"),
        ("METRIC level something", "ERR"),
    ],
    "metrics_list": [
        ("REGISTER water source", "ACK"),
        ("METRIC level 1", "ACK"),
        ("METRIC level 2", "ACK"),
        ("METRIC level 3", "ACK"),
        ("METRICS water level", "METRICS water level 0:1.00 0:2.00 0:3.00"),
    ],
    "double_registration_fails": [
        ("REGISTER water source", "ACK"),
        ("REGISTER water barrel", "ERR"),
    ],
    "unknown_metric_fails": [
        ("REGISTER water source", "ACK"),
        ("METRICS water level", "ERR"),
    ],
    "max_metric_count": [
        ("REGISTER water source", "ACK"),
        ("METRIC level 1", "ACK"),
        ("METRIC level 2", "ACK"),
        ("METRIC level 3", "ACK"),
        ("METRIC level 4", "ACK"),
        ("METRIC level 5", "ACK"),
        ("METRICS water level", "METRICS water level 0:2.00 0:3.00 0:4.00 0:5.00"),
    ],
    "unknown_command": [("DOODLE", "ERR UNRECOGNIZED CMD")],
    "blank_line": [("", "ERR UNRECOGNIZED CMD")],
}


@pytest.mark.parametrize(
    "interactions",
    list(SIMPLE_COMMAND_CASES.values()),
    ids=list(SIMPLE_COMMAND_CASES),
)
async def test_simple_commands(connect, interactions: list[tuple[str, str]]) -> None:
    """Each command gets exactly the expected reply line."""
    client = await connect()

    for send, expect in interactions:
        assert await client.send(send) == expect, f"reply to {send!r}"


async def test_registry_shared_between_connections(connect) -> None:
    """Sources registered on one connection are visible from another."""
    first = await connect()
    second = await connect()

    assert await first.send("REGISTER water source") == "ACK"
    assert await first.send("METRIC level 4.5") == "ACK"

    assert await second.send("LIST") == "LIST water:source"
    assert await second.send("REGISTER water barrel") == "ERR"
    assert await second.send("METRICS water level") == "METRICS water level 0:4.50"


async def test_binding_is_per_connection(connect) -> None:
    """A second connection is not bound to the first connection's source."""
    first = await connect()
    second = await connect()

    assert await first.send("REGISTER water source") == "ACK"
    assert await second.send("METRIC level 1") == "ERR"


async def test_concurrent_registration_single_winner(connect) -> None:
    """Racing REGISTERs from many connections yield exactly one ACK."""
    clients = [await connect() for _ in range(10)]

    replies = await asyncio.gather(
        *(client.send("REGISTER water source") for client in clients)
    )

    assert sorted(replies) == ["ACK"] + ["ERR"] * 9


async def test_disconnect_leaves_registry_intact(
    connect, registry: SourceRegistry
) -> None:
    """Closing a connection does not remove what it registered."""
    client = await connect()
    await client.send("REGISTER water source")
    await client.send("METRIC level 1")
    await client.close()

    other = await connect()
    assert await other.send("METRICS water level") == "METRICS water level 0:1.00"
    assert [s.name for s in registry.list()] == ["water"]


async def test_final_line_without_newline_is_answered(tcp_server: MetricServer) -> None:
    """A last command sent without a newline before EOF still gets a reply."""
    reader, writer = await asyncio.open_connection("127.0.0.1", tcp_server.port)
    writer.write(b"LIST")
    writer.write_eof()

    reply = await asyncio.wait_for(reader.readline(), timeout=5)

    assert reply == b"LIST\n"
    writer.close()
    await writer.wait_closed()


async def test_crlf_terminated_lines(tcp_server: MetricServer) -> None:
    reader, writer = await asyncio.open_connection("127.0.0.1", tcp_server.port)
    writer.write(b"REGISTER water source\r\nLIST\r\n")
    await writer.drain()

    assert await asyncio.wait_for(reader.readline(), timeout=5) == b"ACK\n"
    assert await asyncio.wait_for(reader.readline(), timeout=5) == b"LIST water:source\n"
    writer.close()
    await writer.wait_closed()


async def test_server_close_drops_connections(registry: SourceRegistry) -> None:
    """Closing the server ends open client connections."""
    server = MetricServer(registry, port=0)
    await server.start()
    reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
    writer.write(b"LIST\n")
    assert await asyncio.wait_for(reader.readline(), timeout=5) == b"LIST\n"

    server.close()
    await asyncio.wait_for(server.wait_closed(), timeout=5)

    assert await asyncio.wait_for(reader.read(), timeout=5) == b""
    writer.close()


async def test_port_requires_started_server(registry: SourceRegistry) -> None:
    with pytest.raises(RuntimeError, match="not started"):
        _ = MetricServer(registry).port
