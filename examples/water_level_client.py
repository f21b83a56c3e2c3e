"""Example client pushing water level readings to a metricwire server.

Start a server first:
    metricwire serve --port 7070 --capacity 4

Then run:
    python examples/water_level_client.py

Each command is one line; the server answers each with one line.
"""

import asyncio
import random

HOST = "127.0.0.1"
PORT = 7070


async def send(reader: asyncio.StreamReader, writer: asyncio.StreamWriter, line: str) -> str:
    writer.write(f"{line}\n".encode("ascii"))
    await writer.drain()
    reply = (await reader.readline()).decode("ascii").rstrip("\n")
    print(f"> {line}\n< {reply}")
    return reply


async def main() -> None:
    reader, writer = await asyncio.open_connection(HOST, PORT)
    try:
        await send(reader, writer, "REGISTER water source")
        for _ in range(6):
            await send(reader, writer, f"METRIC level {random.uniform(0, 100):.3f}")
            await asyncio.sleep(1)
        await send(reader, writer, "LIST")
        await send(reader, writer, "METRICS water")
        # Only the most recent samples are retained
        await send(reader, writer, "METRICS water level")
    finally:
        writer.close()
        await writer.wait_closed()


if __name__ == "__main__":
    asyncio.run(main())
