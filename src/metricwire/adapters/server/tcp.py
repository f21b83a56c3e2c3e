"""asyncio TCP server speaking the newline-delimited command protocol.

Each accepted connection gets its own task and its own Session. All
sessions share the registry handed to the server at construction.
"""

import asyncio
import logging
from types import TracebackType

from metricwire.core.logs import log_exception
from metricwire.core.ports import SourceRegistryPort
from metricwire.core.session import Session

logger = logging.getLogger(__name__)

# Largest accepted command line, in bytes
DEFAULT_LINE_LIMIT = 64 * 1024


class MetricServer:
    """TCP server that runs one Session per connection.

    Example:
        ```python
        registry = SourceRegistry(capacity=100)
        async with MetricServer(registry, port=7070) as server:
            await server.serve_forever()
        ```

    Args:
        registry: Registry shared by every connection.
        host: Interface to bind.
        port: Port to bind; 0 picks a free port.
        line_limit: Maximum length of a command line in bytes.
    """

    def __init__(
        self,
        registry: SourceRegistryPort,
        host: str = "127.0.0.1",
        port: int = 0,
        line_limit: int = DEFAULT_LINE_LIMIT,
    ) -> None:
        self.registry = registry
        self.host = host
        self._requested_port = port
        self._line_limit = line_limit
        self._server: asyncio.Server | None = None
        self._connections: set[asyncio.Task[None]] = set()

    @property
    def port(self) -> int:
        """Port the server is listening on.

        Raises:
            RuntimeError: If the server has not been started.
        """
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not started")
        return int(self._server.sockets[0].getsockname()[1])

    async def start(self) -> None:
        """Bind the listening socket and start accepting connections."""
        if self._server is not None:
            return
        self._server = await asyncio.start_server(
            self._handle_connection,
            self.host,
            self._requested_port,
            limit=self._line_limit,
        )
        logger.info("Listening on %s:%d", self.host, self.port)

    async def serve_forever(self) -> None:
        """Accept connections until the server is closed or cancelled."""
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    def close(self) -> None:
        """Stop accepting connections and drop the open ones."""
        if self._server is None:
            return
        self._server.close()
        for task in self._connections:
            task.cancel()

    async def wait_closed(self) -> None:
        """Wait until the listener and all connection tasks have finished."""
        if self._server is None:
            return
        await self._server.wait_closed()
        if self._connections:
            await asyncio.gather(*self._connections, return_exceptions=True)
        self._server = None
        logger.info("Server closed")

    async def __aenter__(self) -> "MetricServer":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
        await self.wait_closed()

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._connections.add(task)
        peername = writer.get_extra_info("peername")
        peer = f"{peername[0]}:{peername[1]}" if peername else "unknown"
        logger.debug("Connection opened from %s", peer)
        session = Session(self.registry, peer=peer)
        try:
            await self._serve_session(session, reader, writer)
        except (ConnectionError, asyncio.IncompleteReadError) as e:
            logger.debug("Connection from %s lost: %s", peer, e)
        except Exception:
            log_exception("Unhandled error serving connection", peer=peer)
        finally:
            if task is not None:
                self._connections.discard(task)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError as e:
                logger.debug("Error closing connection from %s: %s", peer, e)
            logger.debug("Connection closed from %s", peer)

    async def _serve_session(
        self,
        session: Session,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Read command lines and write one reply per line until EOF."""
        while True:
            try:
                raw = await reader.readline()
            except ValueError:
                # line exceeded the stream limit
                logger.debug("Dropping connection: command line too long")
                return
            if not raw:
                return
            line = raw.decode("ascii", errors="replace")
            reply = session.handle(line)
            writer.write(reply.encode("ascii", errors="replace") + b"\n")
            await writer.drain()
