"""ASGI adapter exposing a read-only HTTP view of the registry.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
or Django as dependencies.

Endpoints:
    /sources                          - NDJSON, one registered source per line
    /sources/<name>/metrics           - NDJSON, one metric name per line
    /sources/<name>/metrics/<metric>  - NDJSON, retained samples oldest first
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from metricwire.core.encoding.ndjson import (
    encode_metric_names,
    encode_samples,
    encode_sources,
)
from metricwire.core.errors import UnknownMetric, UnknownSource
from metricwire.core.logs import log_exception
from metricwire.core.ports import SourceRegistryPort

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

NDJSON = "application/x-ndjson"


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _send_error(send: Send, status: int, message: str) -> None:
    await _send_response(send, status, "application/json", json.dumps({"error": message}))


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], str],
    log_message: str,
) -> None:
    """Run an endpoint function and send its NDJSON body.

    Unknown sources and metrics become 404 responses; any other failure is
    logged and reported as a 500.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Function that returns the response body.
        log_message: Message to log on unexpected errors.
    """
    try:
        body = endpoint_func()
    except (UnknownSource, UnknownMetric) as e:
        await _send_error(send, 404, str(e))
        return
    except Exception:
        log_exception(log_message)
        await _send_error(send, 500, "Internal Server Error")
        return
    await _send_response(send, 200, NDJSON, body)


def _split_path(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def create_asgi_app(registry: SourceRegistryPort) -> ASGIApp:
    """Create an ASGI app serving the read-only registry endpoints.

    Args:
        registry: Registry implementing SourceRegistryPort.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        if scope.get("method", "GET") != "GET":
            await _send_error(send, 405, "Method Not Allowed")
            return

        parts = _split_path(scope["path"])
        if parts == ["sources"]:
            await _handle_endpoint(
                send,
                lambda: encode_sources(registry.list()),
                "Error encoding sources endpoint",
            )
        elif len(parts) == 3 and parts[0] == "sources" and parts[2] == "metrics":
            source = parts[1]
            await _handle_endpoint(
                send,
                lambda: encode_metric_names(source, registry.query_metric_names(source)),
                "Error encoding metric names endpoint",
            )
        elif len(parts) == 4 and parts[0] == "sources" and parts[2] == "metrics":
            source, metric = parts[1], parts[3]
            await _handle_endpoint(
                send,
                lambda: encode_samples(
                    source, metric, registry.query_samples(source, metric)
                ),
                "Error encoding samples endpoint",
            )
        else:
            await _send_error(send, 404, "Not Found")

    return app
