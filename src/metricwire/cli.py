"""metricwire command line interface."""

import asyncio
import logging
from dataclasses import replace

import click
import uvicorn

from metricwire import __version__
from metricwire.adapters.frameworks.asgi import create_asgi_app
from metricwire.adapters.server.tcp import MetricServer
from metricwire.config import VALID_LOG_LEVELS, ServerConfig
from metricwire.core.registry import SourceRegistry

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure root logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


async def run_server(config: ServerConfig) -> None:
    """Serve the command protocol, plus the HTTP view when configured."""
    registry = SourceRegistry(capacity=config.capacity)
    async with MetricServer(registry, host=config.host, port=config.port) as server:
        if config.http_port is None:
            await server.serve_forever()
            return
        http = uvicorn.Server(
            uvicorn.Config(
                create_asgi_app(registry),
                host=config.host,
                port=config.http_port,
                log_level=config.log_level.lower(),
            )
        )
        logger.info("HTTP view on %s:%d", config.host, config.http_port)
        await asyncio.gather(server.serve_forever(), http.serve())


@click.group()
@click.version_option(version=__version__, prog_name="metricwire")
def main() -> None:
    """metricwire - line-protocol metrics collection service."""


@main.command()
@click.option("--host", default=None, help="Interface to bind [env: METRICWIRE_HOST]")
@click.option("--port", "-p", default=None, type=click.IntRange(0, 65535),
              help="TCP port for the command protocol [env: METRICWIRE_PORT]")
@click.option("--capacity", "-c", default=None, type=click.IntRange(min=1),
              help="Samples retained per metric [env: METRICWIRE_CAPACITY]")
@click.option("--http-port", default=None, type=click.IntRange(0, 65535),
              help="Serve the read-only HTTP view on this port [env: METRICWIRE_HTTP_PORT]")
@click.option("--log-level", default=None,
              type=click.Choice(sorted(VALID_LOG_LEVELS), case_sensitive=False),
              help="Log level [env: METRICWIRE_LOG_LEVEL]")
def serve(
    host: str | None,
    port: int | None,
    capacity: int | None,
    http_port: int | None,
    log_level: str | None,
) -> None:
    """Run the metrics collection server.

    Options given on the command line override METRICWIRE_* environment
    variables, which override the built-in defaults.
    """
    try:
        config = build_config(
            host=host,
            port=port,
            capacity=capacity,
            http_port=http_port,
            log_level=log_level.upper() if log_level else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    setup_logging(config.log_level)
    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")


def build_config(**overrides: object) -> ServerConfig:
    """Merge command line overrides onto the environment config.

    None-valued overrides are ignored.
    """
    config = ServerConfig.from_env()
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **changes)  # type: ignore[arg-type]


if __name__ == "__main__":
    main()
