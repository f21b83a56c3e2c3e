"""Server configuration."""

import os
from dataclasses import dataclass

ENV_PREFIX = "METRICWIRE_"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7070
DEFAULT_CAPACITY = 100
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ServerConfig:
    """Settings for one metricwire process.

    Attributes:
        host: Interface the TCP listener binds to.
        port: TCP port for the command protocol (0 picks a free port).
        capacity: Samples retained per metric.
        log_level: Root log level name.
        http_port: Port for the read-only HTTP view, or None to disable it.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    capacity: int = DEFAULT_CAPACITY
    log_level: str = DEFAULT_LOG_LEVEL
    http_port: int | None = None

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        _check_port("port", self.port)
        if self.http_port is not None:
            _check_port("http_port", self.http_port)
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"invalid log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ServerConfig":
        """Build a config from ``METRICWIRE_*`` environment variables.

        Unset variables fall back to the defaults.

        Raises:
            ValueError: If a variable does not parse or fails validation.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(ENV_PREFIX + name) or None

        http_port = get("HTTP_PORT")
        return cls(
            host=get("HOST") or DEFAULT_HOST,
            port=_parse_int("PORT", get("PORT"), DEFAULT_PORT),
            capacity=_parse_int("CAPACITY", get("CAPACITY"), DEFAULT_CAPACITY),
            log_level=get("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
            http_port=None if http_port is None else _parse_int("HTTP_PORT", http_port, 0),
        )


def _parse_int(name: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _check_port(name: str, port: int) -> None:
    if not 0 <= port <= 65535:
        raise ValueError(f"{name} must be between 0 and 65535, got {port}")
