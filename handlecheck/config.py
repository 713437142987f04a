"""Configuration management for handlecheck."""

from __future__ import annotations

import os
from dataclasses import dataclass

from handlecheck.errors import ConfigError

DEFAULT_PORT = 8080


def parse_port(value: str | int | None, *, default: int = DEFAULT_PORT) -> int:
    """Validate a port value coming from a URL parameter or the environment.

    Missing or blank values fall back to *default*; anything that is not a
    decimal integer in ``[1, 65535]`` raises :class:`ConfigError`.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"Invalid port: {value!r}")
    if isinstance(value, int):
        port = value
    else:
        text = value.strip()
        if not text:
            return default
        if not text.isascii() or not text.isdigit():
            raise ConfigError(f"Invalid port: {value!r} is not a number")
        port = int(text)
    if not 1 <= port <= 65535:
        raise ConfigError(f"Invalid port: {port} is outside 1-65535")
    return port


@dataclass(frozen=True)
class Config:
    """Runtime configuration, populated from environment variables."""

    host: str = "localhost"
    port: int = DEFAULT_PORT
    timeout: float = 5.0
    debounce_ms: int = 300
    no_results_text: str = "No results found"
    dataset: str | None = None

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            host=os.getenv("HANDLECHECK_HOST", cls.host),
            port=parse_port(os.getenv("HANDLECHECK_PORT")),
            timeout=float(os.getenv("HANDLECHECK_TIMEOUT", str(cls.timeout))),
            debounce_ms=int(os.getenv("HANDLECHECK_DEBOUNCE_MS", str(cls.debounce_ms))),
            no_results_text=os.getenv("HANDLECHECK_NO_RESULTS_TEXT", cls.no_results_text),
            dataset=os.getenv("HANDLECHECK_DATASET") or None,
        )
