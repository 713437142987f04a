"""Error taxonomy for handlecheck."""

from __future__ import annotations


class HandlecheckError(Exception):
    """Base class for every error raised by handlecheck."""


class ConfigError(HandlecheckError):
    """Invalid configuration, e.g. a non-numeric ``port`` parameter."""


class DecodeError(HandlecheckError):
    """A URL fragment could not be percent-decoded."""


class FetchError(HandlecheckError):
    """A check could not produce a SearchResponse."""


class NetworkError(FetchError):
    """Transport-level failure (connection refused, DNS, timeout...)."""


class ProtocolError(FetchError):
    """The server answered, but not with something we can use."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(ProtocolError):
    """Response body is not JSON or lacks the expected fields."""
