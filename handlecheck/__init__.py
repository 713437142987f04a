"""handlecheck — incremental username availability checker."""

from handlecheck.checkers import AvailabilityClient, BaseChecker, StaticDatasetChecker
from handlecheck.config import Config, parse_port
from handlecheck.controller import SearchController, SearchState
from handlecheck.debounce import Debouncer
from handlecheck.errors import (
    ConfigError,
    DecodeError,
    FetchError,
    HandlecheckError,
    NetworkError,
    ParseError,
    ProtocolError,
)
from handlecheck.fragment import HashCodec, PageLocation, decode, encode
from handlecheck.models import CheckConfig, PlatformResult, SearchResponse
from handlecheck.render import DisplayKind, DisplayRow, DisplayState, ResultRenderer

__all__ = [
    "AvailabilityClient",
    "BaseChecker",
    "CheckConfig",
    "Config",
    "ConfigError",
    "Debouncer",
    "DecodeError",
    "DisplayKind",
    "DisplayRow",
    "DisplayState",
    "FetchError",
    "HandlecheckError",
    "HashCodec",
    "NetworkError",
    "PageLocation",
    "ParseError",
    "PlatformResult",
    "ProtocolError",
    "ResultRenderer",
    "SearchController",
    "SearchResponse",
    "SearchState",
    "StaticDatasetChecker",
    "decode",
    "encode",
    "parse_port",
]
