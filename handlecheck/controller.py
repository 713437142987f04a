"""Incremental search controller.

Turns input events into debounced searches, keeps the page fragment in sync
with the current query and reconciles out-of-order responses.

States: ``IDLE -> AWAITING_DEBOUNCE -> IN_FLIGHT -> IDLE``. A new input event
in any state goes back to ``AWAITING_DEBOUNCE`` without touching a request
already in flight.

Every evaluated query takes a new generation number. A response is applied
only if no newer generation has started since its request was launched, so
the last *request* wins rather than the last response to arrive.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Coroutine

from pydantic import ValidationError

from handlecheck.checkers.base import BaseChecker
from handlecheck.config import Config, parse_port
from handlecheck.debounce import Debouncer
from handlecheck.errors import ConfigError, DecodeError, FetchError
from handlecheck.fragment import HashCodec, PageLocation, decode, encode
from handlecheck.models import CheckConfig
from handlecheck.render import DisplayState, ResultRenderer

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    IDLE = "idle"
    AWAITING_DEBOUNCE = "awaiting_debounce"
    IN_FLIGHT = "in_flight"


def _log_notice(message: str) -> None:
    logger.warning("%s", message)


class SearchController:
    """One instance per page session; owns the debounce timer and display."""

    def __init__(
        self,
        checker: BaseChecker,
        location: PageLocation,
        *,
        config: Config | None = None,
        renderer: ResultRenderer | None = None,
        debouncer: Debouncer | None = None,
        on_notice: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config or Config()
        self.checker = checker
        self.location = location
        self.hash = HashCodec(location)
        self.renderer = renderer or ResultRenderer(self.config.no_results_text)
        self._debouncer = debouncer or Debouncer(self.config.debounce_ms)
        self._on_notice = on_notice or _log_notice

        self.input_value = ""
        self.state = SearchState.IDLE
        self.notices: list[str] = []
        self.last_error: FetchError | None = None
        self._generation = 0

    @property
    def display(self) -> DisplayState:
        return self.renderer.state

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def on_load(self) -> None:
        """Restore the query from the fragment and search immediately."""
        fragment = self.hash.read()
        if not fragment:
            return
        try:
            query = decode(fragment)
        except DecodeError as exc:
            self._notify(f"Ignoring unreadable link fragment: {exc}")
            return
        self.input_value = query
        await self.search(query)

    def on_input(self, value: str) -> None:
        """Record the new input value and (re)arm the debounce timer."""
        self.input_value = value
        self.state = SearchState.AWAITING_DEBOUNCE
        self._debouncer.schedule(self._on_debounce_fire)

    async def drain(self) -> None:
        """Wait for the pending debounce and every launched search to settle."""
        await self._debouncer.drain()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _on_debounce_fire(self) -> Coroutine[Any, Any, None]:
        return self.search(self.input_value)

    async def search(self, query: str) -> None:
        self._generation += 1
        generation = self._generation

        if not query.strip():
            self.renderer.clear()
            self.hash.write("")
            self.last_error = None
            self._settle(generation)
            return

        try:
            check_config = self._check_config()
        except ConfigError as exc:
            self._notify(str(exc))
            self._settle(generation)
            return

        self.state = SearchState.IN_FLIGHT
        try:
            response = await self.checker.check(query, check_config)
        except FetchError as exc:
            if self._is_stale(generation):
                logger.debug("Discarding failure for superseded query %r", query)
                return
            logger.warning("Search for %r failed: %s", query, exc)
            self.last_error = exc
            self.renderer.render(exc)
        else:
            if self._is_stale(generation):
                logger.debug("Discarding stale response for %r", query)
                return
            self.last_error = None
            self.renderer.render(response)
            self.hash.write(encode(response.username))
        self._settle(generation)

    def _check_config(self) -> CheckConfig:
        port = parse_port(self.location.query_param("port"), default=self.config.port)
        try:
            return CheckConfig(
                host=self.config.host,
                port=port,
                timeout=self.config.timeout,
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid check configuration: {exc}") from exc

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _settle(self, generation: int) -> None:
        if self._is_stale(generation):
            return
        if self._debouncer.pending:
            self.state = SearchState.AWAITING_DEBOUNCE
        else:
            self.state = SearchState.IDLE

    def _notify(self, message: str) -> None:
        self.notices.append(message)
        self._on_notice(message)
