"""Availability client for the ``/check`` backend endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from handlecheck.checkers.base import BaseChecker
from handlecheck.errors import ParseError
from handlecheck.models import CheckConfig, SearchResponse
from handlecheck.utils.http import fetch_json

logger = logging.getLogger(__name__)


class AvailabilityClient(BaseChecker):
    """Query ``GET {base_url}/check?username=...`` once per search.

    No retry and no redirect following: a 3xx answer is a protocol error.
    """

    name = "backend"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def check(self, username: str, config: CheckConfig) -> SearchResponse:
        if not username.strip():
            raise ValueError("username must not be blank")

        url = f"{config.base_url}/check"
        logger.debug("Checking %r via %s", username, url)
        data = await fetch_json(
            url,
            params={"username": username},
            timeout=config.timeout,
            follow_redirects=False,
            transport=self._transport,
        )
        return parse_response(data)


def parse_response(data: Any) -> SearchResponse:
    """Validate a decoded ``/check`` body into a :class:`SearchResponse`."""
    try:
        return SearchResponse.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"Unexpected response shape: {exc.error_count()} error(s)") from exc
