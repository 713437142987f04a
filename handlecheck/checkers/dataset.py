"""Static dataset checker: serve results from one JSON file or URL.

The dataset is either a JSON list of platform records or an object with a
``results`` list. Records may omit ``error``; it defaults to false. The file
is loaded on first use and kept for the rest of the session, and every query
gets the same rows back.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from handlecheck.checkers.base import BaseChecker
from handlecheck.errors import NetworkError, ParseError
from handlecheck.models import CheckConfig, PlatformResult, SearchResponse
from handlecheck.utils.http import fetch_json

logger = logging.getLogger(__name__)

# Lets GitHub's contents API hand back the raw file.
_RAW_ACCEPT = "application/vnd.github.v3.raw"


class StaticDatasetChecker(BaseChecker):
    """Answer every query from a pre-computed dataset."""

    name = "dataset"

    def __init__(
        self,
        source: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.source = source
        self._transport = transport
        self._results: list[PlatformResult] | None = None

    async def check(self, username: str, config: CheckConfig) -> SearchResponse:
        if self._results is None:
            self._results = await self._load(config.timeout)
        return SearchResponse(username=username, results=list(self._results))

    async def _load(self, timeout: float) -> list[PlatformResult]:
        if self.source.startswith(("http://", "https://")):
            data = await fetch_json(
                self.source,
                headers={"Accept": _RAW_ACCEPT},
                timeout=timeout,
                transport=self._transport,
            )
        else:
            data = await asyncio.to_thread(self._read_file, Path(self.source))
        results = parse_dataset(data)
        logger.info("Loaded %d dataset rows from %s", len(results), self.source)
        return results

    @staticmethod
    def _read_file(path: Path) -> Any:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise NetworkError(f"Cannot read dataset {path}: {exc}") from exc
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"Dataset {path} is not valid JSON") from exc


def parse_dataset(data: Any) -> list[PlatformResult]:
    """Normalise a dataset document into platform results."""
    if isinstance(data, dict):
        data = data.get("results")
    if not isinstance(data, list):
        raise ParseError("Dataset must be a list of records or an object with 'results'")
    try:
        return [
            PlatformResult.model_validate({"error": False, **record})
            if isinstance(record, dict)
            else PlatformResult.model_validate(record)
            for record in data
        ]
    except ValidationError as exc:
        raise ParseError(f"Invalid dataset record: {exc.error_count()} error(s)") from exc
