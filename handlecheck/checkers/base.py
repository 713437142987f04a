"""Base checker interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from handlecheck.models import CheckConfig, SearchResponse


class BaseChecker(ABC):
    """Anything that can answer "is this username available?"."""

    name: str = ""

    @abstractmethod
    async def check(self, username: str, config: CheckConfig) -> SearchResponse:
        """Check *username* and return the normalised response.

        Raises a :class:`handlecheck.errors.FetchError` subclass on failure.
        """
        ...
