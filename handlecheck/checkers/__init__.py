"""Checker implementations and selection."""

from __future__ import annotations

import httpx

from handlecheck.checkers.backend import AvailabilityClient
from handlecheck.checkers.base import BaseChecker
from handlecheck.checkers.dataset import StaticDatasetChecker

__all__ = [
    "AvailabilityClient",
    "BaseChecker",
    "StaticDatasetChecker",
    "get_checker",
]


def get_checker(
    dataset: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BaseChecker:
    """Pick the dataset checker when a dataset is configured, else the backend."""
    if dataset:
        return StaticDatasetChecker(dataset, transport=transport)
    return AvailabilityClient(transport=transport)
