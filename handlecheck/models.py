"""Core data models for handlecheck."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PlatformResult(BaseModel, frozen=True):
    """Availability of one username on one platform.

    ``available`` is only meaningful when ``error`` is false; a failed probe
    means availability is unknown.
    """

    platform: str
    valid: bool
    available: bool
    error: bool


class SearchResponse(BaseModel, frozen=True):
    """What the backend returned for one query."""

    # Server canonicalisation of the query; this is what goes back into the
    # URL fragment.
    username: str
    results: list[PlatformResult]


class CheckConfig(BaseModel, frozen=True):
    """Options passed to a checker for a single request."""

    host: str = "localhost"
    port: int = Field(default=8080, ge=1, le=65535)
    timeout: float = Field(default=5.0, gt=0)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"
