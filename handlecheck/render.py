"""Result renderer: turn a response (or its absence) into a display state.

The display is rebuilt from scratch on every update. Every piece of user- or
server-controlled text is HTML-escaped here, so whatever consumes a
:class:`DisplayState` can insert it into a document as-is.
"""

from __future__ import annotations

import html
from enum import Enum

from pydantic import BaseModel, Field

from handlecheck.errors import FetchError
from handlecheck.models import PlatformResult, SearchResponse

GLYPH_YES = "✅"
GLYPH_NO = "❌"
GLYPH_UNKNOWN = "❔"


class DisplayKind(str, Enum):
    EMPTY = "empty"
    NO_RESULTS = "no_results"
    RESULTS = "results"
    FAILED = "failed"


class DisplayRow(BaseModel, frozen=True):
    platform: str
    valid: str
    available: str

    @property
    def text(self) -> str:
        return f"{self.platform} / {self.valid} / {self.available}"


class DisplayState(BaseModel, frozen=True):
    """What is currently shown. Text fields are already escaped."""

    kind: DisplayKind = DisplayKind.EMPTY
    username: str | None = None
    rows: list[DisplayRow] = Field(default_factory=list)
    message: str | None = None


def sort_results(results: list[PlatformResult]) -> list[PlatformResult]:
    """Ascending ordinal order on platform name; ties keep server order."""
    return sorted(results, key=lambda r: r.platform)


def availability_glyph(result: PlatformResult) -> str:
    if result.error:
        return GLYPH_UNKNOWN
    return GLYPH_YES if result.available else GLYPH_NO


def build_row(result: PlatformResult) -> DisplayRow:
    return DisplayRow(
        platform=html.escape(result.platform),
        valid=GLYPH_YES if result.valid else GLYPH_NO,
        available=availability_glyph(result),
    )


class ResultRenderer:
    """Owns the current :class:`DisplayState`."""

    def __init__(self, no_results_text: str = "No results found") -> None:
        # An empty string renders an empty body instead of an indicator.
        self.no_results_text = no_results_text
        self.state = DisplayState()

    def render(self, outcome: SearchResponse | FetchError | None) -> DisplayState:
        if outcome is None:
            self.state = DisplayState()
        elif isinstance(outcome, FetchError):
            self.state = DisplayState(
                kind=DisplayKind.FAILED,
                message=html.escape(f"Search failed: {outcome}"),
            )
        elif not outcome.results:
            self.state = DisplayState(
                kind=DisplayKind.NO_RESULTS,
                username=html.escape(outcome.username),
                message=html.escape(self.no_results_text) or None,
            )
        else:
            self.state = DisplayState(
                kind=DisplayKind.RESULTS,
                username=html.escape(outcome.username),
                rows=[build_row(r) for r in sort_results(outcome.results)],
            )
        return self.state

    def clear(self) -> DisplayState:
        return self.render(None)
