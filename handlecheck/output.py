"""Text and HTML output for a display state."""

from __future__ import annotations

import html
from pathlib import Path

import click

from handlecheck.render import DisplayKind, DisplayState

_HTML_HEADER = "<tr><th>Platform</th><th>Valid</th><th>Available</th></tr>"


def format_text(state: DisplayState) -> str:
    """Plain-text rendering, one line per row.

    The display state is markup-escaped; terminals get the original text back.
    """
    if state.kind is DisplayKind.RESULTS:
        return "\n".join(html.unescape(row.text) for row in state.rows)
    return html.unescape(state.message or "")


def format_html(state: DisplayState) -> str:
    """HTML fragment for *state*. Values are escaped by the renderer already."""
    if state.kind is DisplayKind.RESULTS:
        body = "".join(
            f"<tr><td>{row.platform}</td><td>{row.valid}</td><td>{row.available}</td></tr>"
            for row in state.rows
        )
        return f'<table class="results">{_HTML_HEADER}{body}</table>'
    if state.kind is DisplayKind.FAILED:
        return f'<p class="error">{state.message}</p>'
    if state.kind is DisplayKind.NO_RESULTS and state.message:
        return f'<p class="no-results">{state.message}</p>'
    return ""


def write_html(state: DisplayState, path: str) -> Path:
    """Write the HTML rendering of *state* to *path*. Returns the written path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(format_html(state) + "\n", encoding="utf-8")
    return out


def preview(state: DisplayState, url: str) -> None:
    """Print *state* and the shareable page URL."""
    text = format_text(state)
    if state.username is not None:
        click.echo(f"\n=== {html.unescape(state.username)} ===")
    if text:
        click.echo(text, err=state.kind is DisplayKind.FAILED)
    click.echo(f"Link: {url}")
