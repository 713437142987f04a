"""CLI entry point for handlecheck."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace

import click

from handlecheck.checkers import get_checker
from handlecheck.config import Config, parse_port
from handlecheck.controller import SearchController
from handlecheck.errors import ConfigError
from handlecheck.fragment import PageLocation
from handlecheck.output import preview, write_html

DEFAULT_PAGE_URL = "http://localhost/"

_QUIT_COMMANDS = (":quit", ":q", ":exit")


def _echo_notice(message: str) -> None:
    click.echo(f"  ! {message}", err=True)


def _report(controller: SearchController, html_path: str | None) -> None:
    preview(controller.display, controller.location.url)
    if html_path:
        path = write_html(controller.display, html_path)
        click.echo(f"✓ Written to {path}")


async def _interactive(controller: SearchController, html_path: str | None) -> None:
    """Prompt loop: every line entered is one input event."""
    click.echo("handlecheck — Interactive Mode")
    click.echo("Type a username to check it. Empty line clears. :quit exits.\n")

    while True:
        try:
            raw = await asyncio.to_thread(
                click.prompt, "username", prompt_suffix="> ", default="", show_default=False
            )
        except (EOFError, KeyboardInterrupt, click.Abort):
            click.echo()
            break

        if raw.strip() in _QUIT_COMMANDS:
            break

        controller.on_input(raw)
        await controller.drain()
        _report(controller, html_path)


async def _run(
    controller: SearchController,
    username: str | None,
    html_path: str | None,
) -> bool:
    """Drive the controller. Returns False when the last search failed."""
    restorable = bool(controller.hash.read())
    await controller.on_load()

    if username is not None:
        controller.on_input(username)
        await controller.drain()
    elif not restorable:
        await _interactive(controller, html_path)
        return controller.last_error is None

    _report(controller, html_path)
    return controller.last_error is None


@click.command()
@click.argument("username", required=False)
@click.option("--page-url", default=DEFAULT_PAGE_URL, show_default=True,
              help="Page URL; its #fragment restores a query, its ?port= picks the backend")
@click.option("--port", default=None, help="Backend port (overrides the page's ?port=)")
@click.option("--dataset", default=None, help="Static dataset URL or path instead of the backend")
@click.option("--html", "html_path", default=None, help="Also write the result table as HTML")
@click.option("--debounce-ms", type=int, default=None, help="Input debounce window in ms")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    username: str | None,
    page_url: str,
    port: str | None,
    dataset: str | None,
    html_path: str | None,
    debounce_ms: int | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """handlecheck — username availability checker."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = Config.from_env()
        if port is not None:
            parse_port(port)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(2)

    overrides: dict[str, object] = {}
    if debounce_ms is not None:
        overrides["debounce_ms"] = debounce_ms
    if timeout is not None:
        overrides["timeout"] = timeout
    if dataset:
        overrides["dataset"] = dataset
    if overrides:
        config = replace(config, **overrides)

    location = PageLocation(page_url)
    if port is not None:
        location = location.with_query_param("port", port)

    controller = SearchController(
        get_checker(config.dataset),
        location,
        config=config,
        on_notice=_echo_notice,
    )
    ok = asyncio.run(_run(controller, username, html_path))
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
