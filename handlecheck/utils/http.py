"""HTTP utilities for handlecheck checkers."""

from __future__ import annotations

from typing import Any

import httpx

from handlecheck.errors import NetworkError, ParseError, ProtocolError

_DEFAULT_HEADERS = {
    "User-Agent": "handlecheck/0.1",
    "Accept": "application/json",
}


async def fetch_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 5.0,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET *url* once and decode the JSON body.

    Failures are mapped onto the handlecheck taxonomy: transport problems and
    timeouts raise :class:`NetworkError`; a non-2xx status, a redirect loop or
    an undecodable content encoding raise :class:`ProtocolError`; a body that
    is not JSON raises :class:`ParseError`.
    """
    merged = {**_DEFAULT_HEADERS, **(headers or {})}
    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=follow_redirects, transport=transport
        ) as client:
            resp = await client.get(url, headers=merged, params=params)
    except httpx.TimeoutException as exc:
        raise NetworkError(f"Request to {url} timed out after {timeout}s") from exc
    except httpx.TooManyRedirects as exc:
        raise ProtocolError(f"Too many redirects from {url}") from exc
    except httpx.DecodingError as exc:
        raise ProtocolError(f"Cannot decode response from {url}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"Request to {url} failed: {exc}") from exc

    if not resp.is_success:
        raise ProtocolError(
            f"HTTP {resp.status_code} from {resp.url}", status_code=resp.status_code
        )
    try:
        return resp.json()
    except ValueError as exc:
        raise ParseError(
            f"Response from {resp.url} is not valid JSON", status_code=resp.status_code
        ) from exc
