"""URL fragment codec: keeps the current query shareable and restorable."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from handlecheck.errors import DecodeError

# Characters encodeURIComponent leaves alone.
_SAFE = "-_.!~*'()"
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode(query: str) -> str:
    """Percent-encode *query* for use as a URL fragment."""
    return quote(query, safe=_SAFE)


def decode(fragment: str) -> str:
    """Percent-decode *fragment*.

    Raises :class:`DecodeError` on a truncated/invalid escape or when the
    escaped bytes are not valid UTF-8.
    """
    if fragment.startswith("#"):
        fragment = fragment[1:]
    if _BAD_ESCAPE_RE.search(fragment):
        raise DecodeError(f"Malformed percent-escape in fragment: {fragment!r}")
    try:
        return unquote(fragment, errors="strict")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Fragment is not valid UTF-8: {fragment!r}") from exc


class PageLocation:
    """Mutable page URL: the query string carries options, the fragment the query."""

    def __init__(self, url: str) -> None:
        self._parts = urlsplit(url)

    @property
    def url(self) -> str:
        return urlunsplit(self._parts)

    @property
    def fragment(self) -> str:
        return self._parts.fragment

    @fragment.setter
    def fragment(self, value: str) -> None:
        self._parts = self._parts._replace(fragment=value)

    def query_param(self, name: str) -> str | None:
        values = parse_qs(self._parts.query, keep_blank_values=True).get(name)
        return values[0] if values else None

    def with_query_param(self, name: str, value: str) -> PageLocation:
        """Return a copy with *name* set to *value* in the query string."""
        params = [
            (k, v)
            for k, v in parse_qsl(self._parts.query, keep_blank_values=True)
            if k != name
        ]
        params.append((name, value))
        query = urlencode(params)
        return PageLocation(urlunsplit(self._parts._replace(query=query)))

    def __repr__(self) -> str:
        return f"PageLocation({self.url!r})"


class HashCodec:
    """Read and write the fragment of one :class:`PageLocation`."""

    def __init__(self, location: PageLocation) -> None:
        self.location = location

    def read(self) -> str:
        return self.location.fragment

    def write(self, fragment: str) -> None:
        # An empty fragment drops the trailing '#'.
        self.location.fragment = fragment
