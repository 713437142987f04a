"""Tests for the availability client and dataset checker (mocked HTTP)."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from handlecheck.checkers import AvailabilityClient, StaticDatasetChecker, get_checker
from handlecheck.checkers.dataset import parse_dataset
from handlecheck.errors import NetworkError, ParseError, ProtocolError
from handlecheck.models import CheckConfig
from handlecheck.utils.http import fetch_json

_BODY = {
    "username": "bob",
    "results": [
        {"platform": "x", "valid": True, "available": False, "error": False},
        {"platform": "github", "valid": True, "available": True, "error": False},
    ],
}


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# AvailabilityClient
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_builds_check_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_BODY)

    client = AvailabilityClient(transport=_transport(handler))
    await client.check("bob", CheckConfig(port=9123))

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "localhost"
    assert request.url.port == 9123
    assert request.url.path == "/check"
    assert request.url.params["username"] == "bob"


@pytest.mark.asyncio
async def test_username_is_query_encoded() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"username": "a&b c", "results": []})

    client = AvailabilityClient(transport=_transport(handler))
    await client.check("a&b c", CheckConfig())

    assert seen[0].url.params["username"] == "a&b c"
    assert b"a&b" not in seen[0].url.query


@pytest.mark.asyncio
async def test_returns_results_in_server_order() -> None:
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(200, json=_BODY)))
    response = await client.check("bob", CheckConfig())

    assert response.username == "bob"
    assert [r.platform for r in response.results] == ["x", "github"]
    assert response.results[0].available is False


@pytest.mark.asyncio
async def test_server_username_is_authoritative() -> None:
    body = {**_BODY, "username": "Bob"}
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(200, json=body)))
    response = await client.check(" bob ", CheckConfig())
    assert response.username == "Bob"


@pytest.mark.asyncio
async def test_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = AvailabilityClient(transport=_transport(handler))
    with pytest.raises(NetworkError):
        await client.check("bob", CheckConfig())


@pytest.mark.asyncio
async def test_timeout_is_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = AvailabilityClient(transport=_transport(handler))
    with pytest.raises(NetworkError, match="timed out"):
        await client.check("bob", CheckConfig(timeout=0.5))


@pytest.mark.asyncio
async def test_http_error_status() -> None:
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(503, text="down")))
    with pytest.raises(ProtocolError) as excinfo:
        await client.check("bob", CheckConfig())
    assert excinfo.value.status_code == 503
    assert not isinstance(excinfo.value, ParseError)


@pytest.mark.asyncio
async def test_malformed_json() -> None:
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(200, text="{nope")))
    with pytest.raises(ParseError):
        await client.check("bob", CheckConfig())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"results": []},
        {"username": "bob"},
        {"username": "bob", "results": [{"platform": "x", "valid": True}]},
        {"username": "bob", "results": "nope"},
        ["not", "an", "object"],
    ],
)
async def test_missing_fields(body: object) -> None:
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(200, json=body)))
    with pytest.raises(ParseError):
        await client.check("bob", CheckConfig())


@pytest.mark.asyncio
async def test_blank_username_rejected() -> None:
    client = AvailabilityClient(transport=_transport(lambda r: httpx.Response(200, json=_BODY)))
    with pytest.raises(ValueError):
        await client.check("   ", CheckConfig())


def _redirect_loop(request: httpx.Request) -> httpx.Response:
    return httpx.Response(302, headers={"Location": str(request.url)})


def _bad_gzip(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200, headers={"Content-Encoding": "gzip"}, content=b"definitely not gzip"
    )


@pytest.mark.asyncio
async def test_redirect_is_not_followed() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _redirect_loop(request)

    client = AvailabilityClient(transport=_transport(handler))
    with pytest.raises(ProtocolError) as excinfo:
        await client.check("bob", CheckConfig())
    assert excinfo.value.status_code == 302
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_redirect_loop_is_protocol_error() -> None:
    with pytest.raises(ProtocolError, match="redirects"):
        await fetch_json("http://localhost/loop", transport=_transport(_redirect_loop))


@pytest.mark.asyncio
async def test_dataset_url_redirect_loop() -> None:
    checker = StaticDatasetChecker("https://example.com/data.json", transport=_transport(_redirect_loop))
    with pytest.raises(ProtocolError):
        await checker.check("bob", CheckConfig())


@pytest.mark.asyncio
async def test_bad_content_encoding_is_protocol_error() -> None:
    client = AvailabilityClient(transport=_transport(_bad_gzip))
    with pytest.raises(ProtocolError) as excinfo:
        await client.check("bob", CheckConfig())
    assert not isinstance(excinfo.value, ParseError)


# ---------------------------------------------------------------------------
# StaticDatasetChecker
# ---------------------------------------------------------------------------


class TestParseDataset:
    def test_list_defaults_error(self) -> None:
        results = parse_dataset([{"platform": "x", "valid": True, "available": True}])
        assert results[0].error is False

    def test_object_with_results(self) -> None:
        results = parse_dataset(
            {"results": [{"platform": "x", "valid": False, "available": False, "error": True}]}
        )
        assert results[0].error is True

    def test_not_a_list(self) -> None:
        with pytest.raises(ParseError):
            parse_dataset({"sites": []})

    def test_bad_record(self) -> None:
        with pytest.raises(ParseError):
            parse_dataset([{"platform": "x"}])


@pytest.mark.asyncio
async def test_dataset_file_loaded_once(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps([{"platform": "b", "valid": True, "available": True}]))

    checker = StaticDatasetChecker(str(path))
    first = await checker.check("alice", CheckConfig())
    path.write_text("[]")
    second = await checker.check(" bob ", CheckConfig())

    assert first.username == "alice"
    assert second.username == " bob "
    assert [r.platform for r in second.results] == ["b"]


@pytest.mark.asyncio
async def test_dataset_url_uses_raw_accept() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"platform": "x", "valid": True, "available": True}])

    checker = StaticDatasetChecker("https://example.com/data.json", transport=_transport(handler))
    response = await checker.check("bob", CheckConfig())

    assert seen[0].headers["accept"] == "application/vnd.github.v3.raw"
    assert len(response.results) == 1


@pytest.mark.asyncio
async def test_dataset_missing_file(tmp_path: Path) -> None:
    checker = StaticDatasetChecker(str(tmp_path / "missing.json"))
    with pytest.raises(NetworkError):
        await checker.check("bob", CheckConfig())


@pytest.mark.asyncio
async def test_dataset_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text("not json")
    with pytest.raises(ParseError):
        await StaticDatasetChecker(str(path)).check("bob", CheckConfig())


def test_get_checker() -> None:
    assert isinstance(get_checker(), AvailabilityClient)
    assert isinstance(get_checker("data.json"), StaticDatasetChecker)


@pytest.mark.asyncio
async def test_dataset_file_read_off_the_event_loop(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps([{"platform": "x", "valid": True, "available": True}]))

    with patch(
        "handlecheck.checkers.dataset.asyncio.to_thread", wraps=asyncio.to_thread
    ) as to_thread:
        response = await StaticDatasetChecker(str(path)).check("bob", CheckConfig())

    assert to_thread.call_count == 1
    assert len(response.results) == 1
