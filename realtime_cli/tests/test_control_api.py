"""Tests for the control API client against an in-process ``httpx`` transport."""

from __future__ import annotations

import asyncio
from typing import List

import httpx
import pytest

from realtime_cli.base.errors import ErrorCode, ShellError
from realtime_cli.sdk.control_api import ControlApiClient


def _handler(seen: List[httpx.Request]):
    def handle(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/v1/me":
            return httpx.Response(200, json={"account": {"id": "acc-1", "name": "Acme"}})
        if request.url.path == "/v1/accounts/acc-1/apps":
            return httpx.Response(200, json=[{"id": "app-1", "name": "Demo"}])
        if request.method == "DELETE" and request.url.path == "/v1/apps/app-1":
            return httpx.Response(204)
        if request.url.path == "/v1/apps/limited":
            return httpx.Response(429, json={"error": {"message": "Too many requests"}})
        return httpx.Response(404, json={"message": "App not found"})

    return handle


def _client(seen: List[httpx.Request]) -> ControlApiClient:
    return ControlApiClient("token-123", transport=httpx.MockTransport(_handler(seen)))


def test_requests_carry_bearer_token_and_decode_json() -> None:
    seen: List[httpx.Request] = []

    async def scenario():
        async with _client(seen) as client:
            return await client.me(), await client.list_apps("acc-1"), await client.delete_app("app-1")

    me, apps, deleted = asyncio.run(scenario())
    assert me["account"]["id"] == "acc-1"  # nosec B101 - pytest assertion in test
    assert apps == [{"id": "app-1", "name": "Demo"}]  # nosec B101 - pytest assertion in test
    assert deleted is None  # nosec B101 - pytest assertion in test
    assert seen[0].headers["Authorization"] == "Bearer token-123"  # nosec B101 - pytest assertion in test
    assert seen[0].url.host == "control.ably.net"  # nosec B101 - pytest assertion in test


@pytest.mark.parametrize(
    "app_id, code, message",
    [
        ("missing", ErrorCode.NOT_FOUND, "App not found"),
        ("limited", ErrorCode.RATE_LIMIT, "Too many requests"),
    ],
)
def test_http_errors_become_shell_errors(app_id: str, code: ErrorCode, message: str) -> None:
    async def scenario():
        async with _client([]) as client:
            await client.delete_app(app_id)

    with pytest.raises(ShellError) as info:
        asyncio.run(scenario())
    assert info.value.code is code  # nosec B101 - pytest assertion in test
    assert str(info.value) == message  # nosec B101 - pytest assertion in test


def test_transport_failure_is_classified() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with ControlApiClient("t", transport=httpx.MockTransport(refuse)) as client:
            await client.me()

    with pytest.raises(ShellError) as info:
        asyncio.run(scenario())
    assert info.value.code is ErrorCode.UNAVAILABLE  # nosec B101 - pytest assertion in test
    assert info.value.retryable  # nosec B101 - pytest assertion in test


def test_missing_token_is_an_auth_error() -> None:
    with pytest.raises(ShellError) as info:
        ControlApiClient("")
    assert info.value.code is ErrorCode.AUTH  # nosec B101 - pytest assertion in test


def test_localhost_uses_plain_http() -> None:
    seen: List[httpx.Request] = []

    async def scenario():
        client = ControlApiClient("t", "localhost:8080", transport=httpx.MockTransport(_handler(seen)))
        try:
            await client.me()
        finally:
            await client.aclose()

    asyncio.run(scenario())
    assert str(seen[0].url) == "http://localhost:8080/v1/me"  # nosec B101 - pytest assertion in test
