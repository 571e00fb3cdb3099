"""Async HTTP client for the platform control API.

Purpose:
    Account and app management (``/me``, ``/accounts/{id}/apps``,
    ``/apps/{id}``) over ``httpx.AsyncClient``. Every failure leaves this
    module as a :class:`ShellError` carrying a normalized :class:`ErrorCode`,
    so commands never see raw ``httpx`` exceptions.

External dependencies:
    - ``httpx`` for the asynchronous HTTP transport. Tests inject an
      ``httpx.MockTransport`` through the ``transport`` parameter.

Timeout strategy:
    A single client-wide timeout from ``CONTROL_API_TIMEOUT_SECONDS``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..base.errors import ErrorCode, ShellError, classify_exception
from ..base.logging import get_logger, log_event
from ..config.defaults import (
    CONTROL_API_DEFAULT_HOST,
    CONTROL_API_TIMEOUT_SECONDS,
    CONTROL_API_VERSION_PATH,
)


def _base_url(host: str) -> str:
    scheme = "http" if host.startswith(("localhost", "127.0.0.1")) else "https"
    return f"{scheme}://{host}{CONTROL_API_VERSION_PATH}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    text = response.text.strip()
    return text or response.reason_phrase or f"HTTP {response.status_code}"


class ControlApiClient:
    """Thin async wrapper over the control API.

    Parameters:
        access_token: Bearer token for the account.
        host: API host, ``control.ably.net`` unless overridden.
        transport: Optional ``httpx`` transport (tests use ``MockTransport``).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        access_token: str,
        host: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = CONTROL_API_TIMEOUT_SECONDS,
    ) -> None:
        if not access_token:
            raise ShellError(
                ErrorCode.AUTH,
                "No access token configured. Log in with 'accounts login' or set REALTIME_ACCESS_TOKEN",
            )
        self._logger = get_logger("realtime.sdk.control")
        self._client = httpx.AsyncClient(
            base_url=_base_url(host or CONTROL_API_DEFAULT_HOST),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        log_event(self._logger, "control.request", level=logging.DEBUG, method=method, path=path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ShellError(
                classify_exception(exc),
                f"Control API request failed: {exc}",
                retryable=True,
                raw=exc,
            ) from exc
        if response.status_code >= 400:
            status_error = httpx.HTTPStatusError(
                _error_message(response), request=response.request, response=response
            )
            code = classify_exception(status_error)
            log_event(
                self._logger,
                "control.error",
                level=logging.WARNING,
                method=method,
                path=path,
                status=response.status_code,
                code=code.value,
            )
            raise ShellError(code, str(status_error), raw=status_error)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/me")

    async def list_apps(self, account_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/accounts/{account_id}/apps") or []

    async def delete_app(self, app_id: str) -> None:
        await self._request("DELETE", f"/apps/{app_id}")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ControlApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["ControlApiClient"]
