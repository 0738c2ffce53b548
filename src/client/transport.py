"""HTTP transport layer with retry logic and connection pooling."""

import asyncio
import random
from typing import Any

import httpx

from .exceptions import TransportError


class Transport:
    def __init__(self, base_url: str, user_id: str, channel_id: str | None = None,
                 admin_secret: str | None = None, timeout: float = 10.0, max_retries: int = 3,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._user_id = user_id
        self._channel_id = channel_id
        self._admin_secret = admin_secret
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "Transport":
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=httpx.Timeout(self._timeout),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=5), transport=self._transport)
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        h = {"Content-Type": "application/json", "X-User-ID": self._user_id}
        if self._channel_id:
            h["X-Channel-ID"] = self._channel_id
        if self._admin_secret:
            h["X-Admin-Secret"] = self._admin_secret
        return h

    def _backoff(self, attempt: int) -> float:
        delay = min(0.5 * (2 ** attempt), 10.0)
        return max(0.1, delay + delay * 0.25 * (2 * random.random() - 1))

    def _retryable(self, code: int) -> bool:
        return code in (408, 500, 502, 503, 504)

    async def get(self, path: str, retry: bool = True) -> tuple[int, dict | None, httpx.Headers]:
        return await self.request("GET", path, None, retry)

    async def post(self, path: str, data: dict | None = None, retry: bool = False) -> tuple[int, dict | None, httpx.Headers]:
        return await self.request("POST", path, data, retry)

    async def put(self, path: str, data: dict, retry: bool = False) -> tuple[int, dict | None, httpx.Headers]:
        return await self.request("PUT", path, data, retry)

    async def delete(self, path: str, retry: bool = False) -> tuple[int, dict | None, httpx.Headers]:
        return await self.request("DELETE", path, None, retry)

    async def request(self, method: str, path: str, data: dict | None, retry: bool) -> tuple[int, dict | None, httpx.Headers]:
        """Send a request, retrying transient failures when ``retry`` is set.

        Commands change server state, so callers only retry reads.
        """
        if not self._client:
            raise TransportError("Transport not initialized")
        last_err: Exception | None = None
        attempts = self._max_retries if retry else 1
        for i in range(attempts):
            try:
                resp = await self._client.request(method, path, json=data, headers=self._headers())
                if self._retryable(resp.status_code) and i < attempts - 1:
                    await asyncio.sleep(self._backoff(i))
                    continue
                try:
                    return resp.status_code, resp.json() if resp.content else None, resp.headers
                except ValueError:
                    return resp.status_code, None, resp.headers
            except (httpx.TimeoutException, httpx.RequestError) as e:
                last_err = e
                if i < attempts - 1:
                    await asyncio.sleep(self._backoff(i))
        raise TransportError(f"Request failed after {attempts} attempts: {last_err}")
