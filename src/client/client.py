"""Main TurnkeeperClient class for issuing lobby commands."""

from __future__ import annotations

from typing import Any

import httpx

from .exceptions import CooldownError, TurnkeeperAPIError
from .transport import Transport


class TurnkeeperClient:
    """Client for the Turnkeeper command service. Must be used as async context manager.

    Every command acts as ``user_id``. Commands are issued from ``channel_id``,
    which the server checks against its configured game channel.
    """

    def __init__(self, server_url: str, user_id: str, channel_id: str | None = None,
                 admin_secret: str | None = None, timeout: float = 10.0, max_retries: int = 3,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._server_url = server_url
        self._user_id = user_id
        self._transport = Transport(server_url, user_id, channel_id, admin_secret, timeout, max_retries, transport)

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def server_url(self) -> str:
        return self._server_url

    async def __aenter__(self) -> "TurnkeeperClient":
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        await self._transport.__aexit__(*args)

    async def invite(self, invitee_id: str) -> dict[str, Any]:
        return self._check(*await self._transport.post("/invites", {"invitee_id": invitee_id}))

    async def accept(self) -> dict[str, Any]:
        return self._check(*await self._transport.post("/invites/accept"))

    async def decline(self) -> dict[str, Any]:
        return self._check(*await self._transport.post("/invites/decline"))

    async def cancel(self, invitee_id: str | None = None) -> dict[str, Any]:
        """Withdraw an invite; the most recent one when ``invitee_id`` is omitted."""
        body = {"invitee_id": invitee_id} if invitee_id else None
        return self._check(*await self._transport.post("/invites/cancel", body))

    async def pending(self) -> dict[str, Any]:
        return self._check(*await self._transport.get("/invites/pending"))

    async def move(self, content: str | None = None) -> dict[str, Any]:
        body = {"content": content} if content else None
        return self._check(*await self._transport.post("/sessions/move", body))

    async def end(self, winner_id: str | None = None) -> dict[str, Any]:
        body = {"winner_id": winner_id} if winner_id else None
        return self._check(*await self._transport.post("/sessions/end", body))

    async def my_session(self) -> dict[str, Any]:
        return self._check(*await self._transport.get("/sessions/me"))

    async def get_session(self, session_id: str) -> dict[str, Any]:
        return self._check(*await self._transport.get(f"/sessions/{session_id}"))

    async def get_channel(self) -> dict[str, Any]:
        return self._check(*await self._transport.get("/channel"))

    async def set_channel(self, channel_id: str) -> dict[str, Any]:
        return self._check(*await self._transport.put("/channel", {"channel_id": channel_id}))

    async def clear_channel(self, channel_id: str) -> dict[str, Any]:
        return self._check(*await self._transport.delete(f"/channel/{channel_id}"))

    async def health(self) -> dict[str, Any]:
        return self._check(*await self._transport.get("/health"))

    def _check(self, status: int, body: dict | None, headers: httpx.Headers) -> dict[str, Any]:
        if status < 400:
            return body or {}
        error = (body or {}).get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            # FastAPI's own 422 body is {"detail": [...]}
            detail = (body or {}).get("detail") if isinstance(body, dict) else None
            raise TurnkeeperAPIError(f"Server returned {status}", status, "INVALID_FORMAT" if status == 422 else "INTERNAL_ERROR",
                                     {"detail": detail} if detail else None)
        message = error.get("message", f"Server returned {status}")
        details = error.get("details") or {}
        if status == 429:
            retry_after = details.get("retry_after")
            if retry_after is None and "Retry-After" in headers:
                retry_after = float(headers["Retry-After"])
            raise CooldownError(message, retry_after, details)
        raise TurnkeeperAPIError(message, status, error.get("code", "INTERNAL_ERROR"), details)
