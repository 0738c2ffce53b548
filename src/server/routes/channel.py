"""Required-channel endpoints: show, set, clear."""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Header

from src.server.channel import ChannelSettings, ChannelSettingsError
from src.server.errors import ChannelConflictError, NotAuthorizedError, TurnkeeperError
from src.server.models.requests import ChannelRequest
from src.server.models.responses import ChannelResponse

logger = logging.getLogger(__name__)


def create_channel_router(channels: ChannelSettings, admin_secret: str = "") -> APIRouter:
    """Create the channel router.

    Args:
        channels: Required-channel store shared with the command routes.
        admin_secret: Value expected in X-Admin-Secret for changes. An empty
            string rejects every change.
    """
    router = APIRouter(prefix="/channel", tags=["channel"])

    def _check_admin(x_admin_secret: Optional[str]) -> None:
        if not admin_secret or not x_admin_secret:
            raise NotAuthorizedError("Admin secret required")
        if not hmac.compare_digest(x_admin_secret.encode(), admin_secret.encode()):
            logger.warning("Rejected channel change with invalid admin secret")
            raise NotAuthorizedError("Invalid admin secret")

    @router.get("", response_model=ChannelResponse)
    async def show_channel() -> ChannelResponse:
        return ChannelResponse(required_channel=channels.required_channel())

    @router.put("", response_model=ChannelResponse)
    async def set_channel(
        body: ChannelRequest,
        x_admin_secret: Optional[str] = Header(default=None),
    ) -> ChannelResponse:
        """Make ``channel_id`` the channel commands must come from."""
        _check_admin(x_admin_secret)
        try:
            changed = channels.set_channel(body.channel_id)
        except ChannelSettingsError as exc:
            logger.error("Channel update failed: %s", exc)
            raise TurnkeeperError(str(exc)) from exc
        if not changed:
            raise ChannelConflictError(
                f"{body.channel_id} is already the game channel",
                {"channel_id": body.channel_id},
            )
        return ChannelResponse(required_channel=channels.required_channel())

    @router.delete("/{channel_id}", response_model=ChannelResponse)
    async def clear_channel(
        channel_id: str,
        x_admin_secret: Optional[str] = Header(default=None),
    ) -> ChannelResponse:
        """Remove ``channel_id`` as the game channel."""
        _check_admin(x_admin_secret)
        try:
            changed = channels.clear_channel(channel_id)
        except ChannelSettingsError as exc:
            logger.error("Channel removal failed: %s", exc)
            raise TurnkeeperError(str(exc)) from exc
        if not changed:
            raise ChannelConflictError(
                f"{channel_id} is not the game channel",
                {"channel_id": channel_id},
            )
        return ChannelResponse(required_channel=channels.required_channel())

    return router
