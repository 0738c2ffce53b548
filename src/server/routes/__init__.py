"""Route handlers for the command service."""
from src.server.routes.channel import create_channel_router
from src.server.routes.health import create_health_router
from src.server.routes.invites import create_invite_router
from src.server.routes.sessions import create_session_router
__all__ = [
    "create_channel_router",
    "create_health_router",
    "create_invite_router",
    "create_session_router",
]
