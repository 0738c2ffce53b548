"""GET /health endpoint handler."""
from datetime import datetime, timezone
from fastapi import APIRouter, status
from src.lobby.registry import SessionRegistry
from src.lobby.scheduler import TimeoutScheduler
from src.server.config import ServerConfig
from src.server.models.responses import HealthResponse
from src.server.notifications import NotificationDispatcher

NOTIFY_BACKLOG_THRESHOLD = 0.8


def create_health_router(
    config: ServerConfig,
    registry: SessionRegistry,
    scheduler: TimeoutScheduler,
    dispatcher: NotificationDispatcher,
) -> APIRouter:
    """Create health router with injected dependencies."""
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK, tags=["status"])
    async def health_check() -> HealthResponse:
        """Report whether sessions are expiring and notifications flowing."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        backlog = dispatcher.size()
        message = None
        if not scheduler.running:
            message = "Timeout scheduler is not running"
        elif backlog / config.notify.queue_size >= NOTIFY_BACKLOG_THRESHOLD:
            message = "Notification backlog exceeds threshold"
        return HealthResponse(
            status="degraded" if message else "healthy",
            version=config.version,
            timestamp=timestamp,
            active_sessions=len(registry.active_sessions()),
            pending_invites=registry.pending_count(),
            armed_watches=scheduler.pending,
            notification_backlog=backlog,
            scheduler_running=scheduler.running,
            message=message,
        )

    return router
