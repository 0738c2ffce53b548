"""FastAPI application factory."""
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from src.lobby.errors import LobbyError
from src.lobby.registry import SessionRegistry
from src.lobby.scheduler import TimeoutScheduler
from src.lobby.turns import RandomTurnPicker, TurnPicker
from src.server.channel import ChannelSettings, ChannelSettingsError
from src.server.config import ServerConfig, load_config_from_env
from src.server.errors import CooldownError, TurnkeeperError, lobby_status
from src.server.middleware.cooldown import CooldownMiddleware
from src.server.middleware.logging import RequestLoggingMiddleware
from src.server.models.responses import ErrorResponse, ErrorDetail
from src.server.notifications import NotificationAdapter, NotificationDispatcher, build_adapter
from src.server.routes.channel import create_channel_router
from src.server.routes.health import create_health_router
from src.server.routes.invites import create_invite_router
from src.server.routes.sessions import create_session_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ServerConfig] = None,
    *,
    clock: Callable[[], float] = time.monotonic,
    turn_picker: Optional[TurnPicker] = None,
    adapter: Optional[NotificationAdapter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    When called without arguments (e.g. via uvicorn --factory), loads
    configuration from environment variables. ``clock``, ``turn_picker``
    and ``adapter`` replace the real collaborators in tests.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if config is None:
        config = load_config_from_env()

    if adapter is None:
        adapter = build_adapter(config.notify.webhook_url, timeout=config.notify.timeout)
    dispatcher = NotificationDispatcher(adapter, max_size=config.notify.queue_size)
    scheduler = TimeoutScheduler(tick_interval=config.session.tick_interval, clock=clock)
    registry = SessionRegistry(
        time_limit=config.session.time_limit,
        scheduler=scheduler,
        turn_picker=turn_picker or RandomTurnPicker(seed=config.session.turn_seed),
        clock=clock,
        on_event=dispatcher.publish,
    )
    channels = ChannelSettings(config.channel.channel_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            required = channels.load()
        except ChannelSettingsError as exc:
            logger.error("Could not load channel settings: %s", exc)
            required = None
        if required is None:
            logger.warning("No game channel configured; commands will be rejected until one is set")

        dispatcher.start()
        scheduler.start()
        app.state.registry = registry
        app.state.scheduler = scheduler
        app.state.dispatcher = dispatcher
        app.state.channels = channels
        logger.info(
            "Session service ready, time_limit=%.0fs tick=%.2fs",
            config.session.time_limit, config.session.tick_interval,
        )
        yield
        ended = registry.close()
        await scheduler.stop()
        await dispatcher.stop()
        logger.info("Session service stopped, %d session(s) ended at shutdown", ended)

    app = FastAPI(
        title="Turnkeeper",
        description="Invite and turn-based session service for chat bots",
        version=config.version,
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    if config.cooldown.seconds > 0:
        app.add_middleware(CooldownMiddleware, seconds=config.cooldown.seconds)
    app.add_exception_handler(TurnkeeperError, _turnkeeper_error_handler)
    app.add_exception_handler(LobbyError, _lobby_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.include_router(create_invite_router(registry, channels))
    app.include_router(create_session_router(registry, channels))
    app.include_router(create_channel_router(channels, config.channel.admin_secret))
    app.include_router(create_health_router(config, registry, scheduler, dispatcher))
    return app


async def _turnkeeper_error_handler(request: Request, exc: TurnkeeperError) -> JSONResponse:
    headers = {}
    if isinstance(exc, CooldownError) and exc.retry_after:
        headers["Retry-After"] = str(max(1, int(exc.retry_after)))
    response = ErrorResponse(error=ErrorDetail(code=exc.error_code, message=exc.message, details=exc.details))
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(), headers=headers if headers else None)


async def _lobby_error_handler(request: Request, exc: LobbyError) -> JSONResponse:
    response = ErrorResponse(error=ErrorDetail(code=exc.error_code, message=exc.message, details=exc.details))
    return JSONResponse(status_code=lobby_status(exc), content=response.model_dump())


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    response = ErrorResponse(error=ErrorDetail(code="INVALID_FORMAT", message="Request validation failed", details={"validation_errors": exc.errors()}))
    return JSONResponse(status_code=400, content=response.model_dump())
