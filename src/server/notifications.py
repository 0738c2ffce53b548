"""Session lifecycle notification delivery.

The registry emits :class:`SessionEvent` values; the dispatcher queues them
and hands each one to a :class:`NotificationAdapter` in the background.
Notifications are fire-and-forget: a failed delivery is logged and never
affects session state.
"""
import asyncio
import logging
from typing import Any, Hashable, Optional, Protocol

import httpx

from src.lobby.events import SessionAction, SessionEvent
from src.lobby.models import Invite, Session, SessionOutcome

logger = logging.getLogger(__name__)

COLOR_GREEN = 0x2ECC71
COLOR_BLUE = 0x3498DB
COLOR_RED = 0xE74C3C
COLOR_GREY = 0x95A5A6


class NotificationError(Exception):
    """A notification could not be delivered."""


class NotificationAdapter(Protocol):
    async def notify_invite(self, invite: Invite) -> None: ...

    async def notify_accept(self, session: Session, turn: Hashable) -> None: ...

    async def notify_decline(self, invite: Invite) -> None: ...

    async def notify_cancel(self, invite: Invite) -> None: ...

    async def notify_turn(self, session: Session, turn: Hashable) -> None: ...

    async def notify_end(self, session: Session, outcome: SessionOutcome) -> None: ...

    async def notify_timeout(self, session: Session) -> None: ...


def mention(identity: Hashable) -> str:
    return f"<@{identity}>"


def build_embed(event: SessionEvent) -> dict[str, Any]:
    """Render a lifecycle event as a chat embed payload."""
    invite, session = event.invite, event.session
    action = event.action
    if action == SessionAction.INVITED:
        return {
            "title": "Game Invite",
            "description": f"{mention(invite.inviter)} has invited {mention(invite.invitee)} to play a game!",
            "footer": {"text": "Type /accept to join the game or /decline to decline the invite."},
            "color": COLOR_GREEN,
        }
    if action == SessionAction.DECLINED:
        return {
            "title": "Game Invite Declined",
            "description": f"{mention(invite.invitee)} has declined the invite from {mention(invite.inviter)}!",
            "color": COLOR_RED,
        }
    if action == SessionAction.CANCELED:
        return {
            "title": "Game Invite Canceled",
            "description": f"{mention(invite.inviter)} withdrew the invite to {mention(invite.invitee)}.",
            "color": COLOR_GREY,
        }
    if action in (SessionAction.ACCEPTED, SessionAction.TURN_PASSED):
        return {
            "title": "Game",
            "fields": [
                {
                    "name": "Players",
                    "value": f"{mention(session.participant_a)} VS {mention(session.participant_b)}",
                    "inline": True,
                },
                {"name": "Turn", "value": mention(event.turn_holder), "inline": False},
            ],
            "color": COLOR_BLUE,
        }
    if action == SessionAction.ENDED:
        winner = event.outcome.winner if event.outcome else None
        return {
            "title": "Game Over!",
            "description": (
                f"The game between {mention(session.participant_a)} and "
                f"{mention(session.participant_b)} has ended!"
            ),
            "fields": [
                {"name": "Winner", "value": mention(winner) if winner is not None else "Nobody", "inline": True},
            ],
            "color": COLOR_BLUE,
        }
    if action == SessionAction.TIMED_OUT:
        return {
            "title": "Time's up!",
            "description": (
                f"Game between {mention(session.participant_a)} and "
                f"{mention(session.participant_b)} has ended!"
            ),
            "color": COLOR_RED,
        }
    raise ValueError(f"Unknown action {action}")


class LoggingNotifier:
    """Writes notifications to the log. Used when no webhook is configured."""

    async def notify_invite(self, invite: Invite) -> None:
        logger.info("[notify] invite %s -> %s", invite.inviter, invite.invitee)

    async def notify_accept(self, session: Session, turn: Hashable) -> None:
        logger.info("[notify] session %s started, %s moves first", session.session_id, turn)

    async def notify_decline(self, invite: Invite) -> None:
        logger.info("[notify] invite %s -> %s declined", invite.inviter, invite.invitee)

    async def notify_cancel(self, invite: Invite) -> None:
        logger.info("[notify] invite %s -> %s canceled", invite.inviter, invite.invitee)

    async def notify_turn(self, session: Session, turn: Hashable) -> None:
        logger.info("[notify] session %s turn: %s", session.session_id, turn)

    async def notify_end(self, session: Session, outcome: SessionOutcome) -> None:
        logger.info(
            "[notify] session %s over, winner=%s", session.session_id,
            outcome.winner if outcome.winner is not None else "nobody",
        )

    async def notify_timeout(self, session: Session) -> None:
        logger.info("[notify] session %s timed out", session.session_id)


class WebhookNotifier:
    """Posts embeds to a chat platform webhook (Discord-compatible payload).

    Each session gets one game message: it is posted on accept and edited
    in place on every turn. Invite, end and timeout notices are posted as
    new messages.
    """

    def __init__(self, webhook_url: str, timeout: float = 5.0, client: Optional[httpx.AsyncClient] = None) -> None:
        if not webhook_url:
            raise NotificationError("Webhook URL required")
        self._url = webhook_url
        self._timeout = timeout
        self._client = client
        self._game_messages: dict[str, str] = {}

    def game_message(self, session_id: str) -> Optional[str]:
        return self._game_messages.get(session_id)

    async def notify_invite(self, invite: Invite) -> None:
        await self._post(SessionEvent(SessionAction.INVITED, invite=invite), content=mention(invite.invitee))

    async def notify_accept(self, session: Session, turn: Hashable) -> None:
        await self._post_game(session, SessionEvent(SessionAction.ACCEPTED, session=session, turn_holder=turn))

    async def notify_decline(self, invite: Invite) -> None:
        await self._post(SessionEvent(SessionAction.DECLINED, invite=invite))

    async def notify_cancel(self, invite: Invite) -> None:
        await self._post(SessionEvent(SessionAction.CANCELED, invite=invite))

    async def notify_turn(self, session: Session, turn: Hashable) -> None:
        event = SessionEvent(SessionAction.TURN_PASSED, session=session, turn_holder=turn)
        message_id = self._game_messages.get(session.session_id)
        if message_id is None:
            await self._post_game(session, event)
            return
        response = await self._send("PATCH", self._message_url(message_id), {"embeds": [build_embed(event)]})
        if response.status_code == 404:
            # game message was deleted in the channel
            logger.info("Game message %s for session %s is gone, reposting", message_id, session.session_id)
            del self._game_messages[session.session_id]
            await self._post_game(session, event)
            return
        _check(response)

    async def notify_end(self, session: Session, outcome: SessionOutcome) -> None:
        self._game_messages.pop(session.session_id, None)
        await self._post(SessionEvent(SessionAction.ENDED, session=session, outcome=outcome))

    async def notify_timeout(self, session: Session) -> None:
        self._game_messages.pop(session.session_id, None)
        await self._post(SessionEvent(SessionAction.TIMED_OUT, session=session))

    async def _post(self, event: SessionEvent, content: Optional[str] = None) -> None:
        payload: dict[str, Any] = {"embeds": [build_embed(event)]}
        if content:
            payload["content"] = content
        _check(await self._send("POST", self._url, payload))

    async def _post_game(self, session: Session, event: SessionEvent) -> None:
        payload = {"embeds": [build_embed(event)]}
        response = await self._send("POST", self._url, payload, params={"wait": "true"})
        _check(response)
        message_id = _message_id(response)
        if message_id is not None:
            self._game_messages[session.session_id] = message_id

    def _message_url(self, message_id: str) -> httpx.URL:
        url = httpx.URL(self._url)
        return url.copy_with(path=f"{url.path.rstrip('/')}/messages/{message_id}")

    async def _send(
        self, method: str, url: Any, payload: dict[str, Any], params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, json=payload, params=params, timeout=self._timeout)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, json=payload, params=params)


def _check(response: httpx.Response) -> None:
    if response.status_code >= 400:
        raise NotificationError(f"Webhook returned {response.status_code}: {response.text}")


def _message_id(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    return None


class NotificationDispatcher:
    """Queues lifecycle events and delivers them to an adapter in the background.

    ``publish`` never blocks and never raises; it may be called from the
    event loop or from worker threads. Events published while the
    dispatcher is stopped, or when the queue is full, are dropped and
    counted.
    """

    def __init__(self, adapter: NotificationAdapter, max_size: int = 1000) -> None:
        self._adapter = adapter
        self._max_size = max_size
        self._queue: Optional[asyncio.Queue[SessionEvent]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._dropped_count = 0
        self._failed_count = 0

    @property
    def adapter(self) -> NotificationAdapter:
        return self._adapter

    @property
    def dropped_count(self) -> int:
        return self._dropped_count

    @property
    def failed_count(self) -> int:
        return self._failed_count

    def size(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._max_size)
        self._task = self._loop.create_task(self._worker())
        logger.info("Notification dispatcher started with %s", type(self._adapter).__name__)

    async def stop(self, drain: bool = True) -> None:
        """Stop the worker, first delivering what is queued when ``drain``."""
        if self._task is None:
            return
        if drain and self._queue is not None:
            await self._queue.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._loop = None
        logger.info("Notification dispatcher stopped")

    async def drain(self) -> None:
        """Wait until every queued event has been handled."""
        if self._queue is not None:
            await self._queue.join()

    def publish(self, event: SessionEvent) -> None:
        loop = self._loop
        if loop is None or self._queue is None or loop.is_closed():
            self._dropped_count += 1
            logger.debug("Dispatcher not running, dropped %s", event.action.value)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._enqueue(event)
        else:
            loop.call_soon_threadsafe(self._enqueue, event)

    def _enqueue(self, event: SessionEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped_count += 1
            logger.warning("Notification queue full, dropped %s", event.action.value)

    async def _worker(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._deliver(event)
            except Exception as exc:
                self._failed_count += 1
                logger.warning("Notification %s failed: %s", event.action.value, exc)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: SessionEvent) -> None:
        action = event.action
        if action == SessionAction.INVITED:
            await self._adapter.notify_invite(event.invite)
        elif action == SessionAction.ACCEPTED:
            await self._adapter.notify_accept(event.session, event.turn_holder)
        elif action == SessionAction.DECLINED:
            await self._adapter.notify_decline(event.invite)
        elif action == SessionAction.CANCELED:
            await self._adapter.notify_cancel(event.invite)
        elif action == SessionAction.TURN_PASSED:
            await self._adapter.notify_turn(event.session, event.turn_holder)
        elif action == SessionAction.ENDED:
            await self._adapter.notify_end(event.session, event.outcome)
        elif action == SessionAction.TIMED_OUT:
            await self._adapter.notify_timeout(event.session)


def build_adapter(webhook_url: str, timeout: float = 5.0) -> NotificationAdapter:
    """Webhook adapter when a URL is configured, else the logging adapter."""
    if webhook_url:
        return WebhookNotifier(webhook_url, timeout=timeout)
    return LoggingNotifier()
