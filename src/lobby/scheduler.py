"""Coalesced expiration ticker for active sessions.

One scheduler watches every session's deadline. Each session holds a
:class:`Watch` handle; canceling it before the tick that would fire it
guarantees the expiration callback never runs for that session.
"""
import asyncio
import logging
import threading
import time
from contextlib import suppress
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 1.0

ExpireCallback = Callable[[], None]


class Watch:
    """A single armed deadline. Fires at most once."""

    def __init__(
        self, scheduler: "TimeoutScheduler", session_id: str, deadline: float, callback: ExpireCallback,
    ) -> None:
        self._scheduler = scheduler
        self._session_id = session_id
        self._deadline = deadline
        self._callback = callback
        self._armed = True

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def deadline(self) -> float:
        return self._deadline

    @property
    def armed(self) -> bool:
        return self._armed

    def cancel(self) -> bool:
        """Disarm the watch. Returns False if it already fired or was canceled."""
        return self._scheduler._disarm(self)


class TimeoutScheduler:
    """Fires expiration callbacks for deadlines that have passed.

    ``tick()`` is synchronous and can be driven directly; ``start()`` runs
    it every ``tick_interval`` seconds as a background asyncio task. A
    deadline fires on the first tick at or after it, so expiration is never
    early and at most one interval late.
    """

    def __init__(self, tick_interval: float = DEFAULT_TICK_INTERVAL, clock: Callable[[], float] = time.monotonic) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self._tick_interval = tick_interval
        self._clock = clock
        self._watches: dict[str, Watch] = {}
        self._lock = threading.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._watches)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, session_id: str, deadline: float, on_expire: ExpireCallback) -> Watch:
        watch = Watch(self, session_id, deadline, on_expire)
        with self._lock:
            if session_id in self._watches:
                raise ValueError(f"Session {session_id} already has an armed watch")
            self._watches[session_id] = watch
        logger.debug("Armed watch for session=%s deadline=%.3f", session_id, deadline)
        return watch

    def tick(self, now: Optional[float] = None) -> int:
        """Fire every due watch once. Returns how many fired."""
        if now is None:
            now = self._clock()
        with self._lock:
            due = [w for w in self._watches.values() if w.deadline <= now]
            for watch in due:
                del self._watches[watch.session_id]
                watch._armed = False
        for watch in due:
            logger.info("Deadline reached for session=%s", watch.session_id)
            try:
                watch._callback()
            except Exception:
                logger.exception("Expiration callback failed for session=%s", watch.session_id)
        return len(due)

    async def run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self._tick_interval)

    def start(self) -> None:
        """Start ticking on the running event loop. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self.run())
        logger.info("Timeout scheduler started, interval=%.2fs", self._tick_interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("Timeout scheduler stopped")

    def clear(self) -> int:
        with self._lock:
            count = len(self._watches)
            for watch in self._watches.values():
                watch._armed = False
            self._watches.clear()
            return count

    def _disarm(self, watch: Watch) -> bool:
        with self._lock:
            if self._watches.get(watch.session_id) is not watch:
                return False
            del self._watches[watch.session_id]
            watch._armed = False
        logger.debug("Canceled watch for session=%s", watch.session_id)
        return True
