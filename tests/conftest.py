"""Pytest fixtures shared by lobby and server tests."""
from pathlib import Path
from typing import Hashable

import pytest
import yaml
from fastapi.testclient import TestClient

from src.lobby.registry import SessionRegistry
from src.lobby.scheduler import TimeoutScheduler
from src.server.app import create_app
from src.server.config import ChannelConfig, CooldownConfig, ServerConfig, SessionConfig

GAME_CHANNEL = "game-room"
ADMIN_SECRET = "test-admin-secret"


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedTurnPicker:
    """Always gives the first turn to the first participant (the inviter)."""

    def pick(self, first: Hashable, second: Hashable) -> Hashable:
        return first


class RecordingNotifier:
    """Notification adapter that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    async def notify_invite(self, invite):
        self.calls.append(("invite", invite))

    async def notify_accept(self, session, turn):
        self.calls.append(("accept", session, turn))

    async def notify_decline(self, invite):
        self.calls.append(("decline", invite))

    async def notify_cancel(self, invite):
        self.calls.append(("cancel", invite))

    async def notify_turn(self, session, turn):
        self.calls.append(("turn", session, turn))

    async def notify_end(self, session, outcome):
        self.calls.append(("end", session, outcome))

    async def notify_timeout(self, session):
        self.calls.append(("timeout", session))

    def kinds(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def turn_picker() -> FixedTurnPicker:
    return FixedTurnPicker()


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def scheduler(clock: FakeClock) -> TimeoutScheduler:
    return TimeoutScheduler(tick_interval=0.01, clock=clock)


@pytest.fixture
def registry(clock: FakeClock, scheduler: TimeoutScheduler, turn_picker: FixedTurnPicker, events: list) -> SessionRegistry:
    return SessionRegistry(
        time_limit=300,
        scheduler=scheduler,
        turn_picker=turn_picker,
        clock=clock,
        on_event=events.append,
    )


@pytest.fixture
def channel_file(tmp_path: Path) -> Path:
    path = tmp_path / "channel.yaml"
    path.write_text(yaml.safe_dump({"required_channel": GAME_CHANNEL}))
    return path


@pytest.fixture
def server_config(channel_file: Path) -> ServerConfig:
    return ServerConfig(
        session=SessionConfig(time_limit=60, tick_interval=0.05),
        cooldown=CooldownConfig(seconds=0),
        channel=ChannelConfig(channel_file=channel_file, admin_secret=ADMIN_SECRET),
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(server_config: ServerConfig, clock: FakeClock, turn_picker: FixedTurnPicker, notifier: RecordingNotifier):
    return create_app(server_config, clock=clock, turn_picker=turn_picker, adapter=notifier)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def as_user():
    """Build request headers for a command issued by a user."""
    def _headers(user_id: str, channel_id: str = GAME_CHANNEL) -> dict[str, str]:
        return {"X-User-ID": user_id, "X-Channel-ID": channel_id}
    return _headers


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-User-ID": "admin", "X-Admin-Secret": ADMIN_SECRET}
