"""Starting-turn selection."""
import random
import threading
from typing import Hashable, Optional, Protocol


class TurnPicker(Protocol):
    """Chooses which of two participants acts first."""

    def pick(self, first: Hashable, second: Hashable) -> Hashable: ...


class RandomTurnPicker:
    """Unbiased coin flip backed by a seedable ``random.Random``."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def pick(self, first: Hashable, second: Hashable) -> Hashable:
        with self._lock:
            heads = self._rng.getrandbits(1)
        return first if heads else second
