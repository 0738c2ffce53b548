"""Tests for starting-turn selection."""
from collections import Counter

from src.lobby.turns import RandomTurnPicker


class TestRandomTurnPicker:
    """Tests for RandomTurnPicker."""

    def test_picks_a_participant(self):
        """The pick is always one of the two participants."""
        picker = RandomTurnPicker()
        for _ in range(50):
            assert picker.pick("alice", "bob") in ("alice", "bob")

    def test_seed_is_reproducible(self):
        """Two pickers with the same seed make the same choices."""
        first = RandomTurnPicker(seed=42)
        second = RandomTurnPicker(seed=42)
        picks = [first.pick("a", "b") for _ in range(20)]
        assert picks == [second.pick("a", "b") for _ in range(20)]

    def test_both_sides_chosen(self):
        """Over many flips both participants get the first turn."""
        picker = RandomTurnPicker(seed=7)
        counts = Counter(picker.pick("a", "b") for _ in range(1000))
        assert 400 < counts["a"] < 600
        assert counts["a"] + counts["b"] == 1000
