"""Invite model."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Hashable


@dataclass(frozen=True)
class Invite:
    """An outstanding proposal from ``inviter`` to ``invitee``.

    Invites are never edited; a new one replaces an old one.
    """

    inviter: Hashable
    invitee: Hashable
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def involves(self, identity: Hashable) -> bool:
        return identity == self.inviter or identity == self.invitee
