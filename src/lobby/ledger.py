"""Outstanding invites, keyed by invitee."""
import logging
import threading
from typing import Callable, Hashable, Optional

from src.lobby.errors import AlreadyInSessionError, DuplicateInviteError, SelfInviteError
from src.lobby.models import Invite

logger = logging.getLogger(__name__)


class InviteLedger:
    """Tracks at most one pending invite per invitee.

    An inviter may have several outstanding invites to different invitees.
    ``is_busy`` reports whether an identity is in an active session; the
    registry supplies it together with its own lock so invite checks and
    session membership are read under the same mutual exclusion.
    """

    def __init__(
        self,
        is_busy: Optional[Callable[[Hashable], bool]] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._invites: dict[Hashable, Invite] = {}
        self._is_busy = is_busy or (lambda identity: False)
        self._lock = lock or threading.RLock()

    def __len__(self) -> int:
        return len(self._invites)

    def __contains__(self, invitee: Hashable) -> bool:
        return invitee in self._invites

    def invite(self, inviter: Hashable, invitee: Hashable) -> Invite:
        if inviter == invitee:
            raise SelfInviteError(inviter)
        with self._lock:
            for party in (inviter, invitee):
                if self._is_busy(party):
                    raise AlreadyInSessionError(party)
            existing = self._invites.get(invitee)
            if existing is not None:
                raise DuplicateInviteError(invitee, existing.inviter)
            invite = Invite(inviter=inviter, invitee=invitee)
            self._invites[invitee] = invite
            return invite

    def cancel(self, inviter: Hashable, invitee: Optional[Hashable] = None) -> Optional[Invite]:
        """Withdraw an invite sent by ``inviter``.

        Targets the invite to ``invitee`` when given, otherwise the most
        recently sent one. Returns None when nothing matches.
        """
        with self._lock:
            if invitee is not None:
                invite = self._invites.get(invitee)
                if invite is None or invite.inviter != inviter:
                    return None
                return self._invites.pop(invitee)
            sent = self.outgoing(inviter)
            if not sent:
                return None
            return self._invites.pop(sent[-1].invitee)

    def resolve(self, invitee: Hashable) -> Optional[Invite]:
        with self._lock:
            return self._invites.get(invitee)

    def take(self, invitee: Hashable) -> Optional[Invite]:
        """Remove and return the invite for ``invitee`` in one step."""
        with self._lock:
            return self._invites.pop(invitee, None)

    def outgoing(self, inviter: Hashable) -> list[Invite]:
        """Invites sent by ``inviter``, oldest first."""
        with self._lock:
            return [i for i in self._invites.values() if i.inviter == inviter]

    def purge(self, identity: Hashable) -> list[Invite]:
        """Drop every invite naming ``identity`` as inviter or invitee."""
        with self._lock:
            doomed = [i for i in self._invites.values() if i.involves(identity)]
            for invite in doomed:
                del self._invites[invite.invitee]
        if doomed:
            logger.info("Purged %d invite(s) involving %s", len(doomed), identity)
        return doomed

    def snapshot(self) -> list[Invite]:
        with self._lock:
            return list(self._invites.values())

    def clear(self) -> int:
        with self._lock:
            count = len(self._invites)
            self._invites.clear()
            return count
