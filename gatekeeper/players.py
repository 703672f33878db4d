"""
Live Player Registry

Maps connected sessions to principal IDs. The permission engine itself only
keys on raw principal IDs; this registry backs the convenience wrappers and
the command layer, which deal in player handles and typed names.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class PlayerSession:
    """A connected player"""

    uid: int
    name: str
    messages: List[str] = field(default_factory=list)

    def message(self, text: str) -> None:
        """Queue a chat line for the player until the host transport drains it."""
        self.messages.append(text)

    def drain(self) -> List[str]:
        """Hand over every queued chat line and empty the outbox."""
        pending, self.messages = self.messages, []
        return pending


def principal_id_of(handle: Any) -> Optional[int]:
    """
    Resolve a principal ID from a raw ID, a session or a permission record.

    Returns:
        The principal ID, or None for anything unrecognized (including None)
    """
    if handle is None or isinstance(handle, bool):
        return None
    if isinstance(handle, int):
        return handle
    uid = getattr(handle, "uid", None)
    if isinstance(uid, int):
        return uid
    principal_id = getattr(handle, "principal_id", None)
    if isinstance(principal_id, int):
        return principal_id
    return None


class PlayerRegistry:
    """
    Thread-safe uid -> session map of online players
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[int, PlayerSession] = {}

    def connect(self, uid: int, name: str) -> PlayerSession:
        session = PlayerSession(uid=uid, name=name)
        with self._lock:
            self._sessions[uid] = session
        logger.debug(f"Player connected: {name} ({uid})")
        return session

    def disconnect(self, uid: int) -> bool:
        with self._lock:
            session = self._sessions.pop(uid, None)
        if session is None:
            return False
        logger.debug(f"Player disconnected: {session.name} ({uid})")
        return True

    def get(self, uid: int) -> Optional[PlayerSession]:
        with self._lock:
            return self._sessions.get(uid)

    def online(self) -> List[PlayerSession]:
        with self._lock:
            return list(self._sessions.values())

    def find(self, query: str) -> Optional[PlayerSession]:
        """
        Find an online player by uid, exact name, or unique name prefix.

        Name matching is case-insensitive. An ambiguous prefix returns None.
        """
        query = query.strip()
        if not query:
            return None

        sessions = self.online()

        if query.isdecimal():
            for session in sessions:
                if session.uid == int(query):
                    return session

        lowered = query.lower()
        for session in sessions:
            if session.name.lower() == lowered:
                return session

        matches = [s for s in sessions if s.name.lower().startswith(lowered)]
        if len(matches) == 1:
            return matches[0]
        return None
