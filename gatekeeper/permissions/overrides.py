"""
Permission Overrides

Ephemeral "forced off" switches for principals. Entries live only in memory:
they are never written to the permission documents and disappear on restart
or when cleared explicitly.

Overrides are guarded by their own lock so that frequent permission checks
are never blocked by group or player edits in the store.
"""

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)


class OverrideRegistry:
    """
    Map of principal_id -> whether the default group is suppressed as well
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._disabled: Dict[int, bool] = {}

    def force_off(self, principal_id: int, also_suppress_default: bool) -> bool:
        """
        Temporarily remove all permissions of a principal.

        Args:
            principal_id: Principal to switch off
            also_suppress_default: Deny the default group's permissions too

        Returns:
            False if an override already exists (it is not overwritten)
        """
        with self._lock:
            if principal_id in self._disabled:
                return False
            self._disabled[principal_id] = also_suppress_default

        logger.info(
            f"Permissions forced off for {principal_id} "
            f"(default group suppressed: {also_suppress_default})"
        )
        return True

    def clear_force_off(self, principal_id: int) -> bool:
        with self._lock:
            if principal_id not in self._disabled:
                return False
            del self._disabled[principal_id]

        logger.info(f"Permissions override cleared for {principal_id}")
        return True

    def is_forced_off(self, principal_id: int) -> bool:
        with self._lock:
            return principal_id in self._disabled

    def is_default_also_suppressed(self, principal_id: int) -> bool:
        with self._lock:
            return self._disabled.get(principal_id, False)

    def snapshot(self) -> Dict[int, bool]:
        """Shallow copy of every active override."""
        with self._lock:
            return dict(self._disabled)

    def clear(self) -> None:
        with self._lock:
            self._disabled.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._disabled)
