"""
Core Permission Engine

Central permission evaluation for players, with:
- Default group fallback for principals without a record
- Group memberships and direct grants, '*' granting everything in scope
- Administrative "forced off" overrides that dominate every other rule
- Normalizing facade over the store, override registry and persistence
- Developer diagnostics for permission decisions (explain_permission)

Resolution order (first decisive step wins):
1. Forced off including the default group: deny
2. No player record: default group only
3. Forced off: deny (records only; step 2 never re-checks overrides)
4. Group memberships, in membership order
5. Direct permissions, in grant order
6. Deny
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import GatekeeperSettings, get_settings
from ..players import principal_id_of
from .hashing import get_unique_id
from .overrides import OverrideRegistry
from .storage import PersistenceGateway
from .store import PermissionStore
from .types import (
    DEFAULT_GROUP,
    PermissionGroup,
    PermissionPlayer,
    grants,
    normalize_token,
)

logger = logging.getLogger(__name__)


class PermissionEngine:
    """
    Permission resolver and administrative entry point

    Owned by the host process and handed to whoever needs it; there is no
    global instance.
    """

    def __init__(
        self,
        store: PermissionStore,
        overrides: OverrideRegistry,
        gateway: PersistenceGateway,
        explain_enabled: bool = False,
    ):
        """
        Initialize permission engine

        Args:
            store: Group and player collections
            overrides: Forced-off registry
            gateway: Persistence for the store
            explain_enabled: Allow explain_permission diagnostics
        """
        self.store = store
        self.overrides = overrides
        self.gateway = gateway
        self.explain_enabled = explain_enabled

    # ===== Persistence =====

    def reload(self) -> bool:
        """Reload permissions from disk; overrides are left untouched."""
        return self.gateway.reload()

    def save(self) -> bool:
        """Try to save memory to disk, reverting the files on failure."""
        return self.gateway.save()

    # ===== Overrides =====

    def force_off(self, principal_id: int, also_suppress_default: bool = False) -> bool:
        return self.overrides.force_off(principal_id, also_suppress_default)

    def clear_force_off(self, principal_id: int) -> bool:
        return self.overrides.clear_force_off(principal_id)

    def is_forced_off(self, principal_id: int) -> bool:
        return self.overrides.is_forced_off(principal_id)

    def is_default_also_suppressed(self, principal_id: int) -> bool:
        return self.overrides.is_default_also_suppressed(principal_id)

    def disabled_permissions(self) -> Dict[int, bool]:
        return self.overrides.snapshot()

    # ===== Lookups =====

    @staticmethod
    def get_unique_id(value: str) -> int:
        return get_unique_id(value)

    def list_groups(self) -> List[PermissionGroup]:
        return self.store.list_groups()

    def list_players(self) -> List[PermissionPlayer]:
        return self.store.list_players()

    def find_group_by_name(self, name: str) -> Optional[PermissionGroup]:
        return self.store.find_group_by_name(name)

    def find_group_by_identity(self, identity: int) -> Optional[PermissionGroup]:
        return self.store.find_group_by_identity(identity)

    def find_player_by_id(self, principal_id: int) -> Optional[PermissionPlayer]:
        return self.store.find_player_by_id(principal_id)

    # ===== Groups =====

    def create_group(
        self,
        name: str,
        permissions: Optional[Iterable[str]] = None,
        display_name: Optional[str] = None,
    ) -> bool:
        created = self.store.create_group(name, permissions, display_name)
        if created:
            logger.info(f"Permission group created: {name.strip()}")
        return created

    def remove_group(self, name: str) -> bool:
        removed = self.store.remove_group(name)
        if removed:
            logger.info(f"Permission group removed: {name.strip()}")
        return removed

    def rename_group(self, old_name: str, new_name: str) -> bool:
        renamed = self.store.rename_group(old_name, new_name)
        if renamed:
            logger.info(f"Permission group renamed: {old_name.strip()} -> {new_name.strip()}")
        return renamed

    def set_group_display_name(self, name: str, display_name: str) -> bool:
        return self.store.set_group_display_name(name, display_name)

    def add_permission_to_group(self, name: str, token: str) -> bool:
        return self.store.add_permission_to_group(name, token)

    def remove_permission_from_group(self, name: str, token: str) -> bool:
        return self.store.remove_permission_from_group(name, token)

    def group_has_permission(self, name: str, token: str) -> bool:
        return self.store.group_has_permission(name, token)

    # ===== Players =====

    def create_player(
        self,
        principal_id: int,
        groups: Optional[Iterable[str]] = None,
        permissions: Optional[Iterable[str]] = None,
    ) -> PermissionPlayer:
        return self.store.create_player(principal_id, groups, permissions)

    def remove_player(self, principal_id: int) -> bool:
        return self.store.remove_player(principal_id)

    def add_membership(self, principal_id: int, group_name: str) -> bool:
        return self.store.add_membership(principal_id, group_name)

    def remove_membership(self, principal_id: int, group_name: str) -> bool:
        return self.store.remove_membership(principal_id, group_name)

    def add_direct_permission(self, principal_id: int, token: str) -> bool:
        return self.store.add_direct_permission(principal_id, token)

    def remove_direct_permission(self, principal_id: int, token: str) -> bool:
        return self.store.remove_direct_permission(principal_id, token)

    # ===== Resolution =====

    def _resolve(self, principal_id: int, permission: str) -> Tuple[bool, str, str]:
        """
        Run the resolution steps.

        Returns:
            (granted, step, reason) where step names the deciding rule
        """
        if self.overrides.is_default_also_suppressed(principal_id):
            return False, "forced_off_all", "Permissions forced off, default group included"

        permission = normalize_token(permission)
        player = self.store.find_player_by_id(principal_id)

        # Most players have no individual record: only the default group applies
        if player is None:
            default_group = self.store.find_group_by_name(DEFAULT_GROUP)
            if default_group is not None and grants(default_group.permissions, permission):
                return True, "default_group", "Granted by the default group"
            return False, "default_group", "No player record and the default group does not grant it"

        if self.overrides.is_forced_off(principal_id):
            return False, "forced_off", "Permissions forced off"

        for group_name in player.groups:
            group = self.store.find_group_by_name(group_name)
            if group is None:
                continue
            if grants(group.permissions, permission):
                return True, "group", f"Granted by group {group.name}"

        if grants(player.permissions, permission):
            return True, "direct", "Granted directly to the player"

        return False, "no_match", "No group or direct grant matches"

    def has_permission(self, principal_id: int, permission: str) -> bool:
        """
        Check if a principal has a permission

        Tokens are compared trimmed and lower-cased on both sides. Note that
        an unrecorded principal with a plain forced-off override still gets
        the default group's permissions; only the suppress-default override
        denies it.

        Args:
            principal_id: Player identifier
            permission: Permission token to check (e.g., "kick")

        Returns:
            True if permission granted, False otherwise
        """
        granted, step, _ = self._resolve(principal_id, permission)
        if not granted:
            logger.debug(f"Permission denied for {principal_id}: {permission} ({step})")
        return granted

    def explain_permission(self, principal_id: int, permission: str) -> Dict[str, Any]:
        """
        Explain why a permission was granted or denied

        Only enabled when GATEKEEPER_PERMS_EXPLAIN=1 (or explain_enabled).

        Returns:
            Dict with decision, principal_id, permission, step and reason
        """
        if not self.explain_enabled:
            return {
                "error": "Diagnostics disabled. Set GATEKEEPER_PERMS_EXPLAIN=1 to enable."
            }

        granted, step, reason = self._resolve(principal_id, permission)
        return {
            "decision": "allow" if granted else "deny",
            "principal_id": principal_id,
            "permission": normalize_token(permission),
            "step": step,
            "reason": reason,
            "has_record": self.store.find_player_by_id(principal_id) is not None,
            "forced_off": self.overrides.is_forced_off(principal_id),
        }

    def player_has_group(self, player: Any, group_name: str) -> bool:
        """Checks if the target player is member of a group (default is implicit)."""
        principal_id = principal_id_of(player)
        return principal_id is not None and self.store.player_has_group(principal_id, group_name)

    # ===== Player handle wrappers =====

    def player_has_permission(self, player: Any, permission: str) -> bool:
        principal_id = principal_id_of(player)
        return principal_id is not None and self.has_permission(principal_id, permission)

    def get_player(self, player: Any) -> Optional[PermissionPlayer]:
        principal_id = principal_id_of(player)
        return None if principal_id is None else self.store.find_player_by_id(principal_id)

    def create_player_for(self, player: Any) -> Optional[PermissionPlayer]:
        principal_id = principal_id_of(player)
        return None if principal_id is None else self.store.create_player(principal_id)

    def remove_player_for(self, player: Any) -> bool:
        principal_id = principal_id_of(player)
        return principal_id is not None and self.store.remove_player(principal_id)

    def add_permission_for(self, player: Any, permission: str) -> bool:
        principal_id = principal_id_of(player)
        return principal_id is not None and self.store.add_direct_permission(principal_id, permission)

    def remove_permission_for(self, player: Any, permission: str) -> bool:
        principal_id = principal_id_of(player)
        return principal_id is not None and self.store.remove_direct_permission(principal_id, permission)


def create_permission_system(
    settings: Optional[GatekeeperSettings] = None,
    load: bool = True,
) -> PermissionEngine:
    """
    Build a permission engine wired to the configured documents

    Args:
        settings: Settings to use (default: cached global settings)
        load: Load the documents immediately

    Returns:
        PermissionEngine owned by the caller
    """
    settings = settings or get_settings()
    store = PermissionStore()
    engine = PermissionEngine(
        store=store,
        overrides=OverrideRegistry(),
        gateway=PersistenceGateway.from_settings(store, settings),
        explain_enabled=settings.perms_explain,
    )
    if load:
        engine.reload()
    return engine
