"""
Permission Store

Authoritative in-memory collections of permission groups and players.

A single lock guards both collections: renames and removals touch groups and
player memberships together, and every multi-record read copies under the
same lock. Callers only ever receive copies, so they can iterate without
holding the lock and without observing concurrent mutation.
"""

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .hashing import get_unique_id
from .types import (
    PermissionGroup,
    PermissionPlayer,
    UINT64_MAX,
    is_default_group_name,
    normalize_token,
    normalize_tokens,
    unique_group_names,
)

logger = logging.getLogger(__name__)


class PermissionStore:
    """
    Thread-safe CRUD over groups and players

    All lookups by group name compare identities (hash of the trimmed,
    lower-cased name), never raw strings.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._groups: List[PermissionGroup] = []
        self._players: List[PermissionPlayer] = []

    # ===== Unlocked helpers (caller holds self._lock) =====

    def _group_by_identity(self, identity: int) -> Optional[PermissionGroup]:
        for group in self._groups:
            if group.identity == identity:
                return group
        return None

    def _player_by_id(self, principal_id: int) -> Optional[PermissionPlayer]:
        for player in self._players:
            if player.principal_id == principal_id:
                return player
        return None

    @staticmethod
    def _membership_index(player: PermissionPlayer, identity: int) -> int:
        for index, group_name in enumerate(player.groups):
            if get_unique_id(group_name) == identity:
                return index
        return -1

    @staticmethod
    def _replace_memberships(player: PermissionPlayer, old_identity: int, new_name: str) -> None:
        """Swap every entry matching old_identity for new_name, keeping one per identity."""
        player.groups = unique_group_names(
            new_name if get_unique_id(group_name) == old_identity else group_name
            for group_name in player.groups
        )

    # ===== Snapshots =====

    def list_groups(self) -> List[PermissionGroup]:
        """Return copies of all groups."""
        with self._lock:
            return [group.copy() for group in self._groups]

    def list_players(self) -> List[PermissionPlayer]:
        """Return copies of all player records (may be large)."""
        with self._lock:
            return [player.copy() for player in self._players]

    def snapshot(self) -> Tuple[List[PermissionGroup], List[PermissionPlayer]]:
        """Copy groups and players together in one critical section."""
        with self._lock:
            return (
                [group.copy() for group in self._groups],
                [player.copy() for player in self._players],
            )

    def replace_all(
        self,
        groups: Iterable[PermissionGroup],
        players: Iterable[PermissionPlayer],
    ) -> None:
        """
        Swap in freshly loaded collections.

        Duplicate group names and duplicate principal IDs are collapsed,
        keeping the first occurrence.
        """
        unique_groups: List[PermissionGroup] = []
        seen_groups = set()
        for group in groups:
            identity = group.identity
            if identity in seen_groups:
                logger.warning(f"Ignoring duplicate group definition: {group.name}")
                continue
            seen_groups.add(identity)
            unique_groups.append(group.copy())

        unique_players: List[PermissionPlayer] = []
        seen_players = set()
        for player in players:
            if player.principal_id in seen_players:
                logger.warning(f"Ignoring duplicate player record: {player.principal_id}")
                continue
            seen_players.add(player.principal_id)
            unique_players.append(player.copy())

        with self._lock:
            self._groups = unique_groups
            self._players = unique_players

    # ===== Lookups =====

    def find_group_by_name(self, name: str) -> Optional[PermissionGroup]:
        """Find a group by (normalized) name; returns a copy or None."""
        return self.find_group_by_identity(get_unique_id(name))

    def find_group_by_identity(self, identity: int) -> Optional[PermissionGroup]:
        with self._lock:
            group = self._group_by_identity(identity)
            return group.copy() if group else None

    def find_player_by_id(self, principal_id: int) -> Optional[PermissionPlayer]:
        with self._lock:
            player = self._player_by_id(principal_id)
            return player.copy() if player else None

    # ===== Groups =====

    def create_group(
        self,
        name: str,
        permissions: Optional[Iterable[str]] = None,
        display_name: Optional[str] = None,
    ) -> bool:
        """
        Create a permission group unless one with the same normalized name exists.

        Args:
            name: Group name (case preserved, surrounding whitespace trimmed)
            permissions: Initial permission tokens (default: none)
            display_name: Label (default: "{name}NickName")

        Returns:
            True if created, False if the name is blank or taken
        """
        name = name.strip()
        if not name:
            return False

        if display_name is None:
            display_name = f"{name}NickName"

        group = PermissionGroup(
            name=name,
            display_name=display_name,
            permissions=normalize_tokens(permissions or []),
        )

        with self._lock:
            if self._group_by_identity(group.identity) is not None:
                return False
            self._groups.append(group)
            return True

    def remove_group(self, name: str) -> bool:
        """
        Disband a group and strip it from every player's memberships.

        The default group can never be removed.
        """
        if is_default_group_name(name):
            return False

        identity = get_unique_id(name)
        with self._lock:
            group = self._group_by_identity(identity)
            if group is None:
                return False

            self._groups.remove(group)
            for player in self._players:
                player.groups = [g for g in player.groups if get_unique_id(g) != identity]
            return True

    def rename_group(self, old_name: str, new_name: str) -> bool:
        """
        Rename a group, carrying every membership over to the new name.

        Memberships are matched against the identity computed before the
        rename and replaced in place, so group order is preserved.

        Returns:
            False if old_name is missing or the default group, new_name is
            blank, or new_name is already taken
        """
        new_name = new_name.strip()
        if not new_name or is_default_group_name(old_name):
            return False

        old_identity = get_unique_id(old_name)
        new_identity = get_unique_id(new_name)

        with self._lock:
            group = self._group_by_identity(old_identity)
            if group is None or self._group_by_identity(new_identity) is not None:
                return False

            group.name = new_name
            for player in self._players:
                if self._membership_index(player, old_identity) >= 0:
                    self._replace_memberships(player, old_identity, new_name)
            return True

    def set_group_display_name(self, name: str, display_name: str) -> bool:
        with self._lock:
            group = self._group_by_identity(get_unique_id(name))
            if group is None:
                return False
            group.display_name = display_name
            return True

    def add_permission_to_group(self, name: str, token: str) -> bool:
        """Grant a token to a group; True whenever the group exists."""
        token = normalize_token(token)
        if not token:
            return False

        with self._lock:
            group = self._group_by_identity(get_unique_id(name))
            if group is None:
                return False
            if token not in group.permissions:
                group.permissions.append(token)
            return True

    def remove_permission_from_group(self, name: str, token: str) -> bool:
        """Revoke a token from a group; True only if it was present."""
        token = normalize_token(token)
        with self._lock:
            group = self._group_by_identity(get_unique_id(name))
            if group is None:
                return False
            before = len(group.permissions)
            group.permissions = [p for p in group.permissions if normalize_token(p) != token]
            return len(group.permissions) != before

    def group_has_permission(self, name: str, token: str) -> bool:
        """Literal membership test; a '*' in the group is not expanded here."""
        token = normalize_token(token)
        with self._lock:
            group = self._group_by_identity(get_unique_id(name))
            if group is None:
                return False
            return any(normalize_token(p) == token for p in group.permissions)

    # ===== Players =====

    def create_player(
        self,
        principal_id: int,
        groups: Optional[Iterable[str]] = None,
        permissions: Optional[Iterable[str]] = None,
    ) -> PermissionPlayer:
        """
        Return the record for principal_id, creating it if needed.

        An existing record is returned unchanged even when different initial
        groups or permissions are supplied.
        """
        if not 0 <= principal_id <= UINT64_MAX:
            raise ValueError(f"principal_id out of range: {principal_id}")

        member_of = unique_group_names(groups or [])

        with self._lock:
            existing = self._player_by_id(principal_id)
            if existing is not None:
                return existing.copy()

            player = PermissionPlayer(
                principal_id=principal_id,
                groups=member_of,
                permissions=normalize_tokens(permissions or []),
            )
            self._players.append(player)
            return player.copy()

    def remove_player(self, principal_id: int) -> bool:
        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None:
                return False
            self._players.remove(player)
            return True

    def add_membership(self, principal_id: int, group_name: str) -> bool:
        """Add a player to a group; False if unknown player or already a member."""
        group_name = normalize_token(group_name)
        if not group_name:
            return False

        identity = get_unique_id(group_name)
        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None or self._membership_index(player, identity) >= 0:
                return False
            player.groups.append(group_name)
            return True

    def remove_membership(self, principal_id: int, group_name: str) -> bool:
        identity = get_unique_id(group_name)
        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None:
                return False
            remaining = [g for g in player.groups if get_unique_id(g) != identity]
            if len(remaining) == len(player.groups):
                return False
            player.groups = remaining
            return True

    def player_has_group(self, principal_id: int, group_name: str) -> bool:
        """Membership test; every principal implicitly belongs to the default group."""
        if is_default_group_name(group_name):
            return True

        identity = get_unique_id(group_name)
        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None:
                return False
            return self._membership_index(player, identity) >= 0

    def add_direct_permission(self, principal_id: int, token: str) -> bool:
        """Grant a token directly; True without duplication if already granted."""
        token = normalize_token(token)
        if not token:
            return False

        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None:
                return False
            if token not in player.permissions:
                player.permissions.append(token)
            return True

    def remove_direct_permission(self, principal_id: int, token: str) -> bool:
        """Revoke a direct grant; True whenever the player exists."""
        token = normalize_token(token)
        with self._lock:
            player = self._player_by_id(principal_id)
            if player is None:
                return False
            player.permissions = [p for p in player.permissions if normalize_token(p) != token]
            return True
