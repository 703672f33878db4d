"""
Permission Storage

JSON persistence for the group and player permission documents.

Documents:
- GroupPermissions.json: [{"name", "displayName", "permissions"}, ...]
- PlayerPermissions.json: [{"principalId", "groups", "permissions"}, ...]

Group identities are never written; they are recomputed from names on load.
Loading never wipes live state: a document that fails to parse is logged and
the store keeps whatever it held before. Saving captures the previous file
contents first and puts them back if serialization or writing fails.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..config import GatekeeperSettings
from ..config_paths import get_config_paths
from ..core.exceptions import StorageError
from .defaults import get_default_groups, get_default_players
from .store import PermissionStore
from .types import (
    PermissionGroup,
    PermissionPlayer,
    UINT64_MAX,
    is_default_group_name,
    normalize_tokens,
    unique_group_names,
)

logger = logging.getLogger(__name__)


# ===== Document schema =====

class GroupDocument(BaseModel):
    """One entry of the group permissions document"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    display_name: Optional[str] = Field(default=None, alias="displayName")
    permissions: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("group name must not be blank")
        return v

    @field_validator("permissions", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class PlayerDocument(BaseModel):
    """One entry of the player permissions document"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    principal_id: int = Field(alias="principalId", ge=0, le=UINT64_MAX)
    groups: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)

    @field_validator("groups", "permissions", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


GROUP_DOCUMENTS = TypeAdapter(List[GroupDocument])
PLAYER_DOCUMENTS = TypeAdapter(List[PlayerDocument])


def group_from_document(doc: GroupDocument) -> PermissionGroup:
    name = doc.name.strip()
    return PermissionGroup(
        name=name,
        display_name=doc.display_name if doc.display_name is not None else f"{name}NickName",
        permissions=normalize_tokens(doc.permissions),
    )


def player_from_document(doc: PlayerDocument) -> PermissionPlayer:
    return PermissionPlayer(
        principal_id=doc.principal_id,
        groups=unique_group_names(doc.groups),
        permissions=normalize_tokens(doc.permissions),
    )


class PersistenceGateway:
    """
    Loads and saves the permission documents for a PermissionStore
    """

    def __init__(
        self,
        store: PermissionStore,
        group_file: Path,
        player_file: Path,
        json_indent: int = 2,
        synthesize_defaults: bool = True,
    ):
        """
        Initialize gateway

        Args:
            store: Store populated on load and snapshotted on save
            group_file: Path of the group permissions document
            player_file: Path of the player permissions document
            json_indent: Indentation for written documents (0 = compact)
            synthesize_defaults: Write illustrative documents when absent
        """
        self.store = store
        self.group_file = Path(group_file)
        self.player_file = Path(player_file)
        self.json_indent = json_indent or None
        self.synthesize_defaults = synthesize_defaults

    @classmethod
    def from_settings(cls, store: PermissionStore, settings: GatekeeperSettings) -> "PersistenceGateway":
        paths = get_config_paths(settings)
        return cls(
            store,
            group_file=paths.group_permissions_file,
            player_file=paths.player_permissions_file,
            json_indent=settings.json_indent,
            synthesize_defaults=settings.synthesize_defaults,
        )

    # ===== Serialization =====

    def dump_groups(self, groups: Sequence[PermissionGroup]) -> bytes:
        docs = [
            GroupDocument(name=g.name, display_name=g.display_name, permissions=g.permissions)
            for g in groups
        ]
        return GROUP_DOCUMENTS.dump_json(docs, by_alias=True, exclude_none=True, indent=self.json_indent)

    def dump_players(self, players: Sequence[PermissionPlayer]) -> bytes:
        docs = [
            PlayerDocument(principal_id=p.principal_id, groups=p.groups, permissions=p.permissions)
            for p in players
        ]
        return PLAYER_DOCUMENTS.dump_json(docs, by_alias=True, exclude_none=True, indent=self.json_indent)

    def _parse(self, path: Path, adapter: TypeAdapter) -> list:
        if not path.exists():
            raise StorageError(
                f"Permission document missing: {path.name}",
                details={"path": str(path)},
            )
        try:
            return adapter.validate_json(path.read_bytes())
        except ValidationError as e:
            raise StorageError(
                f"Malformed permission document: {path.name}",
                details={"path": str(path), "errors": e.error_count()},
            ) from e

    def read_groups(self) -> List[PermissionGroup]:
        return [group_from_document(doc) for doc in self._parse(self.group_file, GROUP_DOCUMENTS)]

    def read_players(self) -> List[PermissionPlayer]:
        return [player_from_document(doc) for doc in self._parse(self.player_file, PLAYER_DOCUMENTS)]

    def _write_document(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)

    # ===== Load =====

    def load(self) -> bool:
        """
        Load both documents into the store.

        Missing documents are synthesized from the defaults and written
        first, so memory and disk start out identical. With synthesis
        disabled a missing document is a load failure.

        Returns:
            True on success; False if anything failed (store untouched)
        """
        try:
            if self.synthesize_defaults:
                if not self.group_file.exists():
                    self._write_document(self.group_file, self.dump_groups(get_default_groups()))
                    logger.info(f"Created default group permissions: {self.group_file}")
                if not self.player_file.exists():
                    self._write_document(self.player_file, self.dump_players(get_default_players()))
                    logger.info(f"Created default player permissions: {self.player_file}")

            groups = self.read_groups()
            players = self.read_players()
        except (OSError, StorageError) as e:
            logger.error(f"[PermissionSystem] Load failed, keeping current permissions: {e}", exc_info=True)
            return False

        self.store.replace_all(groups, players)

        if not any(is_default_group_name(g.name) for g in groups):
            logger.warning("No default group defined; players without a record have no permissions")

        logger.info(f"[PermissionSystem] Loaded {len(groups)} groups and {len(players)} players")
        return True

    def reload(self) -> bool:
        return self.load()

    # ===== Save =====

    def _backup(self) -> Dict[Path, Optional[bytes]]:
        return {
            path: path.read_bytes() if path.exists() else None
            for path in (self.group_file, self.player_file)
        }

    def _restore(self, backups: Dict[Path, Optional[bytes]]) -> None:
        for path, content in backups.items():
            try:
                if content is None:
                    path.unlink(missing_ok=True)
                else:
                    path.write_bytes(content)
            except OSError as e:
                logger.error(f"[PermissionSystem] Could not restore {path}: {e}")

    def save(self) -> bool:
        """
        Write the store to disk, reverting both files on failure.

        Only the snapshot is taken under the store lock; file IO happens
        after it is released. A process crash mid-write is not covered.

        Returns:
            True if both documents were written
        """
        try:
            backups = self._backup()
        except OSError as e:
            logger.error(f"[PermissionSystem] SaveToDisk aborted, cannot back up documents: {e}")
            return False

        try:
            groups, players = self.store.snapshot()
            payloads = {
                self.group_file: self.dump_groups(groups),
                self.player_file: self.dump_players(players),
            }
            for path, payload in payloads.items():
                self._write_document(path, payload)
        except Exception as e:
            logger.error(f"[PermissionSystem] SaveToDisk Error: {e}", exc_info=True)
            self._restore(backups)
            return False

        logger.info(f"[PermissionSystem] Saved {len(groups)} groups and {len(players)} players")
        return True
