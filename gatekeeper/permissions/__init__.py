"""
Permissions Package

Group/player permission system for game servers.

This package provides:
- Permission resolution engine (default group, memberships, direct grants, overrides)
- Thread-safe in-memory store and override registry
- JSON persistence of the group and player documents
- Command handler decorators

Public API:
- Types: PermissionGroup, PermissionPlayer, WILDCARD, DEFAULT_GROUP
- Hashing: super_fast_hash, get_unique_id
- Engine: PermissionEngine, create_permission_system
- Components: PermissionStore, OverrideRegistry, PersistenceGateway
- Decorators: require_perm
"""

from .types import PermissionGroup, PermissionPlayer, WILDCARD, DEFAULT_GROUP
from .hashing import super_fast_hash, get_unique_id
from .store import PermissionStore
from .overrides import OverrideRegistry
from .storage import PersistenceGateway
from .engine import PermissionEngine, create_permission_system
from .decorators import require_perm
from . import defaults

__all__ = [
    # Types
    "PermissionGroup",
    "PermissionPlayer",
    "WILDCARD",
    "DEFAULT_GROUP",
    # Hashing
    "super_fast_hash",
    "get_unique_id",
    # Components
    "PermissionStore",
    "OverrideRegistry",
    "PersistenceGateway",
    # Engine
    "PermissionEngine",
    "create_permission_system",
    # Decorators
    "require_perm",
    # Submodules
    "defaults",
]
