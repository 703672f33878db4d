"""
Gatekeeper

Permission resolution engine for game servers: decides whether a player
(principal) holds a permission token through the default group, group
memberships, direct grants and temporary administrative overrides.

Usage:
    from gatekeeper import create_permission_system

    engine = create_permission_system()
    if engine.has_permission(76561197960265728, "kick"):
        ...
"""

from .permissions import (
    PermissionEngine,
    PermissionGroup,
    PermissionPlayer,
    create_permission_system,
)

__version__ = "1.0.0"

__all__ = [
    "PermissionEngine",
    "PermissionGroup",
    "PermissionPlayer",
    "create_permission_system",
    "__version__",
]
