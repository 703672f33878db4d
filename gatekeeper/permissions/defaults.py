"""
Default Permission Documents

Illustrative payloads written the first time the server starts without
permission documents. They give administrators a working template to edit:

- Default: baseline for every player without an individual record
- Moderator: chat moderation
- Administrator: everything
"""

from typing import List

from .types import PermissionGroup, PermissionPlayer

# Illustrative principal (first individual account ID in the 64-bit range)
EXAMPLE_PRINCIPAL_ID = 76561197960265728


def get_default_groups() -> List[PermissionGroup]:
    """
    Get the groups synthesized when no group document exists.

    The Default group must stay non-empty so that a fresh install still
    lets ordinary players use basic commands.
    """
    return [
        PermissionGroup(
            name="Default",
            display_name="Player",
            permissions=["help", "location", "pm"],
        ),
        PermissionGroup(
            name="Moderator",
            display_name="Mod",
            permissions=["kick", "mute", "unmute"],
        ),
        PermissionGroup(
            name="Administrator",
            display_name="Admin",
            permissions=["*"],
        ),
    ]


def get_default_players() -> List[PermissionPlayer]:
    """Get the example player record synthesized when no player document exists."""
    return [
        PermissionPlayer(
            principal_id=EXAMPLE_PRINCIPAL_ID,
            groups=["Moderator"],
            permissions=["teleport", "announce"],
        ),
    ]
