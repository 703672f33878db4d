"""
Permission Types

Core type definitions for groups, players and permission tokens.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from .hashing import get_unique_id

# Token granting every permission within the scope it is declared in
WILDCARD = "*"

# Reserved group consulted for principals without a stored record
DEFAULT_GROUP = "default"

UINT64_MAX = 2**64 - 1


def normalize_token(token: str) -> str:
    """Trim and lower-case a permission token or group name."""
    return token.strip().lower()


def normalize_tokens(tokens: Iterable[str]) -> List[str]:
    """Normalize tokens, dropping blanks and duplicates while keeping order."""
    seen = set()
    result = []
    for token in tokens:
        normalized = normalize_token(token)
        if normalized and normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def unique_group_names(names: Iterable[str]) -> List[str]:
    """Trim group names, dropping blanks and names with an identity already seen."""
    seen = set()
    result = []
    for name in names:
        name = name.strip()
        identity = get_unique_id(name)
        if name and identity not in seen:
            seen.add(identity)
            result.append(name)
    return result


def is_default_group_name(name: str) -> bool:
    return normalize_token(name) == DEFAULT_GROUP


def grants(tokens: Iterable[str], permission: str) -> bool:
    """
    Check whether a token list grants a normalized permission.

    Tokens are normalized on read as well as on write, so hand-edited
    documents with stray casing or whitespace still match.
    """
    for token in tokens:
        normalized = normalize_token(token)
        if normalized == WILDCARD or normalized == permission:
            return True
    return False


@dataclass
class PermissionGroup:
    """
    A named bundle of permission tokens

    Attributes:
        name: Canonical group name as entered (case preserved for display)
        display_name: Human-friendly label, independent of name
        permissions: Normalized permission tokens in insertion order
    """
    name: str
    display_name: str
    permissions: List[str] = field(default_factory=list)

    @property
    def identity(self) -> int:
        """Unique ID derived from the name; recomputed on every access."""
        return get_unique_id(self.name)

    def copy(self) -> "PermissionGroup":
        return PermissionGroup(
            name=self.name,
            display_name=self.display_name,
            permissions=list(self.permissions),
        )


@dataclass
class PermissionPlayer:
    """
    Individual permission record for a principal

    Attributes:
        principal_id: Stable 64-bit player identifier
        groups: Group names the player is a member of (membership is by name)
        permissions: Directly granted permission tokens
    """
    principal_id: int
    groups: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)

    def copy(self) -> "PermissionPlayer":
        return PermissionPlayer(
            principal_id=self.principal_id,
            groups=list(self.groups),
            permissions=list(self.permissions),
        )
