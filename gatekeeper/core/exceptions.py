"""
Custom exceptions for Gatekeeper.

Core permission operations report absence and rejected changes through return
values; these exceptions cover the persistence boundary and the command layer.
"""

from typing import Any, Dict, Optional


class GatekeeperException(Exception):
    """Base exception for all Gatekeeper errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for logs and command replies."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# Authorization Exceptions
class AuthorizationError(GatekeeperException):
    """Raised when a principal lacks the permission a command requires."""

    def __init__(self, permission: str, principal_id: Optional[int] = None):
        super().__init__(
            message=f"Missing required permission: {permission}",
            code="AUTHORIZATION_ERROR",
            details={"permission": permission, "principal_id": principal_id}
        )
        self.permission = permission
        self.principal_id = principal_id


# Storage Exceptions
class StorageError(GatekeeperException):
    """Raised when a permission document cannot be read or decoded."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details=details
        )


# Command Exceptions
class CommandError(GatekeeperException):
    """Base class for errors reported back to the command sender."""

    def __init__(self, message: str, code: str = "COMMAND_ERROR", details: Optional[Dict] = None):
        super().__init__(message=message, code=code, details=details)


class CommandUsageError(CommandError):
    """Raised when a command receives malformed arguments."""

    def __init__(self, usage: str):
        super().__init__(
            message=f"Usage: {usage}",
            code="COMMAND_USAGE",
            details={"usage": usage}
        )


class UnknownCommandError(CommandError):
    """Raised when no command is registered under the given name."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Unknown command: /{name}",
            code="UNKNOWN_COMMAND",
            details={"command": name}
        )


class PlayerNotFoundError(CommandError):
    """Raised when a command target cannot be resolved to a principal."""

    def __init__(self, query: str):
        super().__init__(
            message=f"No player matches '{query}'",
            code="PLAYER_NOT_FOUND",
            details={"query": query}
        )
