"""
Permission Decorators

Decorators for requiring specific permissions on chat command handlers.
"""

import logging
from functools import wraps
from typing import Callable

from ..core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)


def require_perm(permission: str) -> Callable:
    """
    Decorator to require a permission before a command executes

    Usage:
        class KickCommand(ChatCommand):
            name = "kick"

            @require_perm("kick")
            def execute(self, ctx, args):
                ...

    The wrapped handler receives (self, ctx, args); ctx must expose the
    engine and the sending session.

    Args:
        permission: Permission token to check (e.g., "kick")

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, ctx, *args, **kwargs):
            sender = ctx.sender
            if not ctx.engine.player_has_permission(sender, permission):
                logger.warning(
                    f"Permission denied: {getattr(sender, 'name', sender)} "
                    f"attempted {permission}"
                )
                raise AuthorizationError(permission, principal_id=getattr(sender, "uid", None))

            return func(self, ctx, *args, **kwargs)

        wrapper.required_permission = permission
        return wrapper
    return decorator
