"""
Chat Command Framework

Commands are typed in chat as "/name arg1 arg2 ...". The dispatcher parses the
line, looks up the registered command and runs it on behalf of the sending
session. Permission checks live on each command's execute() through
require_perm; every failure ends up as a chat reply to the sender.
"""

import logging
import shlex
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

from ..core.exceptions import (
    AuthorizationError,
    CommandError,
    PlayerNotFoundError,
    UnknownCommandError,
)
from ..permissions.types import UINT64_MAX
from ..players import PlayerRegistry, PlayerSession
from ..structured_logger import actor_ctx, warning_with_context

if TYPE_CHECKING:
    from ..permissions.engine import PermissionEngine

logger = logging.getLogger(__name__)

# Prefix of every chat reply sent by the command layer
REPLY_PREFIX = "[Gatekeeper]"


@dataclass
class CommandContext:
    """Everything a command needs while it executes"""

    engine: "PermissionEngine"
    registry: PlayerRegistry
    sender: PlayerSession

    def reply(self, text: str) -> None:
        self.sender.message(f"{REPLY_PREFIX} {text}")

    def resolve_principal(self, query: str) -> int:
        """
        Resolve a command target to a principal ID.

        Online players match by uid, exact name or unique name prefix; a
        purely numeric query that matches nobody online is taken as a raw
        principal ID so offline records can be edited too, provided it fits
        in 64 bits.

        Raises:
            PlayerNotFoundError: Nothing matches
        """
        session = self.registry.find(query)
        if session is not None:
            return session.uid
        query = query.strip()
        if query.isdecimal() and int(query) <= UINT64_MAX:
            return int(query)
        raise PlayerNotFoundError(query)


class ChatCommand:
    """
    Base class for chat commands

    Subclasses set name and usage and implement execute(). Restricted
    commands decorate execute() with require_perm, which also exposes the
    token through the permission property.
    """

    name: str = ""
    usage: str = ""

    @property
    def permission(self) -> Optional[str]:
        return getattr(type(self).execute, "required_permission", None)

    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        raise NotImplementedError


class CommandDispatcher:
    """
    Registry of chat commands keyed by lower-cased name
    """

    def __init__(self, engine: "PermissionEngine", registry: PlayerRegistry):
        self.engine = engine
        self.registry = registry
        self._commands: Dict[str, ChatCommand] = {}

    def register(self, command: ChatCommand) -> None:
        key = command.name.lower()
        if key in self._commands:
            raise ValueError(f"Command already registered: /{key}")
        self._commands[key] = command

    def get(self, name: str) -> Optional[ChatCommand]:
        return self._commands.get(name.lstrip("/").lower())

    def commands(self) -> List[ChatCommand]:
        return list(self._commands.values())

    def dispatch(self, sender: PlayerSession, line: str) -> bool:
        """
        Parse and run one chat command line.

        Returns:
            True if the command ran to completion, False if it was rejected
            (unknown command, malformed arguments, missing permission)
        """
        ctx = CommandContext(engine=self.engine, registry=self.registry, sender=sender)

        try:
            parts = shlex.split(line.strip())
        except ValueError:
            ctx.reply("Could not parse command (unbalanced quotes?)")
            return False

        if not parts:
            return False

        name, args = parts[0].lstrip("/").lower(), parts[1:]
        token = actor_ctx.set(sender.uid)
        try:
            command = self._commands.get(name)
            if command is None:
                raise UnknownCommandError(name)

            command.execute(ctx, args)
            logger.debug(f"/{name} executed by {sender.name} ({sender.uid})")
            return True

        except AuthorizationError as e:
            warning_with_context(
                logger,
                f"Command /{name} denied for {sender.name}",
                command=name,
                permission=e.permission,
            )
            ctx.reply("You don't have access to use this command")
            return False

        except CommandError as e:
            ctx.reply(e.message)
            return False

        finally:
            actor_ctx.reset(token)
