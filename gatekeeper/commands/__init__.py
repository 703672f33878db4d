"""
Commands Package

Chat commands for administering permissions in-game.

Public API:
- Framework: ChatCommand, CommandContext, CommandDispatcher
- Commands: ReloadCommand, SaveCommand, GroupCommand, PermCommand,
  ForceOffCommand, ForceOnCommand
- default_dispatcher: dispatcher with every built-in command registered
"""

from .base import ChatCommand, CommandContext, CommandDispatcher
from .reload import ReloadCommand, SaveCommand
from .groups import GroupCommand
from .players import PermCommand, ForceOffCommand, ForceOnCommand

BUILTIN_COMMANDS = (
    ReloadCommand,
    SaveCommand,
    GroupCommand,
    PermCommand,
    ForceOffCommand,
    ForceOnCommand,
)


def default_dispatcher(engine, registry) -> CommandDispatcher:
    """Create a dispatcher with every built-in command registered."""
    dispatcher = CommandDispatcher(engine, registry)
    for command_cls in BUILTIN_COMMANDS:
        dispatcher.register(command_cls())
    return dispatcher


__all__ = [
    "ChatCommand",
    "CommandContext",
    "CommandDispatcher",
    "ReloadCommand",
    "SaveCommand",
    "GroupCommand",
    "PermCommand",
    "ForceOffCommand",
    "ForceOnCommand",
    "BUILTIN_COMMANDS",
    "default_dispatcher",
]
