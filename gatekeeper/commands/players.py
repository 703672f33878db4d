"""
Player permission commands

    /perm create <player>
    /perm remove <player>
    /perm addgroup <player> <group>
    /perm delgroup <player> <group>
    /perm add <player> <token>
    /perm del <player> <token>
    /perm check <player> <token>
    /forceoff <player> [all]
    /forceon <player>

<player> is an online name (or unique prefix) or a raw principal ID.
"""

from typing import List

from ..core.exceptions import CommandUsageError
from ..permissions.decorators import require_perm
from .base import ChatCommand, CommandContext


class PermCommand(ChatCommand):
    name = "perm"
    usage = "/perm <create|remove|addgroup|delgroup|add|del|check> <player> [group|token]"

    # action -> number of arguments after the player
    _ARITY = {
        "create": 0,
        "remove": 0,
        "addgroup": 1,
        "delgroup": 1,
        "add": 1,
        "del": 1,
        "check": 1,
    }

    @require_perm("manageperms")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) < 2:
            raise CommandUsageError(self.usage)

        action = args[0].lower()
        if action not in self._ARITY or len(args) != 2 + self._ARITY[action]:
            raise CommandUsageError(self.usage)

        principal_id = ctx.resolve_principal(args[1])
        getattr(self, f"_do_{action}")(ctx, principal_id, args[1], args[2:])

    def _do_create(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        existed = ctx.engine.find_player_by_id(principal_id) is not None
        ctx.engine.create_player(principal_id)
        ctx.reply(f"{label} already has a permission record." if existed else f"Permission record created for {label}.")

    def _do_remove(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        if ctx.engine.remove_player(principal_id):
            ctx.reply(f"Permission record of {label} removed.")
        else:
            ctx.reply(f"{label} has no permission record.")

    def _do_addgroup(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        group_name = args[0]
        if ctx.engine.find_group_by_name(group_name) is None:
            ctx.reply(f"Group {group_name} does not exist.")
            return

        ctx.engine.create_player(principal_id)
        if ctx.engine.add_membership(principal_id, group_name):
            ctx.reply(f"{label} added to {group_name}.")
        else:
            ctx.reply(f"{label} is already in {group_name}.")

    def _do_delgroup(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        if ctx.engine.remove_membership(principal_id, args[0]):
            ctx.reply(f"{label} removed from {args[0]}.")
        else:
            ctx.reply(f"{label} is not in {args[0]}.")

    def _do_add(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        ctx.engine.create_player(principal_id)
        if ctx.engine.add_direct_permission(principal_id, args[0]):
            ctx.reply(f"Granted {args[0]} to {label}.")
        else:
            ctx.reply(f"Could not grant {args[0]!r} to {label}.")

    def _do_del(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        if ctx.engine.remove_direct_permission(principal_id, args[0]):
            ctx.reply(f"Revoked {args[0]} from {label}.")
        else:
            ctx.reply(f"{label} has no permission record.")

    def _do_check(self, ctx: CommandContext, principal_id: int, label: str, args: List[str]) -> None:
        verdict = "has" if ctx.engine.has_permission(principal_id, args[0]) else "does not have"
        ctx.reply(f"{label} {verdict} {args[0]}.")


class ForceOffCommand(ChatCommand):
    name = "forceoff"
    usage = "/forceoff <player> [all]"

    @require_perm("forceoff")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) not in (1, 2) or (len(args) == 2 and args[1].lower() != "all"):
            raise CommandUsageError(self.usage)

        principal_id = ctx.resolve_principal(args[0])
        also_default = len(args) == 2
        if ctx.engine.force_off(principal_id, also_default):
            scope = "all permissions" if also_default else "permissions"
            ctx.reply(f"{args[0]}: {scope} forced off until /forceon or restart.")
        else:
            ctx.reply(f"{args[0]} is already forced off.")


class ForceOnCommand(ChatCommand):
    name = "forceon"
    usage = "/forceon <player>"

    @require_perm("forceoff")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) != 1:
            raise CommandUsageError(self.usage)

        principal_id = ctx.resolve_principal(args[0])
        if ctx.engine.clear_force_off(principal_id):
            ctx.reply(f"{args[0]}: permissions restored.")
        else:
            ctx.reply(f"{args[0]} is not forced off.")
