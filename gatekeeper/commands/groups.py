"""
/group command: manage permission groups

    /group list
    /group info <name>
    /group create <name> [display name]
    /group remove <name>
    /group rename <old> <new>
    /group nick <name> <display name>
    /group addperm <name> <token> [token ...]
    /group delperm <name> <token> [token ...]

Changes are made in memory; /savepermissions writes them to disk.
"""

from typing import List

from ..core.exceptions import CommandUsageError
from ..permissions.decorators import require_perm
from .base import ChatCommand, CommandContext


class GroupCommand(ChatCommand):
    name = "group"
    usage = "/group <list|info|create|remove|rename|nick|addperm|delperm> ..."

    @require_perm("managegroups")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        if not args:
            raise CommandUsageError(self.usage)

        action, rest = args[0].lower(), args[1:]
        handler = getattr(self, f"_do_{action}", None)
        if handler is None:
            raise CommandUsageError(self.usage)
        handler(ctx, rest)

    def _do_list(self, ctx: CommandContext, args: List[str]) -> None:
        groups = ctx.engine.list_groups()
        if not groups:
            ctx.reply("No groups defined.")
            return
        ctx.reply("Groups: " + ", ".join(f"{g.name} ({g.display_name})" for g in groups))

    def _do_info(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) != 1:
            raise CommandUsageError("/group info <name>")

        group = ctx.engine.find_group_by_name(args[0])
        if group is None:
            ctx.reply(f"Group {args[0]} does not exist.")
            return
        ctx.reply(f"{group.name} ({group.display_name}) id={group.identity}")
        ctx.reply("Permissions: " + (", ".join(group.permissions) or "none"))

    def _do_create(self, ctx: CommandContext, args: List[str]) -> None:
        if not args:
            raise CommandUsageError("/group create <name> [display name]")

        display_name = " ".join(args[1:]) or None
        if ctx.engine.create_group(args[0], display_name=display_name):
            ctx.reply(f"Group {args[0]} created.")
        else:
            ctx.reply(f"Group {args[0]} already exists.")

    def _do_remove(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) != 1:
            raise CommandUsageError("/group remove <name>")

        if ctx.engine.remove_group(args[0]):
            ctx.reply(f"Group {args[0]} removed.")
        else:
            ctx.reply(f"Group {args[0]} does not exist or cannot be removed.")

    def _do_rename(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) != 2:
            raise CommandUsageError("/group rename <old> <new>")

        old_name, new_name = args
        if ctx.engine.rename_group(old_name, new_name):
            ctx.reply(f"Group {old_name} renamed to {new_name}.")
        else:
            ctx.reply(f"Could not rename {old_name} to {new_name}.")

    def _do_nick(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) < 2:
            raise CommandUsageError("/group nick <name> <display name>")

        display_name = " ".join(args[1:])
        if ctx.engine.set_group_display_name(args[0], display_name):
            ctx.reply(f"Group {args[0]} is now shown as {display_name}.")
        else:
            ctx.reply(f"Group {args[0]} does not exist.")

    def _do_addperm(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) < 2:
            raise CommandUsageError("/group addperm <name> <token> [token ...]")

        name, tokens = args[0], args[1:]
        if ctx.engine.find_group_by_name(name) is None:
            ctx.reply(f"Group {name} does not exist.")
            return
        added = [t for t in tokens if ctx.engine.add_permission_to_group(name, t)]
        ctx.reply(f"Granted to {name}: {', '.join(added) or 'nothing'}")

    def _do_delperm(self, ctx: CommandContext, args: List[str]) -> None:
        if len(args) < 2:
            raise CommandUsageError("/group delperm <name> <token> [token ...]")

        name, tokens = args[0], args[1:]
        removed = [t for t in tokens if ctx.engine.remove_permission_from_group(name, t)]
        ctx.reply(f"Revoked from {name}: {', '.join(removed) or 'nothing'}")
