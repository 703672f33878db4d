"""
Persistence commands: /reload and /savepermissions
"""

from typing import List

from ..permissions.decorators import require_perm
from .base import ChatCommand, CommandContext


class ReloadCommand(ChatCommand):
    name = "reload"
    usage = "/reload"

    @require_perm("reload")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        ctx.reply("Reloading...")
        if ctx.engine.reload():
            ctx.reply("Reloaded!")
        else:
            ctx.reply("Reload failed, current permissions were kept. Check the server log.")


class SaveCommand(ChatCommand):
    name = "savepermissions"
    usage = "/savepermissions"

    @require_perm("savepermissions")
    def execute(self, ctx: CommandContext, args: List[str]) -> None:
        if ctx.engine.save():
            ctx.reply("Permissions saved.")
        else:
            ctx.reply("Saving failed, the previous files were restored. Check the server log.")
