"""
Tests for gatekeeper/commands/ and gatekeeper/permissions/decorators.py

Coverage:
- require_perm gating and AuthorizationError
- Dispatcher parsing, unknown commands, usage errors
- /reload, /savepermissions, /group, /perm, /forceoff, /forceon
"""

import logging

import pytest

from gatekeeper.commands import ChatCommand, CommandContext, default_dispatcher
from gatekeeper.core.exceptions import AuthorizationError
from gatekeeper.permissions.decorators import require_perm
from gatekeeper.structured_logger import actor_ctx

ADMIN_UID = 76561198000000001
PLAYER_UID = 76561198000000002


def last_reply(session) -> str:
    return session.messages[-1]


class EchoCommand(ChatCommand):
    name = "echo"
    usage = "/echo <text>"

    @require_perm("echo")
    def execute(self, ctx, args):
        ctx.reply(" ".join(args))
        ctx.reply(f"actor={actor_ctx.get()}")


# ========== Decorator ==========

class TestRequirePerm:
    """Tests for require_perm"""

    def test_granted(self, engine, registry, admin):
        ctx = CommandContext(engine=engine, registry=registry, sender=admin)
        EchoCommand().execute(ctx, ["hi"])
        assert admin.messages[0].endswith("hi")

    def test_denied_raises(self, engine, registry, player):
        ctx = CommandContext(engine=engine, registry=registry, sender=player)
        with pytest.raises(AuthorizationError) as exc_info:
            EchoCommand().execute(ctx, ["hi"])

        assert exc_info.value.permission == "echo"
        assert exc_info.value.principal_id == PLAYER_UID
        assert player.messages == []

    def test_permission_exposed(self):
        assert EchoCommand().permission == "echo"
        assert ChatCommand().permission is None


# ========== Dispatcher ==========

class TestDispatcher:
    """Tests for CommandDispatcher"""

    def test_dispatch_with_quotes(self, dispatcher, admin):
        dispatcher.register(EchoCommand())
        assert dispatcher.dispatch(admin, '/echo "hello world" again') is True
        assert "hello world again" in admin.messages[0]

    def test_actor_set_during_dispatch(self, dispatcher, admin):
        dispatcher.register(EchoCommand())
        dispatcher.dispatch(admin, "/echo x")
        assert last_reply(admin).endswith(f"actor={ADMIN_UID}")
        assert actor_ctx.get() is None

    def test_unknown_command(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, "/nope") is False
        assert "Unknown command: /nope" in last_reply(admin)

    def test_unbalanced_quotes(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, '/group create "VIP') is False
        assert "Could not parse" in last_reply(admin)

    def test_blank_line(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, "   ") is False
        assert admin.messages == []

    def test_denied_reply_and_warning(self, dispatcher, player, caplog):
        caplog.set_level(logging.WARNING, logger="gatekeeper")
        assert dispatcher.dispatch(player, "/reload") is False
        assert "don't have access" in last_reply(player)
        assert "denied" in caplog.text

    def test_usage_error(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, "/group") is False
        assert last_reply(admin).startswith("[Gatekeeper] Usage: /group")

    def test_duplicate_registration(self, dispatcher):
        dispatcher.register(EchoCommand())
        with pytest.raises(ValueError):
            dispatcher.register(EchoCommand())

    def test_builtin_commands_registered(self, engine, registry):
        dispatcher = default_dispatcher(engine, registry)
        names = {c.name for c in dispatcher.commands()}
        assert names == {"reload", "savepermissions", "group", "perm", "forceoff", "forceon"}
        assert dispatcher.get("/GROUP").permission == "managegroups"


# ========== Persistence commands ==========

class TestReloadAndSave:
    """Tests for /reload and /savepermissions"""

    def test_save_then_reload(self, dispatcher, engine, admin):
        dispatcher.dispatch(admin, "/group create Miners")
        assert dispatcher.dispatch(admin, "/savepermissions") is True
        assert "saved" in last_reply(admin)

        engine.create_group("Unsaved")
        assert dispatcher.dispatch(admin, "/reload") is True
        assert admin.messages[-2].endswith("Reloading...")
        assert last_reply(admin).endswith("Reloaded!")
        assert engine.find_group_by_name("Miners") is not None
        assert engine.find_group_by_name("Unsaved") is None

    def test_reload_failure_reported(self, dispatcher, engine, admin):
        engine.gateway.group_file.write_text("broken", encoding="utf-8")
        dispatcher.dispatch(admin, "/reload")
        assert "Reload failed" in last_reply(admin)
        assert engine.find_group_by_name("Default") is not None


# ========== /group ==========

class TestGroupCommand:
    """Tests for /group"""

    def test_create_with_display_name(self, dispatcher, engine, admin):
        dispatcher.dispatch(admin, '/group create VIP "Very Important"')
        assert engine.find_group_by_name("vip").display_name == "Very Important"

        dispatcher.dispatch(admin, "/group create vip")
        assert "already exists" in last_reply(admin)

    def test_addperm_delperm(self, dispatcher, engine, admin):
        dispatcher.dispatch(admin, "/group create VIP")
        dispatcher.dispatch(admin, "/group addperm VIP Kit home")
        assert engine.find_group_by_name("VIP").permissions == ["kit", "home"]

        dispatcher.dispatch(admin, "/group delperm VIP kit")
        assert engine.find_group_by_name("VIP").permissions == ["home"]

    def test_addperm_missing_group(self, dispatcher, admin):
        dispatcher.dispatch(admin, "/group addperm Ghosts boo")
        assert "does not exist" in last_reply(admin)

    def test_rename_and_nick(self, dispatcher, engine, admin):
        dispatcher.dispatch(admin, "/group rename Moderator Mods")
        assert engine.find_group_by_name("Mods") is not None

        dispatcher.dispatch(admin, "/group nick Mods Helpers of the Realm")
        assert engine.find_group_by_name("Mods").display_name == "Helpers of the Realm"

    def test_remove_default_refused(self, dispatcher, engine, admin):
        dispatcher.dispatch(admin, "/group remove default")
        assert "cannot be removed" in last_reply(admin)
        assert engine.find_group_by_name("Default") is not None

    def test_list_and_info(self, dispatcher, admin):
        dispatcher.dispatch(admin, "/group list")
        assert "Moderator (Mod)" in last_reply(admin)

        dispatcher.dispatch(admin, "/group info moderator")
        assert last_reply(admin).endswith("Permissions: kick, mute, unmute")

    def test_unknown_action(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, "/group explode VIP") is False
        assert "Usage" in last_reply(admin)


# ========== /perm ==========

class TestPermCommand:
    """Tests for /perm"""

    def test_addgroup_by_name_prefix(self, dispatcher, engine, admin, player):
        assert dispatcher.dispatch(admin, "/perm addgroup bo Moderator") is True
        assert engine.player_has_group(player, "moderator") is True
        assert engine.player_has_permission(player, "kick") is True

    def test_addgroup_unknown_group(self, dispatcher, engine, admin, player):
        dispatcher.dispatch(admin, "/perm addgroup Bob Ghosts")
        assert "does not exist" in last_reply(admin)
        assert engine.get_player(player) is None

    def test_add_and_del_direct(self, dispatcher, engine, admin, player):
        dispatcher.dispatch(admin, "/perm add Bob Fly")
        assert engine.has_permission(PLAYER_UID, "fly") is True

        dispatcher.dispatch(admin, "/perm del Bob fly")
        assert engine.has_permission(PLAYER_UID, "fly") is False

    def test_offline_raw_id(self, dispatcher, engine, admin):
        assert dispatcher.dispatch(admin, "/perm create 12345") is True
        assert engine.find_player_by_id(12345) is not None

        dispatcher.dispatch(admin, "/perm remove 12345")
        assert engine.find_player_by_id(12345) is None

    def test_unknown_player(self, dispatcher, admin):
        assert dispatcher.dispatch(admin, "/perm add Nobody fly") is False
        assert "No player matches 'Nobody'" in last_reply(admin)

    @pytest.mark.parametrize("target", ["18446744073709551616", "99999999999999999999999"])
    def test_raw_id_beyond_64_bits(self, dispatcher, engine, admin, target):
        for line in (f"/perm create {target}", f"/perm add {target} fly", f"/perm addgroup {target} Moderator"):
            assert dispatcher.dispatch(admin, line) is False
            assert f"No player matches '{target}'" in last_reply(admin)
        assert all(p.principal_id <= 2**64 - 1 for p in engine.list_players())

    def test_check(self, dispatcher, admin, player):
        dispatcher.dispatch(admin, "/perm check Bob help")
        assert last_reply(admin).endswith("Bob has help.")

    def test_wrong_arity(self, dispatcher, admin, player):
        assert dispatcher.dispatch(admin, "/perm add Bob") is False
        assert "Usage" in last_reply(admin)


# ========== /forceoff /forceon ==========

class TestForceCommands:
    """Tests for /forceoff and /forceon"""

    def test_forceoff_all_and_on(self, dispatcher, engine, admin, player):
        dispatcher.dispatch(admin, "/forceoff Bob all")
        assert engine.is_default_also_suppressed(PLAYER_UID) is True
        assert engine.player_has_permission(player, "help") is False

        dispatcher.dispatch(admin, "/forceoff Bob")
        assert "already forced off" in last_reply(admin)

        dispatcher.dispatch(admin, "/forceon Bob")
        assert engine.player_has_permission(player, "help") is True

        dispatcher.dispatch(admin, "/forceon Bob")
        assert "is not forced off" in last_reply(admin)

    def test_forceoff_bad_flag(self, dispatcher, admin, player):
        assert dispatcher.dispatch(admin, "/forceoff Bob everything") is False
        assert "Usage" in last_reply(admin)

    def test_forced_off_admin_loses_commands(self, dispatcher, engine, admin):
        engine.force_off(ADMIN_UID, False)
        assert dispatcher.dispatch(admin, "/group list") is False
        assert "don't have access" in last_reply(admin)
