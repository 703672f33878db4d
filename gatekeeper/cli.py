#!/usr/bin/env python3
"""
Command-line interface for Gatekeeper permission documents

Usage:
    gatekeeper [--data-dir PATH] init
    gatekeeper groups
    gatekeeper players
    gatekeeper check <principal_id> <token> [--explain]
    gatekeeper add-group <name> [--display-name NAME] [--perm TOKEN ...]
    gatekeeper grant <principal_id> <token>

Mutating commands save the documents afterwards. Exit code is 0 on success
and 1 when the operation reports False (denied check, duplicate group,
failed load or save).
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import GatekeeperSettings, get_settings
from .permissions.engine import PermissionEngine, create_permission_system
from .structured_logger import configure_logging


def _open_engine(args) -> Optional[PermissionEngine]:
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if getattr(args, "explain", False):
        overrides["perms_explain"] = True

    settings = GatekeeperSettings(**overrides) if overrides else get_settings()
    configure_logging(settings)

    engine = create_permission_system(settings, load=False)
    if not engine.reload():
        print("Error: could not load permission documents (see log)", file=sys.stderr)
        return None
    return engine


def init_command(args) -> int:
    """Load the documents, writing the defaults when none exist"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    print(f"Groups:  {engine.gateway.group_file}")
    print(f"Players: {engine.gateway.player_file}")
    print(f"Loaded {len(engine.list_groups())} groups and {len(engine.list_players())} players")
    return 0


def groups_command(args) -> int:
    """List permission groups"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    groups = engine.list_groups()
    print(f"{'Name':20} {'Display':20} Permissions")
    print("-" * 70)
    for group in groups:
        print(f"{group.name:20} {group.display_name:20} {', '.join(group.permissions)}")
    return 0


def players_command(args) -> int:
    """List player records"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    for player in engine.list_players():
        print(f"{player.principal_id}")
        print(f"   Groups:      {', '.join(player.groups) or '-'}")
        print(f"   Permissions: {', '.join(player.permissions) or '-'}")
    return 0


def check_command(args) -> int:
    """Check one permission for one principal"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    if args.explain:
        explanation = engine.explain_permission(args.principal_id, args.token)
        print(json.dumps(explanation, indent=2))

    granted = engine.has_permission(args.principal_id, args.token)
    print(f"{args.principal_id} {args.token}: {'ALLOW' if granted else 'DENY'}")
    return 0 if granted else 1


def add_group_command(args) -> int:
    """Create a group and save"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    if not engine.create_group(args.name, permissions=args.perm, display_name=args.display_name):
        print(f"Error: group {args.name} already exists or is invalid", file=sys.stderr)
        return 1

    if not engine.save():
        print("Error: could not save permission documents", file=sys.stderr)
        return 1

    print(f"Group {args.name} created")
    return 0


def grant_command(args) -> int:
    """Grant a direct permission to a principal and save"""
    engine = _open_engine(args)
    if engine is None:
        return 1

    engine.create_player(args.principal_id)
    if not engine.add_direct_permission(args.principal_id, args.token):
        print(f"Error: invalid permission token {args.token!r}", file=sys.stderr)
        return 1

    if not engine.save():
        print("Error: could not save permission documents", file=sys.stderr)
        return 1

    print(f"Granted {args.token} to {args.principal_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gatekeeper",
        description="Gatekeeper - inspect and edit permission documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        help="Data directory (default: GATEKEEPER_DATA_DIR or .gatekeeper_data)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init", help="Load documents, writing defaults when absent")
    subparsers.add_parser("groups", help="List permission groups")
    subparsers.add_parser("players", help="List player records")

    check_parser = subparsers.add_parser("check", help="Check a permission")
    check_parser.add_argument("principal_id", type=int, help="Player principal ID")
    check_parser.add_argument("token", type=str, help="Permission token")
    check_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the resolution step that decided",
    )

    add_group_parser = subparsers.add_parser("add-group", help="Create a permission group")
    add_group_parser.add_argument("name", type=str, help="Group name")
    add_group_parser.add_argument("--display-name", type=str, help="Display name")
    add_group_parser.add_argument(
        "--perm",
        action="append",
        default=[],
        help="Permission token (repeatable)",
    )

    grant_parser = subparsers.add_parser("grant", help="Grant a direct permission")
    grant_parser.add_argument("principal_id", type=int, help="Player principal ID")
    grant_parser.add_argument("token", type=str, help="Permission token")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "init": init_command,
        "groups": groups_command,
        "players": players_command,
        "check": check_command,
        "add-group": add_group_command,
        "grant": grant_command,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
