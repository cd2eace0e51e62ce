"""``leaderboard list users|servers``."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table
from prometheus_cli.cli.context import CommandContext

BOARDS = ("users", "servers")


def register(subparsers: Any) -> None:
    leaderboard = subparsers.add_parser("leaderboard", help="Show tool-usage rankings.")
    actions = leaderboard.add_subparsers(dest="action", metavar="<action>", required=True)

    listing = actions.add_parser("list", help="Show the user or server leaderboard.")
    listing.add_argument("board", choices=BOARDS)
    listing.set_defaults(handler=_handle_list)


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    service = ctx.leaderboard()
    if args.board == "users":
        entries = service.get_user_leaderboard()
        title = "User Leaderboard"
    else:
        entries = service.get_server_leaderboard()
        title = "Server Leaderboard"

    if not entries:
        console.print("The leaderboard is empty.")
        return exit_codes.SUCCESS

    table = new_table(title, "Rank", "Principal", "Total Invocations")
    for entry in entries:
        table.add_row(str(entry.rank), entry.subject, f"{entry.total_invocations:,}")
    console.print(table)
    return exit_codes.SUCCESS
