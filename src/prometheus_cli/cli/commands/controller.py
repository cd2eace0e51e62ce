"""``controller add|remove|list`` — who may publish to a namespace."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.models import parse_principal


def register(subparsers: Any) -> None:
    controller = subparsers.add_parser("controller", help="Manage namespace controllers.")
    actions = controller.add_subparsers(dest="action", metavar="<action>", required=True)

    for name, verb in (("add", "Grant"), ("remove", "Revoke")):
        sub = actions.add_parser(name, help=f"{verb} publishing rights for a principal.")
        sub.add_argument("principal")
        sub.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
        sub.set_defaults(handler=_handle_manage)

    listing = actions.add_parser("list", help="Show the controllers of a namespace.")
    listing.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
    listing.set_defaults(handler=_handle_list)


def _handle_manage(args: argparse.Namespace, ctx: CommandContext) -> int:
    principal = parse_principal(args.principal)
    namespace = ctx.namespace(args.namespace)
    registry = ctx.registry()
    if args.action == "add":
        console.print(f"Adding controller {principal} to '{namespace}'...")
        registry.add_controller(namespace, principal)
        console.print("[bold green]Success![/bold green] Controller added.")
    else:
        console.print(f"Removing controller {principal} from '{namespace}'...")
        registry.remove_controller(namespace, principal)
        console.print("[bold green]Success![/bold green] Controller removed.")
    return exit_codes.SUCCESS


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    namespace = ctx.namespace(args.namespace)
    controllers = ctx.registry().get_controllers(namespace)
    if not controllers:
        console.print(f"No controllers found for '{namespace}'.")
        return exit_codes.SUCCESS

    table = new_table(f"Controllers of {namespace}", "#", "Principal")
    for index, principal in enumerate(controllers, start=1):
        table.add_row(str(index), principal)
    console.print(table)
    return exit_codes.SUCCESS
