"""``api-key create|list|revoke`` — API keys on an MCP server canister."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table, shorten
from prometheus_cli.cli.context import CommandContext


def register(subparsers: Any) -> None:
    api_key = subparsers.add_parser("api-key", help="Manage your API keys on an MCP server.")
    actions = api_key.add_subparsers(dest="action", metavar="<action>", required=True)

    create = actions.add_parser("create", help="Create a new API key.")
    create.add_argument("server", help="Canister ID of the MCP server.")
    create.add_argument("name", help="Label for the key.")
    create.set_defaults(handler=_handle_create)

    listing = actions.add_parser("list", help="List your API keys.")
    listing.add_argument("server", help="Canister ID of the MCP server.")
    listing.set_defaults(handler=_handle_list)

    revoke = actions.add_parser("revoke", help="Revoke an API key.")
    revoke.add_argument("server", help="Canister ID of the MCP server.")
    revoke.add_argument("hashed_key", help="Hashed key shown by 'api-key list'.")
    revoke.set_defaults(handler=_handle_revoke)


def _handle_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print(f"Creating API key '{args.name}' on {args.server}...")
    key = ctx.api_keys().create_my_api_key(args.server, args.name)
    console.print("\n[bold green]Success![/bold green] Your new API key:")
    console.print(f"\n   [bold]{key}[/bold]\n")
    console.print("[yellow]Store it now. It will not be shown again.[/yellow]")
    return exit_codes.SUCCESS


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    keys = ctx.api_keys().list_my_api_keys(args.server)
    if not keys:
        console.print("You have no API keys on this server.")
        return exit_codes.SUCCESS

    table = new_table(f"API Keys on {args.server}", "Name", "Hashed Key", "Principal", "Scopes")
    for key in keys:
        table.add_row(
            key.name,
            key.hashed_key,
            shorten(key.principal),
            ", ".join(key.scopes) or "-",
        )
    console.print(table)
    return exit_codes.SUCCESS


def _handle_revoke(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print(f"Revoking API key {shorten(args.hashed_key)} on {args.server}...")
    ctx.api_keys().revoke_my_api_key(args.server, args.hashed_key)
    console.print("[bold green]Success![/bold green] API key revoked.")
    return exit_codes.SUCCESS
