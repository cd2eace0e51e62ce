"""``app-bounties generate|list|publish`` — bounties for building new apps."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, escape, new_table
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.documents import app_bounty_document, app_bounty_file_name
from prometheus_cli.exceptions import ManifestError

_BOUNTY_KEYS = (
    "title",
    "short_description",
    "details_markdown",
    "reward_amount",
    "reward_token",
    "status",
)


def register(subparsers: Any) -> None:
    bounties = subparsers.add_parser("app-bounties", help="Manage bounties for new apps.")
    actions = bounties.add_subparsers(dest="action", metavar="<action>", required=True)

    generate = actions.add_parser("generate", help="Write a blank app-bounty YAML.")
    generate.add_argument("name", help="Short name, used for the file name and title.")
    generate.set_defaults(handler=_handle_generate)

    listing = actions.add_parser("list", help="Show all app bounties.")
    listing.set_defaults(handler=_handle_list)

    publish = actions.add_parser("publish", help="Create or update a bounty from its YAML.")
    publish.add_argument("file", help="Path to the app-bounty YAML.")
    publish.set_defaults(handler=_handle_publish)


def _handle_generate(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.infra.yaml_store import save_yaml

    path = ctx.cwd / app_bounty_file_name(args.name)
    if path.exists():
        raise ManifestError(f"File '{path.name}' already exists.")
    header, document = app_bounty_document(args.name)
    save_yaml(path, document, header=header)

    console.print(f"[bold green]Success![/bold green] Bounty template generated at: {path.name}")
    console.print("   Fill it in, then run 'app-store-cli app-bounties publish' with the file.")
    return exit_codes.SUCCESS


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print("Fetching app bounties...")
    bounties = ctx.app_bounties().list_bounties()
    if not bounties:
        console.print("No app bounties found.")
        return exit_codes.SUCCESS

    table = new_table("App Bounties", "ID", "Title", "Reward", "Status")
    for bounty in bounties:
        table.add_row(
            str(bounty.id),
            bounty.title,
            f"{bounty.reward_amount:,} {bounty.reward_token}",
            bounty.status,
        )
    console.print(table)
    return exit_codes.SUCCESS


def _handle_publish(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.infra.yaml_store import load_yaml, save_yaml

    path = ctx.resolve_path(args.file)
    if not path.is_file():
        raise ManifestError(f"Bounty file not found at: {path}")

    document = load_yaml(path)
    missing = [key for key in _BOUNTY_KEYS if key not in document]
    if missing:
        raise ManifestError(
            f"Bounty file is malformed. Missing keys: {', '.join(missing)}",
            hint="Regenerate a template with 'app-store-cli app-bounties generate'.",
        )
    service = ctx.app_bounties()

    bounty_id = document.get("id")
    if bounty_id is None:
        console.print(f"Creating app bounty '{escape(document['title'])}'...")
        new_id = service.create_bounty(document)
        document["id"] = new_id
        save_yaml(path, document)
        console.print(f"[bold green]Success![/bold green] Created bounty with ID {new_id}.")
        console.print(f"   Saved the ID to {path.name} so later publishes update it.")
    else:
        console.print(f"Updating app bounty {bounty_id}...")
        service.update_bounty(int(bounty_id), document)
        console.print(f"[bold green]Success![/bold green] Bounty {bounty_id} updated.")
    return exit_codes.SUCCESS
