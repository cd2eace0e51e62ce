"""``discover list`` — browse the public App Store listings."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table, shorten
from prometheus_cli.cli.context import CommandContext


def register(subparsers: Any) -> None:
    discover = subparsers.add_parser("discover", help="Browse on-chain App Store data.")
    actions = discover.add_subparsers(dest="action", metavar="<action>", required=True)

    listing = actions.add_parser("list", help="Show every App Store listing.")
    listing.add_argument("--limit", type=int, default=None, help="Number of listings to fetch.")
    listing.add_argument("--prev", default=None, help="Namespace to continue after.")
    listing.set_defaults(handler=_handle_list)


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print("Fetching app store listings...")
    listings = ctx.registry().get_app_listings(take=args.limit, prev=args.prev)
    if not listings:
        console.print("No app store listings found.")
        return exit_codes.SUCCESS

    table = new_table(
        "App Store Listings",
        "Name",
        "Namespace",
        "Version",
        "Category",
        "Security Tier",
        "Status",
        "WASM ID",
    )
    for listing in listings:
        table.add_row(
            listing.name,
            listing.namespace,
            listing.version,
            listing.category,
            listing.security_tier,
            listing.status,
            shorten(listing.wasm_id),
        )
    console.print(table)
    return exit_codes.SUCCESS
