"""``version list|deprecate`` — published WASM versions of a namespace."""

from __future__ import annotations

import argparse
import datetime as dt
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table, shorten
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.wasm import parse_version


def register(subparsers: Any) -> None:
    version = subparsers.add_parser("version", help="List and deprecate published versions.")
    actions = version.add_subparsers(dest="action", metavar="<action>", required=True)

    listing = actions.add_parser("list", help="Show every published version.")
    listing.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
    listing.set_defaults(handler=_handle_list)

    deprecate = actions.add_parser("deprecate", help="Mark a version as deprecated.")
    deprecate.add_argument("version", help="Version to (un)deprecate, e.g. 1.0.0")
    deprecate.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
    deprecate.add_argument("-r", "--reason", default="", help="Why the version is deprecated.")
    deprecate.add_argument("--undo", action="store_true", help="Clear the deprecation flag instead.")
    deprecate.set_defaults(handler=_handle_deprecate)


def _format_created(created_ns: int) -> str:
    if created_ns <= 0:
        return "-"
    stamp = dt.datetime.fromtimestamp(created_ns / 1_000_000_000, tz=dt.timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M")


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    namespace = ctx.namespace(args.namespace)
    console.print(f"Fetching versions of '{namespace}'...")
    versions = sorted(ctx.registry().get_versions(namespace), key=lambda v: v.version, reverse=True)
    if not versions:
        console.print("No versions published yet.")
        return exit_codes.SUCCESS

    table = new_table(f"Versions of {namespace}", "Version", "WASM Hash", "Created", "Status", "Description")
    for entry in versions:
        table.add_row(
            entry.version_text,
            shorten(entry.hash),
            _format_created(entry.created),
            "[red]Deprecated[/red]" if entry.deprecated else "[green]Active[/green]",
            entry.description,
        )
    console.print(table)
    return exit_codes.SUCCESS


def _handle_deprecate(args: argparse.Namespace, ctx: CommandContext) -> int:
    namespace = ctx.namespace(args.namespace)
    parse_version(args.version)
    deprecate = not args.undo
    verb = "Deprecating" if deprecate else "Un-deprecating"
    console.print(f"{verb} version {args.version} of '{namespace}'...")
    ctx.registry().set_deprecation_status(
        namespace,
        args.version,
        deprecate=deprecate,
        reason=args.reason,
    )
    state = "deprecated" if deprecate else "active again"
    console.print(f"[bold green]Success![/bold green] Version {args.version} is now {state}.")
    return exit_codes.SUCCESS
