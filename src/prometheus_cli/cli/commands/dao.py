"""``dao generate-ballot|finalize|list`` — DAO verification decisions."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table, shorten
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.documents import BALLOT_FILE, ballot_document, parse_outcome, require_keys
from prometheus_cli.exceptions import ManifestError


def register(subparsers: Any) -> None:
    dao = subparsers.add_parser("dao", help="Finalize WASM verification as the DAO.")
    actions = dao.add_subparsers(dest="action", metavar="<action>", required=True)

    ballot = actions.add_parser("generate-ballot", help=f"Write {BALLOT_FILE} for a WASM.")
    ballot.add_argument("wasm_id", nargs="?", default=None, help="Defaults to the manifest's WASM.")
    ballot.set_defaults(handler=_handle_generate_ballot)

    finalize = actions.add_parser("finalize", help="Submit a completed ballot.")
    finalize.add_argument("file", help="Path to the ballot YAML.")
    finalize.set_defaults(handler=_handle_finalize)

    listing = actions.add_parser("list", help="List WASMs awaiting a decision.")
    listing.add_argument("--limit", type=int, default=None, help="Number of entries to show.")
    listing.add_argument("--prev", default=None, help="WASM ID to continue after.")
    listing.set_defaults(handler=_handle_list)


def _handle_generate_ballot(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.commands.publishing import wasm_hash_from_manifest
    from prometheus_cli.infra.yaml_store import save_yaml

    wasm_id = args.wasm_id or wasm_hash_from_manifest(ctx, "WASM ID")
    header, document = ballot_document(wasm_id)
    path = ctx.cwd / BALLOT_FILE
    save_yaml(path, document, header=header)

    console.print(f"[bold green]Success![/bold green] DAO ballot generated at: {path.name}")
    console.print("   Fill in the outcome and metadata, then run 'app-store-cli dao finalize'.")
    return exit_codes.SUCCESS


def _handle_finalize(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.infra.yaml_store import load_yaml

    path = ctx.resolve_path(args.file)
    if not path.is_file():
        raise ManifestError(f"Ballot file not found at: {path}")

    console.print(f"Submitting DAO decision from: {path.name}")
    document = load_yaml(path)
    require_keys(document, ("wasm_id", "outcome", "metadata"), kind="Ballot")
    outcome = parse_outcome(document["outcome"])
    metadata = document["metadata"]
    if not isinstance(metadata, dict):
        raise ManifestError("Ballot is malformed. `metadata` must be a mapping.")

    wasm_id = str(document["wasm_id"])
    console.print(f"   Finalizing WASM {wasm_id[:10]}... as {outcome}")
    ctx.registry().finalize_verification(wasm_id, outcome, metadata)
    console.print(f"\n[bold green]Success![/bold green] The WASM has been marked as {outcome}.")
    return exit_codes.SUCCESS


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print("Fetching pending verifications...")
    pending = ctx.registry().list_pending_verifications()

    if args.prev:
        hashes = [entry.wasm_hash for entry in pending]
        pending = pending[hashes.index(args.prev) + 1:] if args.prev in hashes else []
    if args.limit is not None:
        pending = pending[: args.limit]

    if not pending:
        console.print("No pending verifications.")
        return exit_codes.SUCCESS

    table = new_table("Pending Verifications", "WASM ID", "Repo URL", "Commit Hash", "Requester")
    for entry in pending:
        table.add_row(
            entry.wasm_hash,
            entry.repo,
            shorten(entry.commit_hash, 12),
            shorten(entry.requester),
        )
    console.print(table)
    return exit_codes.SUCCESS
