"""``attest generate|submit`` — auditor attestation manifests."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.audit_types import ATTESTATION_TYPES
from prometheus_cli.core.documents import attestation_document, attestation_file_name, require_keys
from prometheus_cli.exceptions import ManifestError


def register(subparsers: Any) -> None:
    attest = subparsers.add_parser("attest", help="Generate and submit audit attestations.")
    actions = attest.add_subparsers(dest="action", metavar="<action>", required=True)

    generate = actions.add_parser("generate", help="Write an attestation template to fill in.")
    generate.add_argument("audit_type", help=f"One of: {', '.join(ATTESTATION_TYPES)}")
    generate.add_argument("wasm_hash", nargs="?", default=None, help="Defaults to the manifest's WASM.")
    generate.set_defaults(handler=_handle_generate)

    submit = actions.add_parser("submit", help="File a completed attestation.")
    submit.add_argument("file", help="Path to the attestation YAML.")
    submit.add_argument("-b", "--bounty-id", type=int, required=True, help="Bounty the attestation answers.")
    submit.set_defaults(handler=_handle_submit)


def _handle_generate(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.commands.publishing import wasm_hash_from_manifest
    from prometheus_cli.infra.yaml_store import save_yaml

    wasm_hash = args.wasm_hash or wasm_hash_from_manifest(ctx)
    header, document = attestation_document(args.audit_type, wasm_hash)
    path = ctx.cwd / attestation_file_name(args.audit_type)
    save_yaml(path, document, header=header)

    console.print(f"[bold green]Success![/bold green] Attestation template generated at: {path.name}")
    console.print("   Please edit this file to fill in the required values.")
    return exit_codes.SUCCESS


def _handle_submit(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.infra.yaml_store import load_yaml

    path = ctx.resolve_path(args.file)
    if not path.is_file():
        raise ManifestError(f"Attestation file not found at: {path}")

    console.print(f"Submitting attestation from: {path.name}")
    document = load_yaml(path)
    require_keys(document, ("wasm_hash", "metadata"), kind="Manifest")
    metadata = document["metadata"]
    if not isinstance(metadata, dict):
        raise ManifestError("Manifest is malformed. `metadata` must be a mapping.")

    wasm_hash = str(document["wasm_hash"])
    console.print(f"   Submitting attestation for WASM hash: {wasm_hash[:10]}...")
    ctx.audit().file_attestation(wasm_id=wasm_hash, bounty_id=args.bounty_id, metadata=metadata)
    console.print("\n[bold green]Success![/bold green] The attestation has been filed on-chain.")
    return exit_codes.SUCCESS
