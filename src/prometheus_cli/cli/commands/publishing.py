"""``publish``, ``submit``, ``update`` and ``status``.

These commands read ``prometheus.yml`` from the working directory,
hash the WASM it points to and talk to the registry.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, escape
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.documents import (
    MANIFEST_FILE,
    REPRODUCIBLE_WASM_PATH,
    is_reproducible_wasm_path,
    require_namespace,
    require_submission,
    validate_for_publish,
    verification_metadata,
)
from prometheus_cli.core.models import VerificationStatus
from prometheus_cli.core.wasm import WasmArtifact, analyze_wasm, parse_version, sha256_hex
from prometheus_cli.exceptions import ManifestError, ValidationError


def register(subparsers: Any) -> None:
    publish = subparsers.add_parser(
        "publish",
        help="Submit a WASM for verification and publish it to the registry.",
    )
    publish.add_argument("version", help="Semantic version, e.g. 1.0.0")
    publish.set_defaults(handler=_handle_publish)

    submit = subparsers.add_parser(
        "submit",
        help="Register the namespace and submit a verification request.",
    )
    submit.set_defaults(handler=_handle_submit)

    update = subparsers.add_parser(
        "update",
        help="Re-submit the listing metadata of a published version (idempotent).",
    )
    update.add_argument("--wasm", dest="wasm_path", help="WASM file (defaults to wasm_path).")
    update.add_argument("--commit", dest="git_commit", help="Git commit (defaults to git_commit).")
    update.set_defaults(handler=_handle_update)

    status = subparsers.add_parser(
        "status",
        help="Show verification status; reads the WASM hash from prometheus.yml if omitted.",
    )
    status.add_argument("wasm_hash", nargs="?", default=None)
    status.set_defaults(handler=_handle_status)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def read_wasm(path: Path) -> WasmArtifact:
    """Read and analyse the WASM at *path*."""
    if not path.is_file():
        raise ManifestError(f"WASM file not found at path: {path}")
    return analyze_wasm(path.read_bytes())


def wasm_hash_from_manifest(ctx: CommandContext, what: str = "WASM hash") -> str:
    """Hash the WASM that ``prometheus.yml`` points to (hex)."""
    console.print(f"{what} not provided, reading it from {MANIFEST_FILE}...")
    if not ctx.manifest_path.is_file():
        raise ManifestError(
            f"{what} not provided and {MANIFEST_FILE} not found.",
            hint=f"Run this command from your project root or pass the {what} explicitly.",
        )
    wasm_path = require_submission(ctx.load_manifest()).get("wasm_path")
    if not wasm_path:
        raise ManifestError(f"`wasm_path` is missing in the `submission` section of {MANIFEST_FILE}.")
    path = ctx.resolve_path(str(wasm_path))
    if not path.is_file():
        raise ManifestError(f"WASM file not found at path: {path}")
    return sha256_hex(path.read_bytes())


def commit_bytes(git_commit: str) -> bytes:
    try:
        return bytes.fromhex(git_commit.strip())
    except ValueError as exc:
        raise ValidationError(f"git_commit '{git_commit}' is not a hex commit hash.") from exc


def _warn_non_reproducible(wasm_path: str) -> None:
    console.print(
        "\n[yellow]WARNING:[/yellow] Your WASM path does not match the reproducible build output.\n"
        f"   Expected path: {REPRODUCIBLE_WASM_PATH} (from docker-compose build)\n"
        f"   Your path: {escape(wasm_path)}\n"
        "   If you did not build with 'app-store-cli build', "
        "verification WILL FAIL because the hash will not match!\n",
    )


def publish_version(
    ctx: CommandContext,
    manifest: dict[str, Any],
    version: str,
    *,
    wasm_file: Path | None = None,
) -> None:
    """Run the five publishing steps for *version* of *manifest*.

    *wasm_file* overrides the manifest's ``wasm_path`` (resolved
    against the working directory).
    """
    from prometheus_cli.cli.progress import ChunkUploadProgress

    submission = validate_for_publish(manifest)
    namespace = require_namespace(manifest)
    version_number = parse_version(version)

    if not is_reproducible_wasm_path(str(submission["wasm_path"])):
        _warn_non_reproducible(str(submission["wasm_path"]))

    console.print(f"\n[bold]Publishing version {version} of '{namespace}'...[/bold]")

    console.print("\n   [1/5] Analyzing local files and metadata...")
    artifact = read_wasm(wasm_file or ctx.resolve_path(str(submission["wasm_path"])))
    console.print(f"   Computed WASM Hash: {artifact.hash_hex}")
    console.print(f"   Using current dfx identity: '{ctx.identity_name}'")
    registry = ctx.registry()

    console.print("\n   [2/5] Ensuring app namespace is registered on-chain...")
    outcome = registry.create_canister_type(
        namespace=namespace,
        name=str(submission["name"]),
        description=str(submission["description"]),
        repo_url=str(submission["repo_url"]),
    )
    if outcome == "created":
        console.print("   [green]App namespace registered for the first time.[/green]")
    else:
        console.print("   App namespace already exists. Proceeding...")

    console.print("\n   [3/5] Submitting verification request...")
    registry.submit_verification_request(
        wasm_hash=artifact.hash,
        repo_url=str(submission["repo_url"]),
        commit_hash=commit_bytes(str(submission["git_commit"])),
        metadata=verification_metadata(submission),
    )
    console.print("   [green]Verification request submitted.[/green]")

    console.print("\n   [4/5] Registering WASM version...")
    registered = registry.update_wasm(
        namespace=namespace,
        version=version_number,
        wasm_hash=artifact.hash,
        chunk_hashes=artifact.chunk_hashes,
        repo_url=str(submission["repo_url"]),
    )
    if registered:
        console.print("   [green]Version registration successful.[/green]")
    else:
        console.print("   WASM version already registered. Proceeding to upload chunks...")

    console.print(f"\n   [5/5] Uploading {len(artifact.chunks)} WASM chunk(s)...")
    with ChunkUploadProgress(artifact.size) as progress:
        for index, (chunk, chunk_hash) in enumerate(zip(artifact.chunks, artifact.chunk_hashes)):
            registry.upload_wasm_chunk(
                namespace=namespace,
                version=version_number,
                chunk=chunk,
                index=index,
                chunk_hash=chunk_hash,
            )
            progress.advance(len(chunk))
    console.print("   [green]All chunks uploaded.[/green]")

    console.print(
        f"\n[bold green]Success![/bold green] Version {version} for '{namespace}' has been published.\n"
        "   An auditor can now perform the build reproducibility audit.\n"
        "   Once verified, your canister will be deployed automatically.",
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _handle_publish(args: argparse.Namespace, ctx: CommandContext) -> int:
    publish_version(ctx, ctx.load_manifest(), args.version)
    return exit_codes.SUCCESS


def _handle_submit(args: argparse.Namespace, ctx: CommandContext) -> int:
    manifest = ctx.load_manifest()
    namespace = require_namespace(manifest)
    submission = require_submission(manifest)
    missing = [key for key in ("repo_url", "wasm_path", "git_commit") if not submission.get(key)]
    if missing:
        raise ManifestError(f"{MANIFEST_FILE} is incomplete. Missing: {', '.join(missing)}.")
    registry = ctx.registry()

    console.print("\n[bold]Submitting new verification request from manifest...[/bold]")
    console.print("\n   [1/3] Ensuring canister type exists...")
    outcome = registry.create_canister_type(
        namespace=namespace,
        name=str(submission.get("name", namespace)),
        description=str(submission.get("description", "")),
        repo_url=str(submission["repo_url"]),
    )
    console.print(
        "   Canister type created." if outcome == "created"
        else "   Canister type already exists. Proceeding...",
    )

    console.print("\n   [2/3] Analyzing local WASM file and metadata...")
    artifact = read_wasm(ctx.resolve_path(str(submission["wasm_path"])))
    console.print(f"   WASM Hash: {artifact.hash_hex}")

    console.print("\n   [3/3] Submitting verification request...")
    registry.submit_verification_request(
        wasm_hash=artifact.hash,
        repo_url=str(submission["repo_url"]),
        commit_hash=commit_bytes(str(submission["git_commit"])),
        metadata=verification_metadata(submission),
    )
    console.print(
        "\n[bold green]Success![/bold green] Your verification request has been submitted.\n"
        f"   Track it with: app-store-cli status {artifact.hash_hex}",
    )
    return exit_codes.SUCCESS


def _handle_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    manifest = ctx.load_manifest()
    namespace = require_namespace(manifest)
    submission = require_submission(manifest)

    wasm_path = args.wasm_path or submission.get("wasm_path")
    git_commit = args.git_commit or submission.get("git_commit")
    if not wasm_path:
        raise ManifestError(
            "WASM path not specified.",
            hint="Set wasm_path in prometheus.yml or use --wasm.",
        )
    if not git_commit:
        raise ManifestError(
            "Git commit not specified.",
            hint="Set git_commit in prometheus.yml or use --commit.",
        )

    console.print("\n[bold]Updating app store metadata...[/bold]\n")
    console.print("   [1/3] Validating WASM file...")
    artifact = read_wasm(ctx.resolve_path(str(wasm_path)))
    console.print(f"   WASM hash: {artifact.hash_hex[:16]}...")

    console.print("\n   [2/3] Loading identity...")
    console.print(f"   Using identity: {ctx.identity_name}")
    registry = ctx.registry()

    console.print("\n   [3/3] Updating app store metadata...")
    registry.submit_verification_request(
        wasm_hash=artifact.hash,
        repo_url=str(submission.get("repo_url", "")),
        commit_hash=commit_bytes(str(git_commit)),
        metadata=verification_metadata(submission),
    )

    console.print("   [green]App store metadata updated.[/green]\n")
    console.print("[bold]Updated Information:[/bold]")
    for label, value in (
        ("Namespace", namespace),
        ("Name", submission.get("name", "")),
        ("Description", submission.get("description", "")),
        ("Publisher", submission.get("publisher", "")),
        ("Category", submission.get("category", "")),
        ("WASM Hash", f"{artifact.hash_hex[:16]}..."),
    ):
        console.print(f"   - {label}: {escape(value)}")
    console.print(
        "\nThis operation is idempotent and does not affect existing "
        "verifications or attestations.",
    )
    return exit_codes.SUCCESS


def _handle_status(args: argparse.Namespace, ctx: CommandContext) -> int:
    manifest: dict[str, Any] | None = None
    wasm_hash: str | None = args.wasm_hash

    if not wasm_hash:
        wasm_hash = wasm_hash_from_manifest(ctx)
        manifest = ctx.load_manifest()

    console.print(f"\nChecking verification status for WASM Hash: {wasm_hash}")
    status = ctx.audit().get_verification_status(wasm_hash)
    _render_status(status)

    if manifest is not None:
        submission = manifest.get("submission") or {}
        if manifest.get("namespace") and submission.get("canister_id"):
            _render_live_status(ctx, str(manifest["namespace"]), str(submission["canister_id"]))
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_status(status: VerificationStatus) -> None:
    if status.request is None and not status.is_verified and not status.audit_records:
        console.print("\n[bold]Verification Status:[/bold] Not Found")
        console.print("   (This WASM hash has not been submitted for verification yet.)")
        return

    verified = "[green]Yes[/green]" if status.is_verified else "[red]No[/red]"
    console.print("\n[bold]Verification Status[/bold]")
    console.print(f"   Verified by DAO: {verified}")
    if status.request is not None:
        console.print(f"   Repo URL:        {escape(status.request.repo)}")
        console.print(f"   Commit Hash:     {escape(status.request.commit_hash)}")

    console.print(f"\n   Found {len(status.bounties)} tokenized bounty(s):")
    if not status.bounties:
        console.print("     (None posted for this WASM hash.)")
    for index, bounty in enumerate(status.bounties, start=1):
        state = "Claimed" if bounty.claimed_date else "Open"
        console.print(f"     [{index}] {bounty.token_amount:,} tokens ({state})")

    attestations = [record for record in status.audit_records if record.kind == "attestation"]
    divergences = [record for record in status.audit_records if record.kind == "divergence"]
    console.print(f"\n   Found {len(attestations)} attestation(s):")
    if not attestations:
        console.print("     (None yet. The audit process may still be in progress.)")
    for index, record in enumerate(attestations, start=1):
        console.print(f"     [{index}] {escape(record.audit_type)} by {escape(record.auditor)}")
    if divergences:
        console.print(f"\n   Found {len(divergences)} divergence report(s):")
        for index, record in enumerate(divergences, start=1):
            console.print(f"     [{index}] {escape(record.auditor)}: {escape(record.report)}")


def _render_live_status(ctx: CommandContext, namespace: str, canister_id: str) -> None:
    console.print("\n[bold]Live Canister Status[/bold]")
    console.print(f"   Checking official canister: {canister_id}")
    registry = ctx.registry()
    versions = registry.get_versions(namespace)
    live_hash = registry.get_canister_wasm_hash(canister_id)
    if live_hash is None:
        console.print("   [red]Could not retrieve the WASM hash from this canister.[/red]")
        return

    live_hex = live_hash.hex()
    console.print(f"      Live Hash: {live_hex}")
    match = next((v for v in versions if v.hash == live_hex), None)
    if match is not None:
        console.print(
            f"      [green]Verified.[/green] Matches published version {match.version_text}.",
        )
    else:
        console.print(
            "      [red]Unverified.[/red] The running WASM does not match any published version.",
        )
