"""``canister register|upgrade|status`` — deployed canister lifecycle."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, escape
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.models import UpgradeStatus
from prometheus_cli.core.orchestrator_service import UPGRADE_MODES
from prometheus_cli.exceptions import ValidationError


def register(subparsers: Any) -> None:
    canister = subparsers.add_parser("canister", help="Register and upgrade deployed canisters.")
    actions = canister.add_subparsers(dest="action", metavar="<action>", required=True)

    reg = actions.add_parser("register", help="Link a deployed canister to its namespace.")
    reg.add_argument("canister_id")
    reg.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
    reg.set_defaults(handler=_handle_register)

    upgrade = actions.add_parser("upgrade", help="Upgrade a canister to a published version.")
    upgrade.add_argument("canister_id")
    upgrade.add_argument("version", help="Published version, e.g. 1.2.0")
    upgrade.add_argument("namespace", nargs="?", default=None, help="Defaults to the manifest's namespace.")
    upgrade.add_argument("--mode", choices=UPGRADE_MODES, default="upgrade")
    upgrade.add_argument("--arg", default="", help="Hex-encoded init/upgrade argument.")
    upgrade.add_argument("--skip-pre-upgrade", action="store_true", help="Skip the pre_upgrade hook.")
    upgrade.set_defaults(handler=_handle_upgrade)

    status = actions.add_parser("status", help="Wait for the last upgrade to finish.")
    status.set_defaults(handler=_handle_status)


def _handle_register(args: argparse.Namespace, ctx: CommandContext) -> int:
    namespace = ctx.namespace(args.namespace)
    console.print(f"Registering canister {args.canister_id} under namespace '{namespace}'...")
    ctx.usage_tracker().register_canister(args.canister_id, namespace)
    console.print("[bold green]Success![/bold green] Canister registered.")
    return exit_codes.SUCCESS


def _decode_arg(value: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except ValueError as exc:
        raise ValidationError(
            "--arg must be hex-encoded.",
            hint="Encode the Candid argument first, e.g. with 'didc encode'.",
        ) from exc


def _handle_upgrade(args: argparse.Namespace, ctx: CommandContext) -> int:
    namespace = ctx.namespace(args.namespace)
    arg = _decode_arg(args.arg)

    console.print(f"Resolving version {args.version} of '{namespace}'...")
    wasm_hash = ctx.registry().get_wasm_hash_for_version(namespace, args.version)
    console.print(f"   WASM hash: {wasm_hash.hex()}")

    console.print(f"Requesting {args.mode} of canister {args.canister_id}...")
    request_id = ctx.orchestrator().request_upgrade(
        canister_id=args.canister_id,
        wasm_hash=wasm_hash,
        mode=args.mode,
        arg=arg,
        skip_pre_upgrade=args.skip_pre_upgrade,
    )
    console.print(f"[bold green]Success![/bold green] Upgrade request {request_id} submitted.")
    console.print("   Run 'app-store-cli canister status' to follow it.")
    return exit_codes.SUCCESS


def _report_poll(attempt: int, status: UpgradeStatus) -> None:
    if not status.finished:
        console.print(f"   [{attempt}] Upgrade in progress...")


def _handle_status(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print("Checking upgrade status...")
    status = ctx.orchestrator().wait_for_upgrade(
        attempts=ctx.settings.upgrade_poll_attempts,
        interval=ctx.settings.upgrade_poll_interval,
        on_poll=_report_poll,
    )
    if status.state == "Failed":
        console.print(f"[bold red]Upgrade failed:[/bold red] {escape(status.reason)}")
        return exit_codes.GENERAL_ERROR
    console.print(f"[bold green]Upgrade completed successfully[/bold green] (at {status.timestamp}).")
    return exit_codes.SUCCESS
