"""``bounty create|list|reserve|claim`` — ICRC-127 audit bounties."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, new_table
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.audit_service import BOUNTY_STATUSES
from prometheus_cli.core.audit_types import audit_type_label
from prometheus_cli.core.models import Bounty
from prometheus_cli.core.wasm import parse_wasm_hash
from prometheus_cli.exceptions import RemoteCallError


def register(subparsers: Any) -> None:
    bounty = subparsers.add_parser("bounty", help="Create, list, reserve and claim audit bounties.")
    actions = bounty.add_subparsers(dest="action", metavar="<action>", required=True)

    create = actions.add_parser("create", help="Fund a new bounty for a WASM audit.")
    create.add_argument("amount", help="Reward, e.g. 10 or 1_000.50")
    create.add_argument("token", help="Token symbol, e.g. USDC")
    create.add_argument("--wasm-id", required=True, help="Hex SHA-256 of the WASM to audit.")
    create.add_argument("--audit-type", required=True, help="Audit requested, e.g. data_safety_v1.")
    create.add_argument("--timeout-days", type=int, default=30, help="Days until the bounty expires.")
    create.set_defaults(handler=_handle_create)

    listing = actions.add_parser("list", help="List bounties.")
    listing.add_argument("--status", choices=BOUNTY_STATUSES, help="Filter by status.")
    listing.add_argument("--audit-type", help="Filter by audit type.")
    listing.add_argument("--creator", help="Filter by creator principal.")
    listing.add_argument("--limit", type=int, default=20, help="Number of bounties to fetch.")
    listing.add_argument("--prev", type=int, default=None, help="Bounty ID to continue after.")
    listing.set_defaults(handler=_handle_list)

    reserve = actions.add_parser("reserve", help="Stake tokens to reserve a bounty.")
    reserve.add_argument("bounty_id", type=int)
    reserve.set_defaults(handler=_handle_reserve)

    claim = actions.add_parser("claim", help="Claim a bounty after filing an attestation.")
    claim.add_argument("bounty_id", type=int)
    claim.add_argument("wasm_id", nargs="?", default=None, help="Defaults to the manifest's WASM.")
    claim.set_defaults(handler=_handle_claim)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _handle_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import confirm

    console.print("\n[bold]Creating new tokenized bounty...[/bold]")
    token = ctx.token(args.token)
    wasm_hash = parse_wasm_hash(args.wasm_id)
    amount = args.amount.replace("_", "")
    atomic = token.to_atomic(amount)
    registry_id = ctx.config.canister_id("MCP_REGISTRY")
    console.print(f"   Using current dfx identity: '{ctx.identity_name}'")

    console.print("\n[bold]Review Bounty Details[/bold]")
    console.print(f"   Amount: {amount} {token.symbol}")
    console.print(f"   Token Canister: {token.canister_id}")
    console.print(f"   Audit Type: {args.audit_type}")
    console.print(f"   For WASM ID: {wasm_hash.hex()}")
    console.print(
        "\nThis will perform two transactions:\n"
        "  1. Approve the registry to spend your tokens.\n"
        "  2. Create the bounty, transferring the tokens into escrow.",
    )
    if not confirm("Do you want to proceed?"):
        console.print("\nBounty creation cancelled.")
        return exit_codes.SUCCESS

    console.print(f"\nStep 1/2: Approving registry canister to spend {amount} {token.symbol}...")
    ctx.payments(token).approve_allowance(spender=registry_id, amount=atomic)
    console.print("   [green]Approval successful.[/green]")

    console.print("\nStep 2/2: Creating bounty on the registry...")
    bounty_id = ctx.audit().create_bounty(
        wasm_hash=wasm_hash,
        audit_type=args.audit_type,
        token_canister_id=token.canister_id,
        amount=atomic,
        timeout_days=args.timeout_days,
    )
    console.print(f"\n[bold green]Success![/bold green] Bounty with ID {bounty_id} is now active.")
    return exit_codes.SUCCESS


def _reward_text(ctx: CommandContext, bounty: Bounty) -> str:
    for token in ctx.tokens.values():
        if token.canister_id == bounty.token_canister_id:
            return f"{token.from_atomic(bounty.token_amount)} {token.symbol}"
    return f"{bounty.token_amount:,} tokens"


def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print("Fetching available bounties...")
    audit = ctx.audit()
    bounties = audit.list_bounties(
        status=args.status,
        audit_type=args.audit_type,
        creator=args.creator,
        take=args.limit,
        prev=args.prev,
    )
    if not bounties:
        console.print("No bounties found matching the criteria.")
        return exit_codes.SUCCESS

    console.print("   Checking reservation statuses...")
    table = new_table("Bounties", "Bounty ID", "Reward", "Audit Type", "WASM ID", "Status")
    for bounty in bounties:
        if bounty.claimed_date is not None or bounty.is_claimed:
            state = "[green]Claimed[/green]"
        elif audit.get_bounty_lock(bounty.bounty_id) is not None:
            state = "[yellow]Reserved[/yellow]"
        else:
            state = "Open"
        table.add_row(
            str(bounty.bounty_id),
            _reward_text(ctx, bounty),
            audit_type_label(bounty.audit_type),
            bounty.wasm_hash or "N/A",
            state,
        )
    console.print(table)
    return exit_codes.SUCCESS


def _handle_reserve(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import confirm

    bounty_id: int = args.bounty_id
    console.print(f"\nReserving bounty #{bounty_id}...")
    console.print(f"   Using current dfx identity: '{ctx.identity_name}'")
    audit = ctx.audit()

    console.print("   Fetching bounty details...")
    bounty = audit.get_bounty(bounty_id)
    if bounty is None:
        raise RemoteCallError(f"Bounty with ID {bounty_id} not found.")
    audit_type = bounty.audit_type
    if audit_type == "unknown":
        raise RemoteCallError("Could not determine required audit_type from bounty details.")

    console.print(f"   Checking stake requirement for '{audit_type}'...")
    requirement = audit.get_stake_requirement(audit_type)
    if requirement is None:
        raise RemoteCallError(f"No stake requirement is configured for '{audit_type}' on-chain.")
    console.print(f"   Required stake: {requirement.amount} {audit_type} tokens")

    if not confirm(
        f"This will stake {requirement.amount} '{audit_type}' tokens from identity "
        f"'{ctx.identity_name}'. Proceed?",
    ):
        console.print("   Operation cancelled by user.")
        return exit_codes.SUCCESS

    console.print("   Calling the Audit Hub to reserve...")
    audit.reserve_bounty(bounty_id, audit_type)
    console.print(
        f"\n[bold green]Success![/bold green] You have reserved bounty #{bounty_id}. "
        "You may now file an attestation for it.",
    )
    return exit_codes.SUCCESS


def _handle_claim(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.commands.publishing import wasm_hash_from_manifest

    wasm_id = args.wasm_id or wasm_hash_from_manifest(ctx, "WASM ID")
    console.print("Claiming bounty...")
    console.print(f"   For WASM ID: {wasm_id}")
    console.print(f"   As Auditor: {ctx.gateway.principal}")
    console.print(f"   For Bounty ID: {args.bounty_id}")

    console.print("\n   Submitting claim to the registry...")
    claim_id = ctx.audit().claim_bounty(args.bounty_id, wasm_id)
    console.print(
        f"\n[bold green]Success![/bold green] Claim {claim_id} accepted for bounty #{args.bounty_id}.\n"
        "   The funds have been transferred to your account.",
    )
    return exit_codes.SUCCESS
