"""``auth-cli`` — manage OAuth resource servers on the auth canister.

Every command is interactive: questions are asked with questionary and
the resulting arguments are sent through
:class:`~prometheus_cli.core.auth_service.AuthService`.
"""

from __future__ import annotations

import argparse

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.app import add_global_options, dispatch, run_guarded
from prometheus_cli.cli.console import console, escape, new_table
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.auth_service import server_scopes
from prometheus_cli.core.models import ResourceServer, parse_principal
from prometheus_cli.exceptions import ValidationError

DEFAULT_SERVER_NAME = "My Monetized AI Canister"
DEFAULT_LOGO_URI = "https://placehold.co/128x128/1a1a1a/ffffff/png?text=My+Canister"
DEFAULT_PAYMENT_CANISTER = "cngnf-vqaaa-aaaar-qag4q-cai"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auth-cli",
        description="Manage your Prometheus Protocol resource servers.",
    )
    add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    listing = subparsers.add_parser("list", help="List resource servers registered by your identity.")
    listing.set_defaults(handler=_handle_list)
    register = subparsers.add_parser("register", help="Register a canister as a resource server.")
    register.set_defaults(handler=_handle_register)
    update = subparsers.add_parser("update", help="Update a registered resource server.")
    update.set_defaults(handler=_handle_update)
    delete = subparsers.add_parser("delete", help="Delete a registered resource server.")
    delete.set_defaults(handler=_handle_delete)
    return parser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_payment_canisters(raw: str) -> list[str]:
    """Split a comma-separated principal list, validating each entry."""
    return [parse_principal(part) for part in raw.split(",") if part.strip()]


def _validate_principal_answer(value: str) -> bool | str:
    try:
        parse_principal(value)
    except ValidationError:
        return "Invalid Canister ID format. Please try again."
    return True


def _validate_principal_list_answer(value: str) -> bool | str:
    try:
        parse_payment_canisters(value)
    except ValidationError as exc:
        return str(exc)
    return True


def _ask_payment_canisters(default: str, *, charges: bool) -> tuple[bool, list[str]]:
    from prometheus_cli.cli.prompts import ask_text, confirm

    if not confirm("Will this canister charge users for services?", default=charges):
        return False, []
    raw = ask_text(
        "Accepted ICRC-2 Canisters (comma-separated):",
        default=default,
        validate=_validate_principal_list_answer,
    )
    return True, parse_payment_canisters(raw)


def _select_server(ctx: CommandContext, message: str, *, empty: str) -> ResourceServer | None:
    from prometheus_cli.cli.prompts import ask_select

    console.print(f"Using identity: {ctx.identity_name}")
    console.print("Fetching your registered resource servers...")
    servers = ctx.auth().list_my_resource_servers()
    if not servers:
        console.print(empty)
        return None
    chosen = ask_select(
        message,
        [(f"{s.name} ({s.resource_server_id})", s.resource_server_id) for s in servers],
    )
    return next(s for s in servers if s.resource_server_id == chosen)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    console.print(f"Using identity: {ctx.identity_name}")
    console.print("Fetching your registered resource servers...")
    servers = ctx.auth().list_my_resource_servers()
    if not servers:
        console.print("You have no resource servers registered.")
        return exit_codes.SUCCESS

    table = new_table("Resource Servers", "Name", "Resource Server ID", "URL", "Scopes", "Status")
    for server in servers:
        table.add_row(
            server.name,
            server.resource_server_id,
            server.uris[0] if server.uris else "-",
            ", ".join(scope for scope, _ in server.scopes),
            server.status,
        )
    console.print(table)
    return exit_codes.SUCCESS


def _handle_register(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import ask_text

    console.print(f"\nRegistering a new canister using identity: {ctx.identity_name}")
    name = ask_text("Canister Name:", default=DEFAULT_SERVER_NAME)
    logo_uri = ask_text("Logo URL:", default=DEFAULT_LOGO_URI)
    charges, payment_canisters = _ask_payment_canisters(DEFAULT_PAYMENT_CANISTER, charges=True)
    canister_id = parse_principal(
        ask_text("Please enter the Canister ID to register:", validate=_validate_principal_answer),
    )
    url = ctx.config.frontend_url(canister_id)

    console.print("\nRegistering canister with the Prometheus auth server...")
    server = ctx.auth().register_resource_server(
        name=name,
        logo_uri=logo_uri,
        uris=[url],
        initial_service_principal=canister_id,
        scopes=server_scopes(charges=charges),
        accepted_payment_canisters=payment_canisters,
    )

    console.print("\n[bold green]Success![/bold green] Your canister has been registered.")
    table = new_table("Registered", "Canister Name", "Resource Server ID", "Registered URL")
    table.add_row(name, server.resource_server_id, url)
    console.print(table)
    return exit_codes.SUCCESS


def _handle_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import ask_text

    server = _select_server(
        ctx,
        "Which canister would you like to update?",
        empty="You have no canisters registered to update.",
    )
    if server is None:
        return exit_codes.SUCCESS

    console.print(f"\nUpdating '{escape(server.name)}'...")
    name = ask_text("Canister Name:", default=server.name)
    url = ask_text("Canister URL:", default=server.uris[0] if server.uris else "")
    logo_uri = ask_text("Logo URL:", default=server.logo_uri)
    current = ", ".join(server.accepted_payment_canisters)
    charges, payment_canisters = _ask_payment_canisters(current, charges=server.charges)

    console.print("\nSending update to the Prometheus auth server...")
    ctx.auth().update_resource_server(
        server.resource_server_id,
        name=name,
        uris=[url],
        logo_uri=logo_uri,
        scopes=server_scopes(charges=charges),
        accepted_payment_canisters=payment_canisters,
    )
    console.print(f"\n[bold green]Success![/bold green] Canister '{escape(name)}' has been updated.")
    return exit_codes.SUCCESS


def _handle_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import confirm

    server = _select_server(
        ctx,
        "Which server would you like to delete?",
        empty="You have no resource servers to delete.",
    )
    if server is None:
        return exit_codes.SUCCESS

    if not confirm(
        "Are you sure you want to delete this server? This action cannot be undone.",
    ):
        console.print("\nDelete operation cancelled.")
        return exit_codes.SUCCESS

    console.print("\nDeleting server...")
    ctx.auth().delete_resource_server(server.resource_server_id)
    console.print("[bold green]Server successfully deleted.[/bold green]")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, *, context: CommandContext | None = None) -> int:
    """Run the ``auth-cli`` CLI; see :func:`prometheus_cli.cli.app.main`."""
    return dispatch(_build_parser(), argv, context)


def cli() -> None:
    """Top-level error boundary invoked by the ``auth-cli`` script."""
    run_guarded(main)
