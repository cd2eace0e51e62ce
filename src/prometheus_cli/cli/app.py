"""CLI application entry point and command routing for ``app-store-cli``.

This module is the **sole error boundary** for both console scripts.
It catches :class:`~prometheus_cli.exceptions.PrometheusCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — each command module under
  :mod:`prometheus_cli.cli.commands` registers its own parsers and
  handlers, and handlers delegate to the core services.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import configure_logging, console, escape
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.config import IC_NETWORK, NETWORKS
from prometheus_cli.exceptions import PrometheusCliError
from prometheus_cli.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def add_global_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by ``app-store-cli`` and ``auth-cli``."""
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-n",
        "--network",
        choices=NETWORKS,
        default=IC_NETWORK,
        help="Target network (default: ic).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log canister calls and subprocesses (DEBUG).",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser with every sub-command."""
    from prometheus_cli.cli import doctor
    from prometheus_cli.cli.commands import APP_STORE_COMMANDS

    parser = argparse.ArgumentParser(
        prog="app-store-cli",
        description="Publish, audit and manage apps on the Prometheus App Store.",
    )
    add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for module in APP_STORE_COMMANDS:
        module.register(subparsers)
    doctor.register(subparsers)
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def dispatch(
    parser: argparse.ArgumentParser,
    argv: list[str] | None,
    context: CommandContext | None,
) -> int:
    """Parse *argv* and run the selected handler."""
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return exit_codes.SUCCESS

    ctx = context if context is not None else CommandContext(args.network)
    logger.debug("Running %s on network %s", args.command, ctx.network)
    return handler(args, ctx)


def main(argv: list[str] | None = None, *, context: CommandContext | None = None) -> int:
    """Run the ``app-store-cli`` CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    context:
        Pre-built collaborators.  Tests pass a context holding a mock
        gateway; normally one is built from ``--network``.

    Returns
    -------
    int
        OS process exit code.
    """
    return dispatch(_build_parser(), argv, context)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def run_guarded(entry: Callable[[], int]) -> None:
    """Run *entry* and exit with its code, rendering any error cleanly.

    This guarantees the process never exits with a raw stack trace
    during normal usage.
    """
    try:
        code = entry()
        sys.exit(code)
    except PrometheusCliError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(exc)}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unhandled exception", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(exc)}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)


def cli() -> None:
    """Top-level error boundary invoked by the ``app-store-cli`` script."""
    run_guarded(main)
