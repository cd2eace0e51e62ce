"""``app-store-cli doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can build, publish and talk to the
network.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import argparse
import platform
import sys
from importlib import metadata
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.exceptions import PrometheusCliError
from prometheus_cli.infra.tools import ToolStatus, detect_all
from prometheus_cli.version import __version__

Check = tuple[str, str, str]

# Tools the build can live without.
_OPTIONAL_TOOLS = frozenset({"docker-compose"})


def register(subparsers: Any) -> None:
    doctor = subparsers.add_parser("doctor", help="Check the local environment.")
    doctor.set_defaults(handler=_handle_doctor)


def _handle_doctor(args: argparse.Namespace, ctx: CommandContext) -> int:
    return run_doctor(ctx)


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = major >= 3 and minor >= 10
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _icpy_version_check() -> Check:
    """Return (label, value, status) for the ic-py row."""
    try:
        import ic  # noqa: F401
    except ImportError:
        return "ic-py", "NOT INSTALLED", "[red]FAIL[/red]"
    try:
        return "ic-py", metadata.version("ic-py"), "[green]OK[/green]"
    except metadata.PackageNotFoundError:
        return "ic-py", "unknown", "[green]OK[/green]"


def _tool_check(status: ToolStatus) -> Check:
    if status.found:
        return status.name, str(status.path) if status.path else "found", "[green]OK[/green]"
    if status.name in _OPTIONAL_TOOLS:
        return status.name, "not found", "[yellow]WARN[/yellow]"
    return status.name, "not found", "[red]FAIL[/red]"


def _network_check(ctx: CommandContext) -> Check:
    label = f"Network ({ctx.network})"
    try:
        config = ctx.config
    except PrometheusCliError as exc:
        return label, str(exc), "[yellow]WARN[/yellow]"
    missing = [name for name in ("MCP_REGISTRY", "AUDIT_HUB") if name not in config.canister_ids]
    if missing:
        return label, f"missing IDs: {', '.join(missing)}", "[yellow]WARN[/yellow]"
    return label, f"{config.host} ({len(config.canister_ids)} canisters)", "[green]OK[/green]"


def _os_check() -> Check:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _version_check() -> Check:
    return "prometheus-cli", __version__, "[green]OK[/green]"


# ---------------------------------------------------------------------------
# Plain rendering (no Rich)
# ---------------------------------------------------------------------------

def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    print("\nprometheus-cli doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<44} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<44} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(ctx: CommandContext) -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    tools = detect_all()
    checks = [
        _version_check(),
        _python_version_check(),
        _icpy_version_check(),
        *(_tool_check(status) for status in tools),
        _os_check(),
        _network_check(ctx),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="prometheus-cli doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    for status in tools:
        if not status.found and status.install_commands:
            if rich_available:
                console.print(f"[yellow]{status.name} is not installed.[/yellow]")
                console.print("Install using one of the following commands:\n")
                for cmd in status.install_commands:
                    console.print(f"  [bold]{cmd}[/bold]")
                console.print()
            else:
                print(f"{status.name} is not installed.", file=sys.stderr)
                print("Install using one of the following commands:\n", file=sys.stderr)
                for cmd in status.install_commands:
                    print(f"  {cmd}", file=sys.stderr)
                print(file=sys.stderr)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
