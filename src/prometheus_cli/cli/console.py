"""CLI console, table and logging helpers.

Rich is imported lazily so that ``--help`` and ``--version`` keep
working even when it is missing from the environment.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Any

from prometheus_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


@functools.lru_cache(maxsize=1)
def get_rich_console() -> Any:
    """Return the shared Rich console targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True, highlight=False)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


def escape(text: object) -> str:
    """Escape Rich markup in text that did not come from us.

    Remote error messages, paths and user input may contain square
    brackets that Rich would otherwise parse as style tags.  Without
    Rich the proxy prints plain text, so nothing needs escaping.
    """
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return str(text)
    return rich_escape(str(text))


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def new_table(title: str, *columns: str) -> Any:
    """Create a Rich table with the house style and the given columns."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    table = Table(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    for column in columns:
        table.add_column(column)
    return table


def shorten(value: str, width: int = 16) -> str:
    """Abbreviate long hashes and principals for table cells."""
    return value if len(value) <= width else f"{value[:width]}..."


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool = False) -> None:
    """Route ``logging`` records through Rich on stderr.

    WARNING and above by default; ``--verbose`` switches to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    try:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            console=get_rich_console(),
            show_path=verbose,
            rich_tracebacks=verbose,
        )
        fmt = "%(message)s"
    except (ModuleNotFoundError, EnvironmentError):
        handler = logging.StreamHandler(sys.stderr)
        fmt = "%(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=level, format=fmt, handlers=[handler], force=True)
