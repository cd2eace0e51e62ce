"""Allow ``python -m prometheus_cli`` invocation.

Delegates to the ``app-store-cli`` error-boundary entry point.
"""

from __future__ import annotations

from prometheus_cli.cli.app import cli

if __name__ == "__main__":
    cli()
