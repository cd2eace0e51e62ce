"""Sub-command modules.

Each module exposes ``register(subparsers)`` which adds its parsers and
binds a handler via ``set_defaults(handler=...)``.  A handler receives
the parsed arguments and the :class:`~prometheus_cli.cli.context.CommandContext`
and returns an exit code.
"""

from __future__ import annotations

from prometheus_cli.cli.commands import (
    api_keys,
    app_bounties,
    attest,
    bounty,
    canister,
    controller,
    dao,
    discover,
    leaderboard,
    project,
    publishing,
    version,
)

APP_STORE_COMMANDS = (
    project,
    publishing,
    discover,
    bounty,
    attest,
    dao,
    canister,
    controller,
    version,
    leaderboard,
    app_bounties,
    api_keys,
)
"""Command modules registered on ``app-store-cli``, in help order."""
