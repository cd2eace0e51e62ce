"""Exit-code constants shared by ``app-store-cli`` and ``auth-cli``.

Every exit path uses one of these values rather than a magic integer.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed (including a user-cancelled confirmation)."""

GENERAL_ERROR: int = 1
"""A known PrometheusCliError was caught and its message displayed."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""
