"""Thin subprocess wrapper shared by the dfx, git and docker adapters.

``FileNotFoundError`` and non-zero exits are translated into the typed
error class chosen by the caller, so no raw ``subprocess`` exception
leaves the infrastructure layer.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from prometheus_cli.exceptions import EnvironmentError, PrometheusCliError

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str],
    *,
    error_cls: type[PrometheusCliError],
    cwd: Path | None = None,
    capture: bool = True,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run *args* and return its stripped stdout (``""`` when not captured).

    Parameters
    ----------
    error_cls:
        Raised (with stderr in the message) when the command exits non-zero.
    capture:
        When ``False`` the child inherits the terminal, which is what
        long-running docker builds need.

    Raises
    ------
    EnvironmentError
        If the executable is not on PATH.
    KeyboardInterrupt
        Propagated unchanged when the child was interrupted (exit 130).
    """
    logger.debug("Running %s (cwd=%s)", " ".join(args), cwd or ".")
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            check=True,
            text=True,
            capture_output=capture,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as exc:
        raise EnvironmentError(
            f"'{args[0]}' is not installed or not on PATH.",
            hint="Run 'app-store-cli doctor' to check your environment.",
        ) from exc
    except subprocess.CalledProcessError as exc:
        if exc.returncode == 130:
            raise KeyboardInterrupt from exc
        detail = (exc.stderr or exc.stdout or "").strip()
        message = f"Command '{' '.join(args)}' failed with exit code {exc.returncode}."
        if detail:
            message = f"{message}\n{detail}"
        raise error_cls(message) from exc
    return (completed.stdout or "").strip() if capture else ""
