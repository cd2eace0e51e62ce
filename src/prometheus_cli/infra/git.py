"""Infrastructure: the git steps of a release.

Every command runs in the project root through
:func:`~prometheus_cli.infra.process.run_command` and fails with
:class:`~prometheus_cli.exceptions.GitError`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from prometheus_cli.exceptions import GitError
from prometheus_cli.infra.process import run_command
from prometheus_cli.infra.tools import require_tool

logger = logging.getLogger(__name__)


def ensure_repository(root: Path) -> None:
    require_tool("git")
    try:
        run_command(["git", "rev-parse", "--git-dir"], error_cls=GitError, cwd=root)
    except GitError as exc:
        raise GitError("Not in a git repository.") from exc


def ensure_clean(root: Path) -> None:
    """Raise :class:`GitError` if the working tree has uncommitted changes."""
    try:
        run_command(["git", "diff-index", "--quiet", "HEAD", "--"], error_cls=GitError, cwd=root)
    except GitError as exc:
        raise GitError(
            "You have uncommitted changes.",
            hint="Please commit or stash them before releasing.",
        ) from exc


def add(root: Path, *paths: Path) -> None:
    run_command(["git", "add", *(str(p) for p in paths)], error_cls=GitError, cwd=root)


def commit(root: Path, message: str) -> bool:
    """Commit the staged changes; returns ``False`` when nothing was staged."""
    staged = run_command(["git", "diff", "--cached", "--name-only"], error_cls=GitError, cwd=root)
    if not staged:
        logger.debug("Nothing staged; skipping commit '%s'", message)
        return False
    run_command(["git", "commit", "-m", message], error_cls=GitError, cwd=root)
    return True


def push(root: Path) -> None:
    run_command(["git", "push"], error_cls=GitError, cwd=root)


def head_commit(root: Path) -> str:
    return run_command(["git", "rev-parse", "HEAD"], error_cls=GitError, cwd=root)

