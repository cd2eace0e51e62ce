"""Infrastructure: detection of the external tools the CLI drives.

The build and release flows shell out to ``dfx``, ``git``, ``docker``
and ``docker-compose``.  This module only locates them; it never
installs anything.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from prometheus_cli.exceptions import EnvironmentCheckError

TOOLS: tuple[str, ...] = ("dfx", "git", "docker", "docker-compose")


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a PATH probe for one executable.

    Attributes
    ----------
    name : str
        Executable name.
    found : bool
        Whether it was located on PATH.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested install commands; empty when the tool is present.
    """

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]

    @property
    def summary(self) -> str:
        return f"found at {self.path}" if self.found else "not found"


def detect_tool(name: str) -> ToolStatus:
    """Probe PATH for *name*; never raises."""
    result = shutil.which(name)
    if result is not None:
        return ToolStatus(name=name, found=True, path=Path(result).resolve(), install_commands=())
    return ToolStatus(name=name, found=False, path=None, install_commands=install_commands(name))


def detect_all() -> list[ToolStatus]:
    return [detect_tool(name) for name in TOOLS]


def require_tool(name: str) -> Path:
    """Locate *name* or raise :class:`EnvironmentCheckError` with install guidance."""
    status = detect_tool(name)
    if not status.found or status.path is None:
        hint_lines = [f"Install {name} using one of:"]
        hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise EnvironmentCheckError(
            f"{name} is not installed or not on PATH.",
            hint="\n".join(hint_lines),
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def install_commands(name: str) -> tuple[str, ...]:
    """Return install suggestions for *name* on the current OS."""
    if name == "dfx":
        return ('sh -ci "$(curl -fsSL https://internetcomputer.org/install.sh)"',)

    system = platform.system().lower()
    if name == "git":
        if system == "darwin":
            return ("brew install git",)
        if system == "windows":
            return ("winget install Git.Git",)
        return ("sudo apt install git", "sudo dnf install git")

    if name in ("docker", "docker-compose"):
        if system == "linux":
            return ("sudo apt install docker.io docker-compose", "https://docs.docker.com/engine/install/")
        return ("https://docs.docker.com/get-docker/",)

    return ()
