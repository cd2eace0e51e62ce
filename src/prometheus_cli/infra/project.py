"""Infrastructure: locating a dfx project and its Prometheus canisters.

A project root is the nearest directory holding ``dfx.json``.  In a
monorepo each published canister has its own ``prometheus.yml``,
found by walking up from the canister's ``main`` file.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from prometheus_cli.core.documents import MANIFEST_FILE
from prometheus_cli.exceptions import BuildError, ManifestError

_MOC_VERSION = re.compile(r'moc\s*=\s*"([^"]+)"')
_MAIN_MO_VERSION = re.compile(r'version = "([^"]+)"')

MOPS_TOML_HINT = '[toolchain]\nmoc = "0.16.0"  # Replace with your desired version'


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Where a build or release happens.

    Attributes
    ----------
    root : Path
        Directory holding ``dfx.json``.
    canister_dir : Path
        Directory holding the canister's ``prometheus.yml``.
    canister : str | None
        dfx canister name, when one was requested.
    """

    root: Path
    canister_dir: Path
    canister: str | None = None

    @property
    def manifest_path(self) -> Path:
        return self.canister_dir / MANIFEST_FILE


def find_project_root(start: Path) -> Path:
    """Walk up from *start* to the directory holding ``dfx.json``.

    Raises
    ------
    BuildError
        If no ``dfx.json`` is found.
    """
    for directory in (start, *start.parents):
        if (directory / "dfx.json").is_file():
            return directory
    raise BuildError(
        "dfx.json not found. Please run this command from your IC project directory.",
    )


def resolve_layout(start: Path, canister: str | None = None) -> ProjectLayout:
    """Resolve the project root and, for *canister*, its manifest directory.

    Without a canister name the working directory is the canister
    directory.
    """
    root = find_project_root(start)
    if canister is None:
        return ProjectLayout(root=root, canister_dir=start)

    try:
        dfx_json = json.loads((root / "dfx.json").read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise BuildError(f"Could not read dfx.json: {exc}") from exc

    config = (dfx_json.get("canisters") or {}).get(canister)
    if not config:
        raise BuildError(f"Canister '{canister}' not found in dfx.json")
    main = config.get("main")
    if not main:
        raise BuildError(f"Canister '{canister}' has no 'main' field in dfx.json")

    main_dir = (root / main).parent
    directory = main_dir
    while directory != root and directory != directory.parent:
        if (directory / MANIFEST_FILE).is_file():
            return ProjectLayout(root=root, canister_dir=directory, canister=canister)
        directory = directory.parent
    if (root / MANIFEST_FILE).is_file():
        return ProjectLayout(root=root, canister_dir=root, canister=canister)
    raise ManifestError(
        f"{MANIFEST_FILE} not found for canister '{canister}'",
        hint=f"Searched from {main_dir} up to {root}",
    )


def read_moc_version(root: Path) -> str:
    """Return the ``moc`` toolchain version pinned in ``mops.toml``.

    Raises
    ------
    BuildError
        If ``mops.toml`` is missing or does not pin ``moc``.
    """
    mops_toml = root / "mops.toml"
    if not mops_toml.is_file():
        raise BuildError(
            "mops.toml not found in project root. Please create one with your toolchain version.",
            hint=MOPS_TOML_HINT,
        )
    match = _MOC_VERSION.search(mops_toml.read_text(encoding="utf-8"))
    if match is None:
        raise BuildError(
            "Could not find moc version in mops.toml.",
            hint=MOPS_TOML_HINT,
        )
    return match.group(1)


def bump_main_mo_version(canister_dir: Path, version: str) -> tuple[Path, str] | None:
    """Rewrite ``version = "..."`` in ``src/main.mo``.

    Returns ``(path, previous_version)``, or ``None`` when the canister
    has no ``src/main.mo``.  ``previous_version`` is ``"unknown"`` when
    the file has no version string.
    """
    main_mo = canister_dir / "src" / "main.mo"
    if not main_mo.is_file():
        return None
    content = main_mo.read_text(encoding="utf-8")
    match = _MAIN_MO_VERSION.search(content)
    previous = match.group(1) if match else "unknown"
    main_mo.write_text(
        _MAIN_MO_VERSION.sub(f'version = "{version}"', content, count=1),
        encoding="utf-8",
    )
    return main_mo, previous
