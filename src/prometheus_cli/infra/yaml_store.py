"""Reading and writing the YAML documents the CLI works with.

This module is the **only** place that imports ``yaml``.  Parser errors
are re-raised as :class:`~prometheus_cli.exceptions.ManifestError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from prometheus_cli.exceptions import ManifestError


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from *path*.

    Raises
    ------
    ManifestError
        If the file is missing, unreadable, malformed, or not a mapping.
    """
    if not path.is_file():
        raise ManifestError(f"File not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ManifestError(f"Could not parse {path.name}: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Could not read {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(f"{path.name} must contain a YAML mapping.")
    return data


def dump_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, width=100)


def save_yaml(path: Path, data: dict[str, Any], *, header: str | None = None) -> None:
    """Write *data* to *path*, preceded by an optional comment *header*."""
    text = dump_yaml(data)
    if header:
        text = f"{header.rstrip()}\n\n{text}"
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Could not write {path}: {exc}") from exc
