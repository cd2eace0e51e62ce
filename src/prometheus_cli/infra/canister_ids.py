"""Resolution of canister IDs into a :class:`~prometheus_cli.core.config.NetworkConfig`.

* ``ic`` — a dfx-format ``canister_ids.json`` named by
  ``PROMETHEUS_CANISTER_IDS_FILE`` plus ``CANISTER_ID_<NAME>`` overrides.
* ``local`` — ``.dfx/local/canister_ids.json`` found by walking up from
  the working directory (written by ``dfx deploy``).
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from prometheus_cli.core.config import CANISTER_NAMES, IC_NETWORK, NetworkConfig, validate_network
from prometheus_cli.exceptions import ConfigurationError
from prometheus_cli.settings import AppSettings

logger = logging.getLogger(__name__)

_ENV_PREFIX = "CANISTER_ID_"


def read_canister_ids_file(path: Path, network: str) -> dict[str, str]:
    """Parse a dfx ``canister_ids.json`` (``{name: {network: id}}``).

    Entries without an ID for *network* are skipped.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object.")

    ids: dict[str, str] = {}
    for name, networks in data.items():
        if isinstance(networks, dict) and networks.get(network):
            ids[name.upper()] = str(networks[network])
    return ids


def env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect ``CANISTER_ID_<NAME>`` variables for the known canister names."""
    overrides: dict[str, str] = {}
    for name in CANISTER_NAMES:
        value = environ.get(f"{_ENV_PREFIX}{name}")
        if value:
            overrides[name] = value
    return overrides


def find_local_canister_ids(start: Path) -> Path | None:
    """Walk up from *start* looking for ``.dfx/local/canister_ids.json``."""
    for directory in (start, *start.parents):
        candidate = directory / ".dfx" / "local" / "canister_ids.json"
        if candidate.is_file():
            return candidate
    return None


def resolve_network_config(
    network: str,
    settings: AppSettings,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> NetworkConfig:
    """Build the :class:`NetworkConfig` for *network*.

    Raises
    ------
    ConfigurationError
        For an unknown network, a missing local ``canister_ids.json`` or
        an unreadable IDs file.
    """
    validate_network(network)
    env = os.environ if environ is None else environ

    if network == IC_NETWORK:
        ids: dict[str, str] = {}
        if settings.canister_ids_file is not None:
            ids.update(read_canister_ids_file(settings.canister_ids_file.expanduser(), network))
        ids.update(env_overrides(env))
        logger.debug("Resolved %d canister ID(s) for network 'ic'", len(ids))
        return NetworkConfig(network=network, host=settings.ic_host, canister_ids=ids)

    ids_path = find_local_canister_ids(cwd or Path.cwd())
    if ids_path is None:
        raise ConfigurationError(
            "Could not find local canister_ids.json in .dfx/local.",
            hint="Run 'dfx deploy' first.",
        )
    ids = read_canister_ids_file(ids_path, network)
    ids.update(env_overrides(env))
    logger.debug("Resolved %d canister ID(s) for network 'local' from %s", len(ids), ids_path)
    return NetworkConfig(network=network, host=settings.local_host, canister_ids=ids)
