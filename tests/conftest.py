"""Shared pytest fixtures and configuration for the prometheus-cli test suite.

Guidelines
----------
* No network access in any test.
* The canister gateway is always a mock; ic-py is never imported.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state (dfx, git, docker are patched).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.settings import AppSettings

CALLER = "2vxsx-fae"

CANISTER_IDS: dict[str, str] = {
    "MCP_REGISTRY": "registry-id",
    "MCP_ORCHESTRATOR": "orchestrator-id",
    "AUTH_SERVER": "auth-id",
    "AUDIT_HUB": "audit-hub-id",
    "APP_BOUNTIES": "app-bounties-id",
    "LEADERBOARD": "leaderboard-id",
    "USAGE_TRACKER": "usage-tracker-id",
}


def calls_to(gateway: MagicMock, method: str) -> list[tuple[Any, ...]]:
    """Return ``(canister_id, interface, *args)`` of every call to *method*."""
    found = []
    for call in gateway.call.call_args_list:
        canister_id, interface, called, *args = call.args
        if called == method:
            found.append((canister_id, interface, *args))
    return found


@pytest.fixture
def gateway() -> MagicMock:
    """Mock :class:`CanisterGateway` answering from ``gateway.responses``.

    ``responses`` maps a method name to a return value, or to a callable
    receiving the call arguments.  Unknown methods return ``None``.
    """
    mock = MagicMock()
    mock.principal = CALLER
    mock.responses = {}

    def _route(canister_id: str, interface: str, method: str, *args: Any) -> Any:
        response = mock.responses.get(method)
        return response(*args) if callable(response) else response

    mock.call.side_effect = _route
    mock.read_module_hash.return_value = None
    return mock


@pytest.fixture
def network_config() -> NetworkConfig:
    return NetworkConfig(network="ic", host="https://icp-api.io", canister_ids=CANISTER_IDS)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        identity="default",
        github_token=None,
        upgrade_poll_attempts=3,
        upgrade_poll_interval=0,
    )


@pytest.fixture
def ctx(
    tmp_path: Path,
    gateway: MagicMock,
    network_config: NetworkConfig,
    settings: AppSettings,
) -> CommandContext:
    """A command context rooted in *tmp_path* with the mock gateway."""
    return CommandContext(
        "ic",
        settings=settings,
        cwd=tmp_path,
        gateway=gateway,
        config=network_config,
    )


@pytest.fixture
def wasm_file(tmp_path: Path) -> Path:
    path = tmp_path / "out" / "out_Linux_x86_64.wasm"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x00asm\x01\x00\x00\x00" + b"\x01" * 56)
    return path


@pytest.fixture
def manifest(tmp_path: Path, wasm_file: Path) -> Path:
    """A complete ``prometheus.yml`` pointing at *wasm_file*."""
    from prometheus_cli.core.documents import new_manifest
    from prometheus_cli.infra.yaml_store import save_yaml

    data = new_manifest(
        namespace="com.example.app",
        name="Example App",
        publisher="Example Inc",
        category="Utilities",
        description="An example.",
        why_this_app="Because.",
        key_features=["fast"],
        tags=["demo"],
        repo_url="https://github.com/example/app",
        icon_url="https://example.com/icon.png",
        banner_url="https://example.com/banner.png",
    )
    data["submission"]["wasm_path"] = "./out/out_Linux_x86_64.wasm"
    data["submission"]["git_commit"] = "ab" * 20
    path = tmp_path / "prometheus.yml"
    save_yaml(path, data)
    return path


@pytest.fixture
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich tables on one line so cell text can be asserted."""
    from prometheus_cli.cli.console import get_rich_console

    monkeypatch.setattr(get_rich_console(), "width", 200)
