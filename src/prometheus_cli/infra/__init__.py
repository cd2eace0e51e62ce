"""Infrastructure layer — external system integration.

This layer wraps all interaction with ic-py, dfx identity files, YAML
documents, git and docker.  Every raw third-party exception must be
caught here and re-raised as a
:class:`~prometheus_cli.exceptions.PrometheusCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from prometheus_cli.infra.canister_ids import resolve_network_config
from prometheus_cli.infra.dfx import current_identity_name, load_dfx_identity
from prometheus_cli.infra.ic_agent import IcAgentGateway
from prometheus_cli.infra.tools import ToolStatus, detect_tool, require_tool
from prometheus_cli.infra.yaml_store import load_yaml, save_yaml

__all__: list[str] = [
    "IcAgentGateway",
    "ToolStatus",
    "current_identity_name",
    "detect_tool",
    "load_dfx_identity",
    "load_yaml",
    "require_tool",
    "resolve_network_config",
    "save_yaml",
]
