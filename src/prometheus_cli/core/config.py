"""Network configuration passed explicitly to every service.

A :class:`NetworkConfig` is built once per CLI invocation (by the infra
layer, from ``canister_ids.json`` files and the environment) and handed to
service constructors.  Nothing in the core reads global state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from prometheus_cli.exceptions import ConfigurationError

IC_NETWORK = "ic"
LOCAL_NETWORK = "local"
NETWORKS: tuple[str, ...] = (IC_NETWORK, LOCAL_NETWORK)

CANISTER_NAMES: tuple[str, ...] = (
    "MCP_REGISTRY",
    "MCP_ORCHESTRATOR",
    "AUTH_SERVER",
    "AUDIT_HUB",
    "APP_BOUNTIES",
    "LEADERBOARD",
    "SEARCH_INDEX",
    "USAGE_TRACKER",
    "TOKEN_WATCHLIST",
)
"""Canister names the tools address, in upper-case key form."""


def validate_network(network: str) -> str:
    """Return *network* unchanged or raise :class:`ConfigurationError`."""
    if network not in NETWORKS:
        raise ConfigurationError(
            f"Invalid network specified: '{network}'. Use 'ic' or 'local'.",
        )
    return network


@dataclass(frozen=True, slots=True)
class NetworkConfig:
    """Immutable description of the network the tools talk to."""

    network: str
    """Either ``"ic"`` or ``"local"``."""

    host: str
    """Replica URL used by the agent."""

    canister_ids: Mapping[str, str] = field(default_factory=dict)
    """Upper-cased canister name → canister ID text."""

    def __post_init__(self) -> None:
        validate_network(self.network)
        normalised = {name.upper(): cid for name, cid in self.canister_ids.items()}
        object.__setattr__(self, "canister_ids", MappingProxyType(normalised))

    @property
    def is_local(self) -> bool:
        return self.network == LOCAL_NETWORK

    def canister_id(self, name: str) -> str:
        """Return the canister ID registered under *name* (case-insensitive).

        Raises
        ------
        ConfigurationError
            If no ID is configured at all, or none for *name*.
        """
        if not self.canister_ids:
            raise ConfigurationError(
                "Canister IDs have not been configured.",
                hint=(
                    "Set PROMETHEUS_CANISTER_IDS_FILE to a canister_ids.json, "
                    "or use --network local after 'dfx deploy'."
                ),
            )
        key = name.upper()
        try:
            return self.canister_ids[key]
        except KeyError:
            raise ConfigurationError(
                f"Configuration does not contain a canister ID for '{key}'.",
            ) from None

    def frontend_url(self, canister_id: str) -> str:
        """Return the browser URL of a canister on this network."""
        if self.is_local:
            return f"{self.host}/?canisterId={canister_id}"
        return f"https://{canister_id}.icp0.io"
