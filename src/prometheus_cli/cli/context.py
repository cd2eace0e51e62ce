"""Per-invocation wiring of settings, network configuration and services.

One :class:`CommandContext` is built for each CLI run.  Everything
expensive — resolving canister IDs, loading the dfx identity, creating
the ic-py agent — happens lazily on first use, so commands that never
touch the network (``init``, ``build``, ``attest generate``) never pay
for it.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any

from prometheus_cli.core.api_key_service import ApiKeyService
from prometheus_cli.core.app_bounty_service import AppBountyService
from prometheus_cli.core.audit_service import AuditService
from prometheus_cli.core.auth_service import AuthService
from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.core.documents import MANIFEST_FILE, require_namespace
from prometheus_cli.core.leaderboard_service import LeaderboardService
from prometheus_cli.core.orchestrator_service import OrchestratorService, UsageTrackerService
from prometheus_cli.core.payment_service import PaymentService
from prometheus_cli.core.protocols import CanisterGateway
from prometheus_cli.core.registry_service import RegistryService
from prometheus_cli.core.tokens import Token, default_tokens, find_token
from prometheus_cli.exceptions import ManifestError
from prometheus_cli.settings import AppSettings, load_settings


class CommandContext:
    """Lazily built collaborators shared by the command handlers.

    Parameters
    ----------
    network:
        ``"ic"`` or ``"local"``.
    settings:
        Environment settings; loaded from the environment when omitted.
    cwd:
        Directory commands treat as the project directory.
    gateway, config:
        Pre-built collaborators, mainly for tests.
    """

    def __init__(
        self,
        network: str = "ic",
        *,
        settings: AppSettings | None = None,
        cwd: Path | None = None,
        gateway: CanisterGateway | None = None,
        config: NetworkConfig | None = None,
    ) -> None:
        self.network = network
        self.settings = settings if settings is not None else load_settings()
        self.cwd = cwd or Path.cwd()
        self._gateway = gateway
        self._config = config
        self._identity_name: str | None = None

    # ------------------------------------------------------------------
    # Network & identity
    # ------------------------------------------------------------------

    @property
    def config(self) -> NetworkConfig:
        if self._config is None:
            from prometheus_cli.infra.canister_ids import resolve_network_config

            self._config = resolve_network_config(self.network, self.settings, cwd=self.cwd)
        return self._config

    @property
    def identity_name(self) -> str:
        if self._identity_name is None:
            from prometheus_cli.infra.dfx import current_identity_name

            self._identity_name = current_identity_name(self.settings)
        return self._identity_name

    @property
    def gateway(self) -> CanisterGateway:
        """The ic-py gateway signed by the current dfx identity."""
        if self._gateway is None:
            from prometheus_cli.infra.dfx import load_dfx_identity
            from prometheus_cli.infra.ic_agent import IcAgentGateway

            key = load_dfx_identity(self.identity_name, self.settings)
            self._gateway = IcAgentGateway(key, host=self.config.host)
        return self._gateway

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def registry(self) -> RegistryService:
        return RegistryService(self.gateway, self.config)

    def audit(self) -> AuditService:
        return AuditService(self.gateway, self.config)

    def orchestrator(self) -> OrchestratorService:
        return OrchestratorService(self.gateway, self.config)

    def usage_tracker(self) -> UsageTrackerService:
        return UsageTrackerService(self.gateway, self.config)

    def payments(self, token: Token) -> PaymentService:
        return PaymentService(self.gateway, self.config, token)

    def app_bounties(self) -> AppBountyService:
        return AppBountyService(self.gateway, self.config)

    def leaderboard(self) -> LeaderboardService:
        return LeaderboardService(self.gateway, self.config)

    def auth(self) -> AuthService:
        return AuthService(self.gateway, self.config)

    def api_keys(self) -> ApiKeyService:
        return ApiKeyService(self.gateway, self.config)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    @functools.cached_property
    def tokens(self) -> dict[str, Token]:
        return default_tokens(self.settings.usdc_ledger_canister_id)

    def token(self, symbol: str) -> Token:
        return find_token(self.tokens, symbol)

    # ------------------------------------------------------------------
    # Project manifest
    # ------------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        return self.cwd / MANIFEST_FILE

    def load_manifest(self) -> dict[str, Any]:
        """Load ``prometheus.yml`` from the project directory.

        Raises
        ------
        ManifestError
            If the file is missing or malformed.
        """
        from prometheus_cli.infra.yaml_store import load_yaml

        if not self.manifest_path.is_file():
            raise ManifestError(
                f"{MANIFEST_FILE} not found.",
                hint="Run 'app-store-cli init' first.",
            )
        return load_yaml(self.manifest_path)

    def namespace(self, explicit: str | None = None) -> str:
        """Return *explicit*, else the namespace declared in the manifest."""
        if explicit:
            return explicit
        if not self.manifest_path.is_file():
            raise ManifestError(
                f"Namespace not provided and {MANIFEST_FILE} not found.",
                hint="Pass the namespace as an argument or run this command from your project root.",
            )
        return require_namespace(self.load_manifest())

    def resolve_path(self, value: str) -> Path:
        """Resolve *value* relative to the project directory."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else (self.cwd / path).resolve()
