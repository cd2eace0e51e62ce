"""Shared plumbing for the canister service classes.

Each service wraps one remote interface.  It depends on a
:class:`~prometheus_cli.core.protocols.CanisterGateway` and a
:class:`~prometheus_cli.core.config.NetworkConfig` injected at
construction time, keeping the core free of transport imports.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.core.protocols import CanisterGateway
from prometheus_cli.exceptions import PrometheusCliError, RemoteCallError

logger = logging.getLogger(__name__)


class CanisterService:
    """Base class binding a gateway to one remote interface.

    Parameters
    ----------
    gateway:
        Any object satisfying the :class:`CanisterGateway` protocol.
    config:
        Network configuration used to resolve canister IDs.
    """

    interface: ClassVar[str]
    """Name of the interface declaration used for encoding."""

    canister_name: ClassVar[str | None] = None
    """Configured canister name; ``None`` when the target is per call."""

    def __init__(self, gateway: CanisterGateway, config: NetworkConfig) -> None:
        self._gateway: CanisterGateway = gateway
        self._config: NetworkConfig = config

    @property
    def canister_id(self) -> str:
        """ID of the canister this service talks to."""
        if self.canister_name is None:
            raise RemoteCallError(
                f"{type(self).__name__} has no default canister; pass one explicitly.",
            )
        return self._config.canister_id(self.canister_name)

    # ------------------------------------------------------------------
    # Gateway delegation (safe boundary)
    # ------------------------------------------------------------------

    def _call(
        self,
        method: str,
        *args: Any,
        canister_id: str | None = None,
        interface: str | None = None,
    ) -> Any:
        """Call the gateway and ensure only our exceptions escape."""
        target = canister_id or self.canister_id
        declared = interface or self.interface
        logger.debug("Calling %s.%s on %s", declared, method, target)
        try:
            return self._gateway.call(target, declared, method, *args)
        except PrometheusCliError:
            # Already a PrometheusCliError; propagate unchanged.
            raise
        except Exception as exc:
            raise RemoteCallError(
                f"Unexpected error calling {method}: {exc}",
            ) from exc
