"""Orchestrator and usage-tracker services — canister upgrades and registration."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.models import UpgradeStatus
from prometheus_cli.core.results import describe_error, error_payload, unwrap
from prometheus_cli.exceptions import RemoteCallError, UpgradeTimeoutError, ValidationError

logger = logging.getLogger(__name__)

UPGRADE_MODES: tuple[str, ...] = ("install", "reinstall", "upgrade")


def upgrade_mode(mode: str, *, skip_pre_upgrade: bool = False) -> dict[str, Any]:
    """Build the Candid ``mode`` variant for an upgrade request."""
    if mode not in UPGRADE_MODES:
        raise ValidationError(
            f"Invalid upgrade mode '{mode}'.",
            hint=f"Use one of: {', '.join(UPGRADE_MODES)}",
        )
    if mode != "upgrade":
        return {mode: None}
    return {
        "upgrade": [
            {
                "skip_pre_upgrade": [skip_pre_upgrade],
                "wasm_memory_persistence": [{"keep": None}],
            },
        ],
    }


class OrchestratorService(CanisterService):
    """Client for the ``MCP_ORCHESTRATOR`` canister (ICRC-120)."""

    interface = "mcp_orchestrator"
    canister_name = "MCP_ORCHESTRATOR"

    def request_upgrade(
        self,
        *,
        canister_id: str,
        wasm_hash: bytes,
        mode: str = "upgrade",
        arg: bytes = b"",
        skip_pre_upgrade: bool = False,
    ) -> int:
        """Ask the orchestrator to move *canister_id* to *wasm_hash*.

        Returns the orchestrator's request ID.
        """
        results = self._call(
            "icrc120_upgrade_to",
            [
                {
                    "canister_id": canister_id,
                    "hash": wasm_hash,
                    "mode": upgrade_mode(mode, skip_pre_upgrade=skip_pre_upgrade),
                    "args": arg,
                    "stop": False,
                    "restart": False,
                    "snapshot": False,
                    "timeout": 0,
                    "parameters": [],
                },
            ],
        )
        if not results:
            raise RemoteCallError("Upgrade request returned no result.")
        error = error_payload(results[0])
        if error is not None:
            raise RemoteCallError(f"Upgrade request failed: {describe_error(error)}")
        return int(results[0]["Ok"])

    def get_upgrade_status(self) -> UpgradeStatus:
        raw = self._call("icrc120_upgrade_finished")
        (state, payload), = raw.items()
        if state == "Failed":
            timestamp, reason = payload
            return UpgradeStatus(state=state, timestamp=int(timestamp), reason=str(reason))
        return UpgradeStatus(state=state, timestamp=int(payload))

    def wait_for_upgrade(
        self,
        *,
        attempts: int,
        interval: float,
        sleep: Callable[[float], None] = time.sleep,
        on_poll: Callable[[int, UpgradeStatus], None] | None = None,
    ) -> UpgradeStatus:
        """Poll :meth:`get_upgrade_status` until the upgrade finishes.

        Parameters
        ----------
        attempts:
            Maximum number of status checks.
        interval:
            Seconds to wait between checks.
        sleep:
            Injected for tests.
        on_poll:
            Called with ``(attempt, status)`` after every check.

        Raises
        ------
        UpgradeTimeoutError
            If the upgrade is still in progress after *attempts* checks.
        """
        for attempt in range(1, attempts + 1):
            status = self.get_upgrade_status()
            logger.debug("Upgrade poll %d/%d: %s", attempt, attempts, status.state)
            if on_poll is not None:
                on_poll(attempt, status)
            if status.finished:
                return status
            if attempt < attempts:
                sleep(interval)
        raise UpgradeTimeoutError(
            f"Upgrade still in progress after {attempts} checks.",
            hint="Run 'app-store-cli canister status' again later.",
        )


class UsageTrackerService(CanisterService):
    """Client for the ``USAGE_TRACKER`` canister."""

    interface = "usage_tracker"
    canister_name = "USAGE_TRACKER"

    def register_canister(self, canister_id: str, namespace: str) -> None:
        """Link a deployed canister to its App Store namespace."""
        result = self._call("register_canister_namespace", canister_id, namespace)
        unwrap(result, action="Failed to register canister")
