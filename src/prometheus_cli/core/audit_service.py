"""Audit service — verification status, ICRC-127 bounties and attestations.

Bounty records and attestations live on the ``MCP_REGISTRY`` canister;
reservations (locks and stake requirements) live on ``AUDIT_HUB``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.icrc16 import deserialize_map, deserialize_value, serialize_map
from prometheus_cli.core.models import (
    AuditRecord,
    Bounty,
    BountyLock,
    PrincipalText,
    StakeRequirement,
    VerificationRequest,
    VerificationStatus,
)
from prometheus_cli.core.results import describe_error, error_payload, option, unwrap, unwrap_option
from prometheus_cli.exceptions import RemoteCallError

logger = logging.getLogger(__name__)

_NANOS_PER_DAY = 86_400 * 1_000_000_000

BOUNTY_STATUSES: tuple[str, ...] = ("Open", "Claimed")


class AuditService(CanisterService):
    """Client for auditing workflows spanning the registry and audit hub."""

    interface = "mcp_registry"
    canister_name = "MCP_REGISTRY"

    @property
    def audit_hub_id(self) -> str:
        return self._config.canister_id("AUDIT_HUB")

    def _hub_call(self, method: str, *args: Any) -> Any:
        return self._call(method, *args, canister_id=self.audit_hub_id, interface="audit_hub")

    # ------------------------------------------------------------------
    # Verification status
    # ------------------------------------------------------------------

    def get_verification_status(self, wasm_hash: str) -> VerificationStatus:
        """Collect everything the registry knows about *wasm_hash*."""
        is_verified = bool(self._call("is_wasm_verified", wasm_hash))
        raw_request = unwrap_option(self._call("get_verification_request", wasm_hash))
        request = self._parse_request(raw_request) if raw_request else None
        return VerificationStatus(
            wasm_hash=wasm_hash,
            is_verified=is_verified,
            request=request,
            audit_records=tuple(self.get_audit_records_for_wasm(wasm_hash)),
            bounties=tuple(
                self._parse_bounty(raw)
                for raw in self._call("get_bounties_for_wasm", wasm_hash)
            ),
        )

    def get_audit_records_for_wasm(self, wasm_hash: str) -> list[AuditRecord]:
        records = self._call("get_audit_records_for_wasm", wasm_hash)
        return [self._parse_audit_record(record) for record in records]

    # ------------------------------------------------------------------
    # Bounties
    # ------------------------------------------------------------------

    def create_bounty(
        self,
        *,
        wasm_hash: bytes,
        audit_type: str,
        token_canister_id: str,
        amount: int,
        timeout_days: int = 30,
        now_ns: int | None = None,
    ) -> int:
        """Create an ICRC-127 bounty; returns the new bounty ID.

        The reward must already be approved as an allowance for the
        registry canister.
        """
        now = time.time_ns() if now_ns is None else now_ns
        result = self._call(
            "icrc127_create_bounty",
            {
                "challenge_parameters": {
                    "Map": serialize_map({"wasm_hash": wasm_hash, "audit_type": audit_type}),
                },
                "bounty_metadata": serialize_map(
                    {
                        "icrc127:reward_canister": PrincipalText(token_canister_id),
                        "icrc127:reward_amount": amount,
                    },
                ),
                "timeout_date": now + timeout_days * _NANOS_PER_DAY,
                "validation_canister_id": self.canister_id,
                "start_date": [],
                "bounty_id": [],
            },
        )
        created = unwrap(result, action="Failed to create bounty")
        return int(created["bounty_id"])

    def list_bounties(
        self,
        *,
        status: str | None = None,
        audit_type: str | None = None,
        creator: str | None = None,
        take: int | None = None,
        prev: int | None = None,
    ) -> list[Bounty]:
        """List bounties, optionally filtered by status, audit type or creator."""
        filters: list[dict[str, Any]] = []
        if status:
            filters.append({"status": {status: None}})
        if audit_type:
            filters.append({"audit_type": audit_type})
        if creator:
            filters.append({"creator": creator})
        result = self._call(
            "list_bounties",
            {
                "filter": option(filters or None),
                "take": option(take),
                "prev": option(prev),
            },
        )
        raw_bounties = unwrap(result, action="Failed to list bounties")
        return [self._parse_bounty(raw) for raw in raw_bounties]

    def get_bounty(self, bounty_id: int) -> Bounty | None:
        raw = unwrap_option(self._call("icrc127_get_bounty", bounty_id))
        return self._parse_bounty(raw) if raw else None

    def get_bounty_lock(self, bounty_id: int) -> BountyLock | None:
        raw = unwrap_option(self._hub_call("get_bounty_lock", bounty_id))
        if not raw:
            return None
        return BountyLock(
            claimant=str(raw["claimant"]),
            stake_token_id=str(raw["stake_token_id"]),
            stake_amount=int(raw["stake_amount"]),
            expires_at=int(raw["expires_at"]),
        )

    def get_stake_requirement(self, audit_type: str) -> StakeRequirement | None:
        raw = unwrap_option(self._hub_call("get_stake_requirement", audit_type))
        if not raw:
            return None
        token_id, amount = raw
        return StakeRequirement(token_id=str(token_id), amount=int(amount))

    def reserve_bounty(self, bounty_id: int, audit_type: str) -> None:
        """Lock *bounty_id* for the caller, staking the required tokens."""
        result = self._hub_call("reserve_bounty", bounty_id, audit_type)
        unwrap(result, action="Failed to reserve bounty")

    def claim_bounty(self, bounty_id: int, wasm_id: str) -> int:
        """Submit a claim against *bounty_id*; returns the claim ID."""
        result = self._call(
            "icrc127_submit_bounty",
            {
                "bounty_id": bounty_id,
                "submission": {"Map": serialize_map({"wasm_id": wasm_id})},
                "account": [{"owner": self._gateway.principal, "subaccount": []}],
            },
        )
        claim = unwrap(result, action="Failed to claim bounty")
        return int(claim["claim_id"])

    # ------------------------------------------------------------------
    # Attestations
    # ------------------------------------------------------------------

    def file_attestation(
        self,
        *,
        wasm_id: str,
        bounty_id: int,
        metadata: Mapping[str, Any],
    ) -> None:
        """File an ICRC-126 attestation tied to *bounty_id*."""
        entries = serialize_map(metadata)
        entries.append(("bounty_id", {"Nat": bounty_id}))
        result = self._call(
            "icrc126_file_attestation",
            {"wasm_id": wasm_id, "metadata": entries},
        )
        error = error_payload(result)
        if error is not None:
            raise RemoteCallError(f"Failed to file attestation: {describe_error(error)}")

    def submit_divergence(self, *, wasm_id: str, bounty_id: int, report: str) -> None:
        """Report that *wasm_id* could not be reproduced."""
        result = self._call(
            "icrc126_file_divergence",
            {
                "wasm_id": wasm_id,
                "divergence_report": report,
                "metadata": [[("bounty_id", {"Nat": bounty_id})]],
            },
        )
        error = error_payload(result)
        if error is not None:
            raise RemoteCallError(f"Failed to submit divergence: {describe_error(error)}")

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_request(raw: Mapping[str, Any]) -> VerificationRequest:
        return VerificationRequest(
            wasm_hash=bytes(raw["wasm_hash"]).hex(),
            repo=str(raw["repo"]),
            commit_hash=bytes(raw["commit_hash"]).hex(),
            metadata=deserialize_map(raw.get("metadata", [])),
        )

    @staticmethod
    def _parse_audit_record(raw: Mapping[str, Any]) -> AuditRecord:
        if "Attestation" in raw:
            body = raw["Attestation"]
            return AuditRecord(
                kind="attestation",
                auditor=str(body["auditor"]),
                timestamp=int(body["timestamp"]),
                audit_type=str(body["audit_type"]),
                metadata=deserialize_map(body.get("metadata", [])),
            )
        body = raw["Divergence"]
        metadata = unwrap_option(body.get("metadata", []))
        return AuditRecord(
            kind="divergence",
            auditor=str(body["reporter"]),
            timestamp=int(body["timestamp"]),
            report=str(body["report"]),
            metadata=deserialize_map(metadata) if metadata else {},
        )

    @staticmethod
    def _parse_bounty(raw: Mapping[str, Any]) -> Bounty:
        challenge = deserialize_value(raw["challenge_parameters"])
        claimed = unwrap_option(raw.get("claimed", []))
        claimed_date = unwrap_option(raw.get("claimed_date", []))
        timeout_date = unwrap_option(raw.get("timeout_date", []))
        return Bounty(
            bounty_id=int(raw["bounty_id"]),
            creator=str(raw["creator"]),
            token_canister_id=str(raw["token_canister_id"]),
            token_amount=int(raw["token_amount"]),
            created=int(raw["created"]),
            validation_canister_id=str(raw["validation_canister_id"]),
            challenge_parameters=challenge if isinstance(challenge, dict) else {},
            metadata=deserialize_map(raw.get("bounty_metadata", [])),
            claimed=None if claimed is None else int(claimed),
            claimed_date=None if claimed_date is None else int(claimed_date),
            timeout_date=None if timeout_date is None else int(timeout_date),
        )
