"""Registry service — canister types, WASM versions, controllers, listings.

Wraps the ICRC-118 (WASM registry) and ICRC-126 (verification) methods
of the ``MCP_REGISTRY`` canister, plus the App Store listing and DAO
finalisation endpoints it also hosts.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.icrc16 import deserialize_map, serialize_map
from prometheus_cli.core.models import AppListing, PendingVerification, WasmVersion
from prometheus_cli.core.results import describe_error, error_payload, option, unwrap
from prometheus_cli.core.wasm import parse_version
from prometheus_cli.exceptions import PrometheusCliError, RemoteCallError

logger = logging.getLogger(__name__)

Version = tuple[int, int, int]


class RegistryService(CanisterService):
    """Client for the ``MCP_REGISTRY`` canister."""

    interface = "mcp_registry"
    canister_name = "MCP_REGISTRY"

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def submit_verification_request(
        self,
        *,
        wasm_hash: bytes,
        repo_url: str,
        commit_hash: bytes,
        metadata: Mapping[str, Any],
    ) -> int:
        """File an ICRC-126 verification request; returns its ID."""
        return self._call(
            "icrc126_verification_request",
            {
                "wasm_hash": wasm_hash,
                "repo": repo_url,
                "commit_hash": commit_hash,
                "metadata": serialize_map(metadata),
            },
        )

    def create_canister_type(
        self,
        *,
        namespace: str,
        name: str,
        description: str,
        repo_url: str,
    ) -> str:
        """Register *namespace*; returns ``"created"`` or ``"existed"``.

        The calling principal becomes the first controller.  An existing
        namespace is not an error.
        """
        results = self._call(
            "icrc118_create_canister_type",
            [
                {
                    "canister_type_namespace": namespace,
                    "canister_type_name": name,
                    "description": description,
                    "repo": repo_url,
                    "controllers": [[self._gateway.principal]],
                    "metadata": [],
                    "forked_from": [],
                },
            ],
        )
        error = error_payload(results[0]) if results else None
        if error is None:
            return "created"
        if isinstance(error, Mapping) and (
            "CanisterTypeAlreadyExists" in error
            or "already exists" in str(error.get("Generic", ""))
        ):
            return "existed"
        raise RemoteCallError(f"Failed to create canister type: {describe_error(error)}")

    def update_wasm(
        self,
        *,
        namespace: str,
        version: Version,
        wasm_hash: bytes,
        chunk_hashes: Sequence[bytes],
        repo_url: str,
    ) -> bool:
        """Register a WASM version.

        Returns ``True`` when the version was registered now and
        ``False`` when a non-deprecated WASM already holds it.
        """
        result = self._call(
            "icrc118_update_wasm",
            {
                "canister_type_namespace": namespace,
                "version_number": version,
                "expected_hash": wasm_hash,
                "repo": repo_url,
                "description": f"Release version {'.'.join(map(str, version))}",
                "expected_chunks": list(chunk_hashes),
                "metadata": [],
                "previous": [],
            },
        )
        error = error_payload(result)
        if error is None:
            return True
        if isinstance(error, Mapping) and "NonDeprecatedWasmFound" in error:
            return False
        raise RemoteCallError(f"Failed to publish version: {describe_error(error)}")

    def upload_wasm_chunk(
        self,
        *,
        namespace: str,
        version: Version,
        chunk: bytes,
        index: int,
        chunk_hash: bytes,
    ) -> None:
        result = self._call(
            "icrc118_upload_wasm_chunk",
            {
                "canister_type_namespace": namespace,
                "version_number": version,
                "wasm_chunk": chunk,
                "chunk_id": index,
                "expected_chunk_hash": chunk_hash,
            },
        )
        # total_chunks == 0 is the canister's rejection signal.
        if int(result["total_chunks"]) == 0:
            raise RemoteCallError(
                f"Failed to upload chunk {index}. The canister rejected the chunk "
                "(hash mismatch or out of bounds).",
            )

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------

    def add_controller(self, namespace: str, controller: str) -> None:
        self._manage_controller(namespace, controller, "Add")

    def remove_controller(self, namespace: str, controller: str) -> None:
        self._manage_controller(namespace, controller, "Remove")

    def _manage_controller(self, namespace: str, controller: str, op: str) -> None:
        results = self._call(
            "icrc118_manage_controller",
            [
                {
                    "canister_type_namespace": namespace,
                    "op": {op: None},
                    "controller": controller,
                },
            ],
        )
        error = error_payload(results[0]) if results else None
        if error is not None:
            raise RemoteCallError(
                f"Failed to {op.lower()} controller: {describe_error(error)}",
            )

    def get_controllers(self, namespace: str) -> list[str]:
        """Return the controller principals of *namespace*."""
        types = self._call(
            "icrc118_get_canister_types",
            {"filter": [{"namespace": namespace}], "prev": [], "take": []},
        )
        if not types:
            raise RemoteCallError(f"Namespace '{namespace}' not found.")
        return [str(principal) for principal in types[0]["controllers"]]

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def get_wasm_hash_for_version(self, namespace: str, version: str) -> bytes:
        """Resolve ``namespace@version`` to its WASM hash."""
        version_number = parse_version(version)
        result = self._call(
            "get_canister_type_version",
            {"canister_type_namespace": namespace, "version_number": version_number},
        )
        wasm = unwrap(
            result,
            action=f"Could not find version {version} for namespace {namespace}",
        )
        return bytes(wasm["hash"])

    def get_versions(self, namespace: str) -> list[WasmVersion]:
        """Return every published version of *namespace*."""
        wasms = self._call(
            "icrc118_get_wasms",
            {
                "filter": [[{"canister_type_namespace": namespace}]],
                "prev": [],
                "take": [],
            },
        )
        return [self._parse_wasm(wasm) for wasm in wasms]

    def set_deprecation_status(
        self,
        namespace: str,
        version: str,
        *,
        deprecate: bool,
        reason: str,
    ) -> None:
        """Mark *version* of *namespace* deprecated (or not)."""
        wasm_hash = self.get_wasm_hash_for_version(namespace, version)
        result = self._call(
            "icrc118_deprecate",
            {
                "canister_type_namespace": namespace,
                "version_number": parse_version(version),
                "hash": wasm_hash,
                "deprecation_flag": [deprecate],
                "reason": [reason],
            },
        )
        error = error_payload(result)
        if error is not None:
            raise RemoteCallError(
                f"Failed to set deprecation status: {describe_error(error)}",
            )

    # ------------------------------------------------------------------
    # DAO
    # ------------------------------------------------------------------

    def finalize_verification(
        self,
        wasm_id: str,
        outcome: str,
        metadata: Mapping[str, Any],
    ) -> int:
        """Record the DAO decision (``"Verified"``/``"Rejected"``)."""
        result = self._call(
            "finalize_verification",
            wasm_id,
            {outcome: None},
            serialize_map(metadata),
        )
        return unwrap(result, action="Failed to finalize verification")

    def list_pending_verifications(self) -> list[PendingVerification]:
        records = self._call("list_pending_verifications")
        return [
            PendingVerification(
                wasm_hash=bytes(record["wasm_hash"]).hex(),
                repo=record["repo"],
                commit_hash=bytes(record["commit_hash"]).hex(),
                requester=str(record["requester"]),
                timestamp=int(record["timestamp"]),
                metadata=deserialize_map(record["metadata"]),
            )
            for record in records
        ]

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def get_app_listings(
        self,
        *,
        take: int | None = None,
        prev: str | None = None,
    ) -> list[AppListing]:
        result = self._call(
            "get_app_listings",
            {"filter": [], "prev": option(prev), "take": option(take)},
        )
        listings = unwrap(result, action="Failed to fetch app listings")
        return [self._parse_listing(listing) for listing in listings]

    def get_canister_wasm_hash(self, canister_id: str) -> bytes | None:
        """Return the live module hash of *canister_id*, or ``None``."""
        try:
            return self._gateway.read_module_hash(canister_id)
        except PrometheusCliError as exc:
            logger.warning(
                "Could not read state for canister %s: %s",
                canister_id,
                exc,
            )
            return None

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_wasm(wasm: Mapping[str, Any]) -> WasmVersion:
        major, minor, patch = (int(part) for part in wasm["version_number"])
        return WasmVersion(
            version=(major, minor, patch),
            hash=bytes(wasm["hash"]).hex(),
            description=str(wasm.get("description", "")),
            created=int(wasm.get("created", 0)),
            deprecated=bool(wasm.get("deprecated", False)),
        )

    @staticmethod
    def _parse_listing(listing: Mapping[str, Any]) -> AppListing:
        latest = listing.get("latest_version") or {}
        tier = latest.get("security_tier") or {"Unranked": None}
        status = latest.get("status") or {"Pending": None}
        return AppListing(
            namespace=str(listing["namespace"]),
            name=str(listing["name"]),
            publisher=str(listing.get("publisher", "")),
            category=str(listing.get("category", "")),
            description=str(listing.get("description", "")),
            icon_url=str(listing.get("icon_url", "")),
            banner_url=str(listing.get("banner_url", "")),
            wasm_id=str(latest.get("wasm_id", "")),
            version=str(latest.get("version_string", "")),
            security_tier=next(iter(tier)),
            status=next(iter(status)),
            tags=tuple(str(tag) for tag in listing.get("tags", [])),
        )
