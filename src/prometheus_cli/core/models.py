"""Domain models for prometheus-cli.

Remote records are owned by their canisters; the CLI only transports
them.  After decoding, each record is held in a **frozen** dataclass so
the CLI layer renders plain, typed values instead of raw Candid dicts.
"""

from __future__ import annotations

import base64
import binascii
import zlib
from dataclasses import dataclass, field
from typing import Any

from prometheus_cli.core.wasm import format_version
from prometheus_cli.exceptions import ValidationError


class PrincipalText(str):
    """Textual principal that serialises as an ICRC-16 ``Principal``.

    A plain ``str`` subclass, so it can be passed anywhere a principal
    text is expected while still being distinguishable from free text.
    """

    __slots__ = ()


def parse_principal(text: str) -> PrincipalText:
    """Validate textual principal *text* (grouping and CRC-32 checksum).

    Raises
    ------
    ValidationError
        If *text* is not a well-formed principal.
    """
    raw = text.strip().lower()
    compact = raw.replace("-", "").upper()
    error = ValidationError(f"'{text}' is not a valid principal.")
    try:
        decoded = base64.b32decode(compact + "=" * (-len(compact) % 8))
    except (binascii.Error, ValueError) as exc:
        raise error from exc
    if len(decoded) < 4 or zlib.crc32(decoded[4:]).to_bytes(4, "big") != decoded[:4]:
        raise error
    canonical = base64.b32encode(decoded).decode().rstrip("=").lower()
    grouped = "-".join(canonical[i:i + 5] for i in range(0, len(canonical), 5))
    if grouped != raw:
        raise error
    return PrincipalText(grouped)


# ---------------------------------------------------------------------------
# Verification & audits
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VerificationRequest:
    """A developer's request to have a WASM verified."""

    wasm_hash: str
    """Hex-encoded SHA-256 of the WASM module."""

    repo: str
    """Source repository URL."""

    commit_hash: str
    """Hex-encoded git commit."""

    metadata: dict[str, Any] = field(default_factory=dict)
    """Deserialised ICRC-16 submission metadata."""


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """An attestation or a divergence report filed against a WASM."""

    kind: str
    """``"attestation"`` or ``"divergence"``."""

    auditor: str
    """Principal of the auditor or reporter."""

    timestamp: int
    """Filing time in nanoseconds since the epoch."""

    audit_type: str | None = None
    """Audit type of an attestation; ``None`` for divergences."""

    report: str | None = None
    """Divergence report text; ``None`` for attestations."""

    metadata: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Bounties
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Bounty:
    """An ICRC-127 audit bounty."""

    bounty_id: int
    creator: str
    token_canister_id: str
    token_amount: int
    """Reward in the token's atomic units."""

    created: int
    validation_canister_id: str
    challenge_parameters: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    claimed: int | None = None
    """Claim ID once the bounty has been paid out."""

    claimed_date: int | None = None
    timeout_date: int | None = None

    @property
    def audit_type(self) -> str:
        value = self.challenge_parameters.get("audit_type")
        return value if isinstance(value, str) else "unknown"

    @property
    def wasm_hash(self) -> str | None:
        value = self.challenge_parameters.get("wasm_hash")
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).hex()
        return value if isinstance(value, str) else None

    @property
    def is_claimed(self) -> bool:
        return self.claimed is not None


@dataclass(frozen=True, slots=True)
class BountyLock:
    """A reservation held on a bounty by an auditor."""

    claimant: str
    stake_token_id: str
    stake_amount: int
    expires_at: int
    """Expiry in nanoseconds since the epoch."""


@dataclass(frozen=True, slots=True)
class StakeRequirement:
    """Stake an auditor must lock to reserve a bounty of one audit type."""

    token_id: str
    amount: int


@dataclass(frozen=True, slots=True)
class VerificationStatus:
    """Aggregated verification state of a WASM."""

    wasm_hash: str
    is_verified: bool
    request: VerificationRequest | None
    audit_records: tuple[AuditRecord, ...] = ()
    bounties: tuple[Bounty, ...] = ()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WasmVersion:
    """A published WASM version of a canister type."""

    version: tuple[int, int, int]
    hash: str
    """Hex-encoded module hash."""

    description: str
    created: int
    deprecated: bool

    @property
    def version_text(self) -> str:
        return format_version(self.version)


@dataclass(frozen=True, slots=True)
class PendingVerification:
    """A verification request still awaiting a DAO decision."""

    wasm_hash: str
    repo: str
    commit_hash: str
    requester: str
    timestamp: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AppListing:
    """One entry in the public App Store listing."""

    namespace: str
    name: str
    publisher: str
    category: str
    description: str
    icon_url: str
    banner_url: str
    wasm_id: str
    """Hex hash of the latest version."""

    version: str
    security_tier: str
    status: str
    """``"Verified"``, ``"Pending"`` or ``"Rejected"``."""

    tags: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Upgrades
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UpgradeStatus:
    """State of the most recent orchestrated upgrade."""

    state: str
    """``"Success"``, ``"Failed"`` or ``"InProgress"``."""

    timestamp: int
    reason: str | None = None

    @property
    def finished(self) -> bool:
        return self.state != "InProgress"


# ---------------------------------------------------------------------------
# Leaderboard & app bounties
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """A ranked user or server on the usage leaderboard."""

    rank: int
    subject: str
    """User principal or server canister ID."""

    total_invocations: int


@dataclass(frozen=True, slots=True)
class AppBounty:
    """A bounty posted for building a new app."""

    id: int
    title: str
    short_description: str
    reward_amount: int
    reward_token: str
    status: str
    details_markdown: str
    created_at: int = 0


# ---------------------------------------------------------------------------
# Auth server
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ResourceServer:
    """An OAuth resource server registered with the auth canister."""

    resource_server_id: str
    name: str
    owner: str
    status: str
    uris: tuple[str, ...]
    scopes: tuple[tuple[str, str], ...]
    accepted_payment_canisters: tuple[str, ...]
    logo_uri: str
    service_principals: tuple[str, ...] = ()
    frontend_host: str | None = None

    @property
    def charges(self) -> bool:
        return any(scope == "prometheus:charge" for scope, _ in self.scopes)


# ---------------------------------------------------------------------------
# MCP server API keys
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ApiKey:
    """Metadata of an API key issued by an MCP server."""

    hashed_key: str
    name: str
    principal: str
    created: int
    scopes: tuple[str, ...] = ()
