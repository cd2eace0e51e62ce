"""Candid declarations for every remote method the tools call.

Declarations are built from ``ic.candid.Types`` on first use, so the
rest of the package can be imported without ic-py installed.  Each
interface maps method names to a :class:`MethodSignature`; the gateway
encodes arguments with ``args``, decodes replies with ``rets`` and uses
``query`` to pick a query or an update call.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from prometheus_cli.exceptions import EnvironmentError

Interfaces = dict[str, dict[str, "MethodSignature"]]


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """Argument and return types of one canister method."""

    args: tuple[Any, ...]
    rets: tuple[Any, ...]
    query: bool = False


@lru_cache(maxsize=1)
def load_interfaces() -> Interfaces:
    """Return all interface declarations, importing ic-py on first use.

    Raises
    ------
    EnvironmentError
        If ic-py is not installed.
    """
    try:
        from ic.candid import Types
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "ic-py is not installed. Install with: pip install ic-py",
        ) from exc
    return build_interfaces(Types)


def build_interfaces(T: Any) -> Interfaces:
    """Build the declarations using the ic-py ``Types`` namespace *T*."""
    icrc16 = _icrc16(T)
    return {
        "mcp_registry": _mcp_registry(T, icrc16),
        "audit_hub": _audit_hub(T),
        "mcp_orchestrator": _mcp_orchestrator(T, icrc16),
        "usage_tracker": _usage_tracker(T),
        "icrc_ledger": _icrc_ledger(T),
        "app_bounties": _app_bounties(T),
        "leaderboard": _leaderboard(T),
        "auth_server": _auth_server(T),
        "mcp_server": _mcp_server(T),
    }


def _sig(args: list[Any], rets: list[Any], *, query: bool = False) -> MethodSignature:
    return MethodSignature(args=tuple(args), rets=tuple(rets), query=query)


def _result(T: Any, ok: Any, err: Any = None) -> Any:
    """Motoko-style ``ok``/``err`` result with text errors by default."""
    return T.Variant({"ok": ok, "err": T.Text if err is None else err})


# ---------------------------------------------------------------------------
# Shared types
# ---------------------------------------------------------------------------

def _blob(T: Any) -> Any:
    return T.Vec(T.Nat8)


def _version(T: Any) -> Any:
    return T.Tuple(T.Nat, T.Nat, T.Nat)


def _account(T: Any) -> Any:
    return T.Record({"owner": T.Principal, "subaccount": T.Opt(_blob(T))})


def _icrc16(T: Any) -> Any:
    value = T.Rec()
    value.fill(
        T.Variant(
            {
                "Int": T.Int,
                "Map": T.Vec(T.Tuple(T.Text, value)),
                "Nat": T.Nat,
                "Set": T.Vec(value),
                "Nat16": T.Nat16,
                "Nat32": T.Nat32,
                "Nat64": T.Nat64,
                "Blob": _blob(T),
                "Bool": T.Bool,
                "Int8": T.Int8,
                "Nat8": T.Nat8,
                "Nats": T.Vec(T.Nat),
                "Text": T.Text,
                "Bytes": _blob(T),
                "Int16": T.Int16,
                "Int32": T.Int32,
                "Int64": T.Int64,
                "Option": T.Opt(value),
                "Floats": T.Vec(T.Float64),
                "Float": T.Float64,
                "Principal": T.Principal,
                "Array": T.Vec(value),
                "ValueMap": T.Vec(T.Tuple(value, value)),
                "Class": T.Vec(
                    T.Record({"value": value, "name": T.Text, "immutable": T.Bool}),
                ),
            },
        ),
    )
    return value


def _transfer_error(T: Any) -> Any:
    return T.Variant(
        {
            "GenericError": T.Record({"message": T.Text, "error_code": T.Nat}),
            "TemporarilyUnavailable": T.Null,
            "BadBurn": T.Record({"min_burn_amount": T.Nat}),
            "Duplicate": T.Record({"duplicate_of": T.Nat}),
            "BadFee": T.Record({"expected_fee": T.Nat}),
            "CreatedInFuture": T.Record({"ledger_time": T.Nat64}),
            "TooOld": T.Null,
            "InsufficientFunds": T.Record({"balance": T.Nat}),
        },
    )


# ---------------------------------------------------------------------------
# MCP registry (ICRC-118 / 126 / 127)
# ---------------------------------------------------------------------------

def _mcp_registry(T: Any, icrc16: Any) -> dict[str, MethodSignature]:
    icrc16_map = T.Vec(T.Tuple(T.Text, icrc16))
    blob = _blob(T)
    version = _version(T)
    generic_error = T.Variant(
        {"NotFound": T.Null, "Generic": T.Text, "Unauthorized": T.Null},
    )
    canister_version = T.Record(
        {
            "canister_type_namespace": T.Text,
            "version_number": version,
            "calculated_hash": blob,
        },
    )
    wasm = T.Record(
        {
            "created": T.Nat,
            "canister_type_namespace": T.Text,
            "previous": T.Opt(canister_version),
            "metadata": icrc16_map,
            "hash": blob,
            "repo": T.Text,
            "description": T.Text,
            "version_number": version,
            "calculated_hash": blob,
            "deprecated": T.Bool,
            "chunkCount": T.Nat,
            "chunks": T.Vec(blob),
        },
    )
    run_bounty_result = T.Record(
        {
            "result": T.Variant({"Invalid": T.Null, "Valid": T.Null}),
            "metadata": icrc16,
            "trx_id": T.Opt(T.Nat),
        },
    )
    claim_record = T.Record(
        {
            "result": T.Opt(run_bounty_result),
            "claim_account": T.Opt(_account(T)),
            "time_submitted": T.Nat,
            "claim_id": T.Nat,
            "caller": T.Principal,
            "claim_metadata": icrc16_map,
            "submission": icrc16,
        },
    )
    bounty = T.Record(
        {
            "claims": T.Vec(claim_record),
            "created": T.Nat,
            "creator": T.Principal,
            "token_amount": T.Nat,
            "bounty_metadata": icrc16_map,
            "claimed": T.Opt(T.Nat),
            "token_canister_id": T.Principal,
            "challenge_parameters": icrc16,
            "validation_call_timeout": T.Nat,
            "bounty_id": T.Nat,
            "validation_canister_id": T.Principal,
            "claimed_date": T.Opt(T.Nat),
            "timeout_date": T.Opt(T.Nat),
            "payout_fee": T.Nat,
        },
    )
    verification_request = T.Record(
        {
            "metadata": icrc16_map,
            "repo": T.Text,
            "commit_hash": blob,
            "wasm_hash": blob,
        },
    )
    audit_record = T.Variant(
        {
            "Attestation": T.Record(
                {
                    "audit_type": T.Text,
                    "metadata": icrc16_map,
                    "auditor": T.Principal,
                    "timestamp": T.Int,
                },
            ),
            "Divergence": T.Record(
                {
                    "report": T.Text,
                    "metadata": T.Opt(icrc16_map),
                    "timestamp": T.Int,
                    "reporter": T.Principal,
                },
            ),
        },
    )
    security_tier = T.Variant(
        {"Gold": T.Null, "Bronze": T.Null, "Unranked": T.Null, "Silver": T.Null},
    )
    app_listing = T.Record(
        {
            "banner_url": T.Text,
            "publisher": T.Text,
            "name": T.Text,
            "tags": T.Vec(T.Text),
            "description": T.Text,
            "icon_url": T.Text,
            "deployment_type": T.Text,
            "category": T.Text,
            "latest_version": T.Record(
                {
                    "status": T.Variant(
                        {
                            "Rejected": T.Record({"reason": T.Text}),
                            "Verified": T.Null,
                            "Pending": T.Null,
                        },
                    ),
                    "created": T.Nat,
                    "security_tier": security_tier,
                    "wasm_id": T.Text,
                    "version_string": T.Text,
                },
            ),
            "namespace": T.Text,
        },
    )

    return {
        "icrc126_verification_request": _sig([verification_request], [T.Nat]),
        "icrc118_create_canister_type": _sig(
            [
                T.Vec(
                    T.Record(
                        {
                            "canister_type_namespace": T.Text,
                            "controllers": T.Opt(T.Vec(T.Principal)),
                            "metadata": icrc16_map,
                            "repo": T.Text,
                            "canister_type_name": T.Text,
                            "description": T.Text,
                            "forked_from": T.Opt(canister_version),
                        },
                    ),
                ),
            ],
            [
                T.Vec(
                    T.Variant(
                        {
                            "Ok": T.Nat,
                            "Error": T.Variant({"Generic": T.Text, "Unauthorized": T.Null}),
                        },
                    ),
                ),
            ],
        ),
        "icrc118_update_wasm": _sig(
            [
                T.Record(
                    {
                        "canister_type_namespace": T.Text,
                        "previous": T.Opt(canister_version),
                        "expected_chunks": T.Vec(blob),
                        "metadata": icrc16_map,
                        "repo": T.Text,
                        "description": T.Text,
                        "version_number": version,
                        "expected_hash": blob,
                    },
                ),
            ],
            [
                T.Variant(
                    {
                        "Ok": T.Nat,
                        "Error": T.Variant(
                            {
                                "NonDeprecatedWasmFound": blob,
                                "Generic": T.Text,
                                "Unauthorized": T.Null,
                            },
                        ),
                    },
                ),
            ],
        ),
        "icrc118_upload_wasm_chunk": _sig(
            [
                T.Record(
                    {
                        "canister_type_namespace": T.Text,
                        "expected_chunk_hash": blob,
                        "version_number": version,
                        "chunk_id": T.Nat,
                        "wasm_chunk": blob,
                    },
                ),
            ],
            [T.Record({"total_chunks": T.Nat, "chunk_id": T.Nat})],
        ),
        "icrc118_manage_controller": _sig(
            [
                T.Vec(
                    T.Record(
                        {
                            "op": T.Variant({"Add": T.Null, "Remove": T.Null}),
                            "controller": T.Principal,
                            "canister_type_namespace": T.Text,
                        },
                    ),
                ),
            ],
            [T.Vec(T.Variant({"Ok": T.Nat, "Error": generic_error}))],
        ),
        "icrc118_get_canister_types": _sig(
            [
                T.Record(
                    {
                        "prev": T.Opt(T.Text),
                        "take": T.Opt(T.Nat),
                        "filter": T.Vec(
                            T.Variant({"controller": T.Principal, "namespace": T.Text}),
                        ),
                    },
                ),
            ],
            [
                T.Vec(
                    T.Record(
                        {
                            "canister_type_namespace": T.Text,
                            "controllers": T.Vec(T.Principal),
                            "metadata": icrc16_map,
                            "repo": T.Text,
                            "canister_type_name": T.Text,
                            "description": T.Text,
                            "versions": T.Vec(canister_version),
                            "forked_from": T.Opt(canister_version),
                        },
                    ),
                ),
            ],
            query=True,
        ),
        "get_canister_type_version": _sig(
            [T.Record({"canister_type_namespace": T.Text, "version_number": version})],
            [_result(T, wasm)],
            query=True,
        ),
        "icrc118_get_wasms": _sig(
            [
                T.Record(
                    {
                        "prev": T.Opt(
                            T.Record(
                                {"canister_type_namespace": T.Text, "version_number": version},
                            ),
                        ),
                        "take": T.Opt(T.Nat),
                        "filter": T.Opt(
                            T.Vec(T.Variant({"canister_type_namespace": T.Text})),
                        ),
                    },
                ),
            ],
            [T.Vec(wasm)],
            query=True,
        ),
        "icrc118_deprecate": _sig(
            [
                T.Record(
                    {
                        "canister_type_namespace": T.Text,
                        "hash": blob,
                        "version_number": version,
                        "deprecation_flag": T.Opt(T.Bool),
                        "reason": T.Opt(T.Text),
                    },
                ),
            ],
            [T.Variant({"Ok": T.Nat, "Error": generic_error})],
        ),
        "is_wasm_verified": _sig([T.Text], [T.Bool], query=True),
        "get_verification_request": _sig(
            [T.Text],
            [T.Opt(verification_request)],
            query=True,
        ),
        "get_audit_records_for_wasm": _sig([T.Text], [T.Vec(audit_record)], query=True),
        "get_bounties_for_wasm": _sig([T.Text], [T.Vec(bounty)], query=True),
        "icrc127_create_bounty": _sig(
            [
                T.Record(
                    {
                        "bounty_metadata": icrc16_map,
                        "challenge_parameters": icrc16,
                        "start_date": T.Opt(T.Nat),
                        "bounty_id": T.Opt(T.Nat),
                        "validation_canister_id": T.Principal,
                        "timeout_date": T.Nat,
                    },
                ),
            ],
            [
                T.Variant(
                    {
                        "Ok": T.Record({"trx_id": T.Opt(T.Nat), "bounty_id": T.Nat}),
                        "Error": T.Variant(
                            {"InsufficientAllowance": T.Null, "Generic": T.Text},
                        ),
                    },
                ),
            ],
        ),
        "icrc127_get_bounty": _sig([T.Nat], [T.Opt(bounty)], query=True),
        "list_bounties": _sig(
            [
                T.Record(
                    {
                        "prev": T.Opt(T.Nat),
                        "take": T.Opt(T.Nat),
                        "filter": T.Opt(
                            T.Vec(
                                T.Variant(
                                    {
                                        "status": T.Variant(
                                            {"Claimed": T.Null, "Open": T.Null},
                                        ),
                                        "audit_type": T.Text,
                                        "creator": T.Principal,
                                    },
                                ),
                            ),
                        ),
                    },
                ),
            ],
            [_result(T, T.Vec(bounty))],
            query=True,
        ),
        "icrc127_submit_bounty": _sig(
            [
                T.Record(
                    {
                        "account": T.Opt(_account(T)),
                        "bounty_id": T.Nat,
                        "submission": icrc16,
                    },
                ),
            ],
            [
                T.Variant(
                    {
                        "Ok": T.Record(
                            {"result": T.Opt(run_bounty_result), "claim_id": T.Nat},
                        ),
                        "Error": T.Variant(
                            {
                                "Generic": T.Text,
                                "NoMatch": T.Null,
                                "PayoutFailed": _transfer_error(T),
                            },
                        ),
                    },
                ),
            ],
        ),
        "icrc126_file_attestation": _sig(
            [T.Record({"metadata": icrc16_map, "wasm_id": T.Text})],
            [T.Variant({"Ok": T.Nat, "Error": generic_error})],
        ),
        "icrc126_file_divergence": _sig(
            [
                T.Record(
                    {
                        "metadata": T.Opt(icrc16_map),
                        "wasm_id": T.Text,
                        "divergence_report": T.Text,
                    },
                ),
            ],
            [
                T.Variant(
                    {
                        "Ok": T.Nat,
                        "Error": T.Variant({"NotFound": T.Null, "Generic": T.Text}),
                    },
                ),
            ],
        ),
        "finalize_verification": _sig(
            [T.Text, T.Variant({"Rejected": T.Null, "Verified": T.Null}), icrc16_map],
            [_result(T, T.Nat)],
        ),
        "list_pending_verifications": _sig(
            [],
            [
                T.Vec(
                    T.Record(
                        {
                            "requester": T.Principal,
                            "metadata": icrc16_map,
                            "repo": T.Text,
                            "timestamp": T.Int,
                            "commit_hash": blob,
                            "wasm_hash": blob,
                        },
                    ),
                ),
            ],
            query=True,
        ),
        "get_app_listings": _sig(
            [
                T.Record(
                    {
                        "prev": T.Opt(T.Text),
                        "take": T.Opt(T.Nat),
                        "filter": T.Opt(
                            T.Vec(
                                T.Variant(
                                    {"publisher": T.Text, "name": T.Text, "namespace": T.Text},
                                ),
                            ),
                        ),
                    },
                ),
            ],
            [_result(T, T.Vec(app_listing))],
            query=True,
        ),
    }


# ---------------------------------------------------------------------------
# Audit hub
# ---------------------------------------------------------------------------

def _audit_hub(T: Any) -> dict[str, MethodSignature]:
    lock = T.Record(
        {
            "stake_token_id": T.Text,
            "claimant": T.Principal,
            "stake_amount": T.Nat,
            "expires_at": T.Int,
        },
    )
    return {
        "get_bounty_lock": _sig([T.Nat], [T.Opt(lock)], query=True),
        "get_stake_requirement": _sig(
            [T.Text],
            [T.Opt(T.Tuple(T.Text, T.Nat))],
            query=True,
        ),
        "reserve_bounty": _sig([T.Nat, T.Text], [_result(T, T.Null)]),
    }


# ---------------------------------------------------------------------------
# Orchestrator & usage tracker
# ---------------------------------------------------------------------------

def _mcp_orchestrator(T: Any, icrc16: Any) -> dict[str, MethodSignature]:
    install_mode = T.Variant(
        {
            "reinstall": T.Null,
            "upgrade": T.Opt(
                T.Record(
                    {
                        "wasm_memory_persistence": T.Opt(
                            T.Variant({"keep": T.Null, "replace": T.Null}),
                        ),
                        "skip_pre_upgrade": T.Opt(T.Bool),
                    },
                ),
            ),
            "install": T.Null,
        },
    )
    upgrade_request = T.Record(
        {
            "snapshot": T.Bool,
            "args": _blob(T),
            "hash": _blob(T),
            "mode": install_mode,
            "stop": T.Bool,
            "canister_id": T.Principal,
            "parameters": T.Opt(T.Vec(T.Tuple(T.Text, icrc16))),
            "restart": T.Bool,
            "timeout": T.Nat,
        },
    )
    upgrade_error = T.Variant(
        {
            "InvalidPayment": T.Null,
            "Generic": T.Text,
            "Unauthorized": T.Null,
            "WasmUnavailable": T.Null,
        },
    )
    return {
        "icrc120_upgrade_to": _sig(
            [T.Vec(upgrade_request)],
            [T.Vec(T.Variant({"Ok": T.Nat, "Err": upgrade_error}))],
        ),
        "icrc120_upgrade_finished": _sig(
            [],
            [
                T.Variant(
                    {
                        "Failed": T.Tuple(T.Nat, T.Text),
                        "Success": T.Nat,
                        "InProgress": T.Nat,
                    },
                ),
            ],
            query=True,
        ),
        "get_canisters": _sig([T.Text], [T.Vec(T.Principal)], query=True),
    }


def _usage_tracker(T: Any) -> dict[str, MethodSignature]:
    return {
        "register_canister_namespace": _sig(
            [T.Principal, T.Text],
            [_result(T, T.Null)],
        ),
    }


# ---------------------------------------------------------------------------
# ICRC-1 / ICRC-2 ledger
# ---------------------------------------------------------------------------

def _icrc_ledger(T: Any) -> dict[str, MethodSignature]:
    account = _account(T)
    blob = _blob(T)
    approve_error = T.Variant(
        {
            "GenericError": T.Record({"message": T.Text, "error_code": T.Nat}),
            "TemporarilyUnavailable": T.Null,
            "Duplicate": T.Record({"duplicate_of": T.Nat}),
            "BadFee": T.Record({"expected_fee": T.Nat}),
            "AllowanceChanged": T.Record({"current_allowance": T.Nat}),
            "CreatedInFuture": T.Record({"ledger_time": T.Nat64}),
            "TooOld": T.Null,
            "Expired": T.Record({"ledger_time": T.Nat64}),
            "InsufficientFunds": T.Record({"balance": T.Nat}),
        },
    )
    return {
        "icrc2_approve": _sig(
            [
                T.Record(
                    {
                        "fee": T.Opt(T.Nat),
                        "memo": T.Opt(blob),
                        "from_subaccount": T.Opt(blob),
                        "created_at_time": T.Opt(T.Nat64),
                        "amount": T.Nat,
                        "expected_allowance": T.Opt(T.Nat),
                        "expires_at": T.Opt(T.Nat64),
                        "spender": account,
                    },
                ),
            ],
            [T.Variant({"Ok": T.Nat, "Err": approve_error})],
        ),
        "icrc2_allowance": _sig(
            [T.Record({"account": account, "spender": account})],
            [T.Record({"allowance": T.Nat, "expires_at": T.Opt(T.Nat64)})],
            query=True,
        ),
        "icrc1_balance_of": _sig([account], [T.Nat], query=True),
        "icrc1_transfer": _sig(
            [
                T.Record(
                    {
                        "to": account,
                        "fee": T.Opt(T.Nat),
                        "memo": T.Opt(blob),
                        "from_subaccount": T.Opt(blob),
                        "created_at_time": T.Opt(T.Nat64),
                        "amount": T.Nat,
                    },
                ),
            ],
            [T.Variant({"Ok": T.Nat, "Err": _transfer_error(T)})],
        ),
    }


# ---------------------------------------------------------------------------
# App bounties & leaderboard
# ---------------------------------------------------------------------------

def _app_bounties(T: Any) -> dict[str, MethodSignature]:
    bounty = T.Record(
        {
            "id": T.Nat,
            "status": T.Text,
            "title": T.Text,
            "reward_token": T.Text,
            "reward_amount": T.Nat,
            "short_description": T.Text,
            "created_at": T.Int,
            "details_markdown": T.Text,
        },
    )
    fields = [T.Text, T.Text, T.Nat, T.Text, T.Text, T.Text]
    return {
        "get_all_bounties": _sig([], [T.Vec(bounty)], query=True),
        "get_bounty": _sig([T.Nat], [T.Opt(bounty)], query=True),
        "create_bounty": _sig(fields, [_result(T, T.Nat)]),
        "update_bounty": _sig([T.Nat, *fields], [_result(T, T.Null)]),
    }


def _leaderboard(T: Any) -> dict[str, MethodSignature]:
    return {
        "get_user_leaderboard": _sig(
            [],
            [T.Vec(T.Record({"total_invocations": T.Nat, "rank": T.Nat, "user": T.Principal}))],
            query=True,
        ),
        "get_server_leaderboard": _sig(
            [],
            [T.Vec(T.Record({"total_invocations": T.Nat, "rank": T.Nat, "server": T.Text}))],
            query=True,
        ),
        "get_last_updated": _sig([], [T.Int], query=True),
        "trigger_manual_update": _sig([], [_result(T, T.Null)]),
        "get_tool_invocations_for_server": _sig(
            [T.Text],
            [T.Vec(T.Tuple(T.Text, T.Nat))],
            query=True,
        ),
    }


# ---------------------------------------------------------------------------
# Auth server & MCP servers
# ---------------------------------------------------------------------------

def _auth_server(T: Any) -> dict[str, MethodSignature]:
    scopes = T.Vec(T.Tuple(T.Text, T.Text))
    resource_server = T.Record(
        {
            "status": T.Variant({"active": T.Null, "pending": T.Null}),
            "resource_server_id": T.Text,
            "owner": T.Principal,
            "scopes": scopes,
            "name": T.Text,
            "uris": T.Vec(T.Text),
            "accepted_payment_canisters": T.Vec(T.Principal),
            "logo_uri": T.Text,
            "frontend_host": T.Opt(T.Text),
            "service_principals": T.Vec(T.Principal),
        },
    )
    return {
        "list_my_resource_servers": _sig([], [_result(T, T.Vec(resource_server))]),
        "register_resource_server": _sig(
            [
                T.Record(
                    {
                        "initial_service_principal": T.Principal,
                        "scopes": scopes,
                        "name": T.Text,
                        "uris": T.Vec(T.Text),
                        "accepted_payment_canisters": T.Vec(T.Principal),
                        "logo_uri": T.Text,
                        "frontend_host": T.Opt(T.Text),
                    },
                ),
            ],
            [_result(T, resource_server)],
        ),
        "update_resource_server": _sig(
            [
                T.Record(
                    {
                        "resource_server_id": T.Text,
                        "scopes": T.Opt(scopes),
                        "name": T.Opt(T.Text),
                        "uris": T.Opt(T.Vec(T.Text)),
                        "accepted_payment_canisters": T.Opt(T.Vec(T.Principal)),
                        "logo_uri": T.Opt(T.Text),
                        "frontend_host": T.Opt(T.Text),
                        "service_principals": T.Opt(T.Vec(T.Principal)),
                    },
                ),
            ],
            [_result(T, T.Text)],
        ),
        "delete_resource_server": _sig([T.Text], [_result(T, T.Text)]),
    }


def _mcp_server(T: Any) -> dict[str, MethodSignature]:
    api_key = T.Record(
        {
            "info": T.Record(
                {
                    "created": T.Int,
                    "principal": T.Principal,
                    "scopes": T.Vec(T.Text),
                    "name": T.Text,
                },
            ),
            "hashed_key": T.Text,
        },
    )
    return {
        "create_my_api_key": _sig([T.Text, T.Vec(T.Text)], [T.Text]),
        "list_my_api_keys": _sig([], [T.Vec(api_key)], query=True),
        "revoke_my_api_key": _sig([T.Text], []),
    }
