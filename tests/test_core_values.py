"""Tests for the pure value helpers of the core layer.

Coverage:
* PEM identity decoding (Ed25519, Secp256k1, wrong lengths, missing block).
* Principal text validation.
* ICRC-16 serialization rules.
* Token amount conversion and lookup.
* Version parsing, WASM hashing and chunking.
* Result / option unwrapping.
* Security tiers.
* Network configuration lookups.
"""

from __future__ import annotations

import base64
import hashlib

import pytest

from prometheus_cli.core.audit_types import (
    ATTESTATION_TYPES,
    attestation_template,
    audit_type_label,
    calculate_security_tier,
)
from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.core.icrc16 import (
    deserialize_map,
    deserialize_value,
    lookup_text,
    serialize_map,
    serialize_value,
)
from prometheus_cli.core.models import PrincipalText, parse_principal
from prometheus_cli.core.pem import KeyType, decode_pem_identity
from prometheus_cli.core.results import describe_error, is_ok, option, unwrap, unwrap_option
from prometheus_cli.core.tokens import default_tokens, find_token
from prometheus_cli.core.wasm import analyze_wasm, format_version, parse_version, parse_wasm_hash
from prometheus_cli.exceptions import (
    ConfigurationError,
    InvalidKeyFormatError,
    RemoteCallError,
    ValidationError,
)


def _pem(label: str, raw: bytes) -> str:
    body = base64.b64encode(raw).decode()
    return f"-----BEGIN {label}-----\n{body}\n-----END {label}-----\n"


# ---------------------------------------------------------------------------
# PEM
# ---------------------------------------------------------------------------

class TestDecodePemIdentity:
    def test_ed25519_secret_slice(self) -> None:
        raw = bytes(range(85))
        key = decode_pem_identity(_pem("PRIVATE KEY", raw))
        assert key.key_type is KeyType.ED25519
        assert key.secret_key == raw[16:48]
        assert key.secret_hex == raw[16:48].hex()

    def test_secp256k1_secret_slice(self) -> None:
        raw = bytes(range(118))
        content = _pem("EC PARAMETERS", b"\x06\x05+\x81\x04\x00\n") + _pem("EC PRIVATE KEY", raw)
        key = decode_pem_identity(content)
        assert key.key_type is KeyType.SECP256K1
        assert key.secret_key == raw[7:39]

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(InvalidKeyFormatError, match="expecting byte length 85 but got 84"):
            decode_pem_identity(_pem("PRIVATE KEY", bytes(84)))

    def test_missing_block_rejected(self) -> None:
        with pytest.raises(InvalidKeyFormatError, match="No private key block"):
            decode_pem_identity("not a pem")


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------

class TestParsePrincipal:
    @pytest.mark.parametrize("text", ["aaaaa-aa", "2vxsx-fae", "ryjl3-tyaaa-aaaaa-aaaba-cai"])
    def test_valid(self, text: str) -> None:
        principal = parse_principal(text)
        assert principal == text
        assert isinstance(principal, PrincipalText)

    def test_normalises_case_and_whitespace(self) -> None:
        assert parse_principal("  RYJL3-TYAAA-AAAAA-AAABA-CAI ") == "ryjl3-tyaaa-aaaaa-aaaba-cai"

    @pytest.mark.parametrize("text", ["", "hello!", "aaaaaaa", "abcde-fghij"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValidationError, match="not a valid principal"):
            parse_principal(text)


# ---------------------------------------------------------------------------
# ICRC-16
# ---------------------------------------------------------------------------

class TestIcrc16:
    def test_scalar_rules(self) -> None:
        assert serialize_value(True) == {"Bool": True}
        assert serialize_value(7) == {"Nat": 7}
        assert serialize_value(-7) == {"Int": -7}
        assert serialize_value(0.25) == {"Text": "0.25"}
        assert serialize_value(1e-07) == {"Text": "0.0000001"}
        assert serialize_value(1e20) == {"Text": "100000000000000000000"}
        assert serialize_value("hi") == {"Text": "hi"}
        assert serialize_value(b"\x01\x02") == {"Blob": b"\x01\x02"}
        assert serialize_value(PrincipalText("aaaaa-aa")) == {"Principal": "aaaaa-aa"}

    def test_unsupported_value_becomes_empty_text(self) -> None:
        assert serialize_value(object()) == {"Text": ""}

    def test_map_skips_none_and_nests(self) -> None:
        encoded = serialize_map({"a": None, "b": [1, "x"], "c": {"d": False}})
        assert encoded == [
            ("b", {"Array": [{"Nat": 1}, {"Text": "x"}]}),
            ("c", {"Map": [("d", {"Bool": False})]}),
        ]

    def test_deserialize_nested_map(self) -> None:
        entries = [
            ("name", {"Text": "app"}),
            ("count", {"Nat": 3}),
            ("owner", {"Principal": "aaaaa-aa"}),
            ("tags", {"Array": [{"Text": "a"}]}),
        ]
        decoded = deserialize_map(entries)
        assert decoded == {"name": "app", "count": 3, "owner": "aaaaa-aa", "tags": ["a"]}
        assert isinstance(decoded["owner"], PrincipalText)

    def test_unknown_variant_decodes_to_none(self) -> None:
        assert deserialize_value({"Float": 1.0}) is None
        assert deserialize_value({"Text": "a", "Nat": 1}) is None

    def test_lookup_text(self) -> None:
        entries = [("126:audit_type", {"Text": "tools_v1"}), ("n", {"Nat": 1})]
        assert lookup_text(entries, "126:audit_type") == "tools_v1"
        assert lookup_text(entries, "n") is None


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TestTokens:
    def test_to_atomic(self) -> None:
        usdc = find_token(default_tokens("ledger"), "usdc")
        assert usdc.to_atomic("1.5") == 1_500_000
        assert usdc.to_atomic("10") == 10_000_000
        assert usdc.to_atomic(".25") == 250_000

    @pytest.mark.parametrize("amount", ["", ".", "-1", "1e3", "1.1234567", "abc"])
    def test_to_atomic_rejects(self, amount: str) -> None:
        usdc = default_tokens("ledger")["USDC"]
        with pytest.raises(ValidationError):
            usdc.to_atomic(amount)

    def test_from_atomic(self) -> None:
        usdc = default_tokens("ledger")["USDC"]
        assert usdc.from_atomic(1_500_000) == "1.5"
        assert usdc.from_atomic(2_000_000) == "2"
        assert usdc.from_atomic(5) == "0.000005"

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValidationError, match='Invalid token symbol "ICP"') as exc_info:
            find_token(default_tokens("ledger"), "ICP")
        assert exc_info.value.hint is not None
        assert "USDC" in exc_info.value.hint

    def test_ledger_id_from_argument(self) -> None:
        assert default_tokens("my-ledger")["USDC"].canister_id == "my-ledger"


# ---------------------------------------------------------------------------
# Versions & WASM
# ---------------------------------------------------------------------------

class TestVersions:
    def test_parse_and_format(self) -> None:
        assert parse_version("1.20.3") == (1, 20, 3)
        assert format_version((1, 20, 3)) == "1.20.3"

    @pytest.mark.parametrize("value", ["1.2", "1.2.3.4", "1.x.3", "v1.2.3", "", "1.\u00b2.3"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValidationError, match="Must be"):
            parse_version(value)


class TestWasm:
    def test_parse_wasm_hash(self) -> None:
        assert parse_wasm_hash("AB" * 32) == bytes.fromhex("ab" * 32)

    @pytest.mark.parametrize("value", ["ab" * 31, "zz" * 32, ""])
    def test_parse_wasm_hash_rejects(self, value: str) -> None:
        with pytest.raises(ValidationError, match="64-character hex"):
            parse_wasm_hash(value)

    def test_chunking(self) -> None:
        data = b"abcde"
        artifact = analyze_wasm(data, chunk_size=2)
        assert artifact.chunks == (b"ab", b"cd", b"e")
        assert artifact.chunk_hashes[2] == hashlib.sha256(b"e").digest()
        assert artifact.hash_hex == hashlib.sha256(data).hexdigest()
        assert artifact.size == 5

    def test_single_chunk_by_default(self) -> None:
        assert len(analyze_wasm(b"\x00" * 10).chunks) == 1

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError, match="empty"):
            analyze_wasm(b"")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class TestResults:
    def test_unwrap_ok_spellings(self) -> None:
        assert unwrap({"ok": 1}, action="x") == 1
        assert unwrap({"Ok": 2}, action="x") == 2

    def test_unwrap_err(self) -> None:
        with pytest.raises(RemoteCallError, match="Failed to list: NotFound"):
            unwrap({"Err": {"NotFound": None}}, action="Failed to list")

    def test_unwrap_unexpected(self) -> None:
        with pytest.raises(RemoteCallError, match="unexpected response"):
            unwrap(5, action="x")

    def test_describe_error(self) -> None:
        assert describe_error({"Generic": "boom"}) == "Generic: boom"
        assert describe_error({"Outer": {"Inner": None}}) == "Outer: Inner"
        assert describe_error(b"\x0f") == "0f"

    def test_options(self) -> None:
        assert unwrap_option([]) is None
        assert unwrap_option([3]) == 3
        assert option(None) == []
        assert option(0) == [0]

    def test_is_ok(self) -> None:
        assert is_ok({"ok": None})
        assert not is_ok({"err": "x"})


# ---------------------------------------------------------------------------
# Audit types
# ---------------------------------------------------------------------------

class TestAuditTypes:
    @pytest.mark.parametrize(
        ("completed", "tier"),
        [
            (["app_info_v1", "build_reproducibility_v1", "tools_v1", "security_v1"], "Gold"),
            (["app_info_v1", "build_reproducibility_v1", "tools_v1"], "Silver"),
            (["build_reproducibility_v1", "app_info_v1"], "Bronze"),
            (["tools_v1"], "Unranked"),
            ([], "Unranked"),
        ],
    )
    def test_security_tier(self, completed: list[str], tier: str) -> None:
        assert calculate_security_tier(completed) == tier

    def test_templates_carry_audit_type(self) -> None:
        for audit_type in ATTESTATION_TYPES:
            assert attestation_template(audit_type)["126:audit_type"] == audit_type

    def test_template_is_a_copy(self) -> None:
        first = attestation_template("tools_v1")
        first["tools"].clear()
        assert attestation_template("tools_v1")["tools"]

    def test_labels(self) -> None:
        assert audit_type_label("tools_v1") == "MCP Compatibility"
        assert audit_type_label("custom_v9") == "custom_v9"


# ---------------------------------------------------------------------------
# Network configuration
# ---------------------------------------------------------------------------

class TestNetworkConfig:
    def test_lookup_is_case_insensitive(self) -> None:
        config = NetworkConfig(network="ic", host="https://icp-api.io", canister_ids={"mcp_registry": "r"})
        assert config.canister_id("MCP_REGISTRY") == "r"
        assert config.canister_id("mcp_registry") == "r"

    def test_missing_id(self) -> None:
        config = NetworkConfig(network="ic", host="https://icp-api.io", canister_ids={"A": "1"})
        with pytest.raises(ConfigurationError, match="AUDIT_HUB"):
            config.canister_id("audit_hub")

    def test_no_ids_configured(self) -> None:
        config = NetworkConfig(network="ic", host="https://icp-api.io")
        with pytest.raises(ConfigurationError, match="not been configured"):
            config.canister_id("MCP_REGISTRY")

    def test_invalid_network(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid network"):
            NetworkConfig(network="testnet", host="https://x.io")

    def test_frontend_url(self) -> None:
        ic = NetworkConfig(network="ic", host="https://icp-api.io")
        local = NetworkConfig(network="local", host="http://127.0.0.1:4943")
        assert ic.frontend_url("abc") == "https://abc.icp0.io"
        assert local.frontend_url("abc") == "http://127.0.0.1:4943/?canisterId=abc"
