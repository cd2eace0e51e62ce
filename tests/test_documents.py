"""Tests for core/documents.py — manifests, attestations, ballots, app bounties.

All pure: documents are plain dicts, no files are touched.
"""

from __future__ import annotations

from typing import Any

import pytest

from prometheus_cli.core.documents import (
    BALLOT_FILE,
    REPRODUCIBLE_WASM_PATH,
    app_bounty_document,
    app_bounty_file_name,
    attestation_document,
    attestation_file_name,
    ballot_document,
    is_reproducible_wasm_path,
    new_manifest,
    parse_outcome,
    require_keys,
    split_list,
    validate_for_publish,
    validate_namespace,
    verification_metadata,
)
from prometheus_cli.exceptions import ManifestError, ValidationError


def complete_manifest() -> dict[str, Any]:
    manifest = new_manifest(
        namespace="com.example.app",
        name="App",
        description="Does things.",
        repo_url="https://github.com/example/app",
        key_features=["a"],
    )
    manifest["submission"]["git_commit"] = "ab" * 20
    return manifest


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class TestManifest:
    @pytest.mark.parametrize("namespace", ["com.example.app", "io.my-org.tool-2"])
    def test_valid_namespaces(self, namespace: str) -> None:
        assert validate_namespace(namespace) == namespace

    @pytest.mark.parametrize("namespace", ["app", "Com.Example", "com..app", "com.example.app!"])
    def test_invalid_namespaces(self, namespace: str) -> None:
        with pytest.raises(ValidationError, match="Invalid namespace"):
            validate_namespace(namespace)

    def test_new_manifest_defaults(self) -> None:
        manifest = new_manifest(namespace="com.example.app", name="App")
        submission = manifest["submission"]
        assert submission["wasm_path"] == REPRODUCIBLE_WASM_PATH
        assert submission["mcp_path"] == "/mcp"
        assert submission["category"] == "Utilities"
        assert submission["visuals"]["gallery_images"] == []
        assert submission["git_commit"] == ""

    def test_split_list(self) -> None:
        assert split_list(" a, b ,,c ") == ["a", "b", "c"]
        assert split_list("") == []

    def test_validate_for_publish(self) -> None:
        submission = validate_for_publish(complete_manifest())
        assert submission["name"] == "App"

    def test_validate_for_publish_lists_missing(self) -> None:
        manifest = new_manifest(namespace="com.example.app", name="App")
        with pytest.raises(ManifestError) as info:
            validate_for_publish(manifest)
        assert "repo_url, git_commit, description" in str(info.value)
        assert "release <version>" in (info.value.hint or "")

    def test_missing_sections(self) -> None:
        with pytest.raises(ManifestError, match="`namespace` is missing"):
            validate_for_publish({"submission": {}})
        with pytest.raises(ManifestError, match="`submission` section is missing"):
            validate_for_publish({"namespace": "com.example.app"})

    def test_verification_metadata_drops_local_keys(self) -> None:
        metadata = verification_metadata(complete_manifest()["submission"])
        assert "repo_url" not in metadata
        assert "wasm_path" not in metadata
        assert "git_commit" not in metadata
        assert metadata["name"] == "App"
        assert metadata["visuals"]["icon_url"] == ""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("./out/out_Linux_x86_64.wasm", True),
            ("out/out_Linux_x86_64.wasm", True),
            ("./out/out_Darwin_arm64.wasm", False),
            ("./.dfx/local/canisters/app/app.wasm", False),
        ],
    )
    def test_reproducible_wasm_path(self, path: str, expected: bool) -> None:
        assert is_reproducible_wasm_path(path) is expected


# ---------------------------------------------------------------------------
# Attestations & ballots
# ---------------------------------------------------------------------------

class TestAttestation:
    def test_document(self) -> None:
        header, body = attestation_document("tools_v1", "ab" * 32)
        assert attestation_file_name("tools_v1") == "tools_v1_attestation.yml"
        assert "Target WASM Hash: " + "ab" * 32 in header
        assert "app-store-cli attest submit ./tools_v1_attestation.yml" in header
        assert body["wasm_hash"] == "ab" * 32
        assert body["metadata"]["126:audit_type"] == "tools_v1"
        assert body["metadata"]["tools"][0]["cost"] == "0.00"

    def test_unknown_type(self) -> None:
        with pytest.raises(ValidationError, match='Unknown audit type "security_v9"'):
            attestation_document("security_v9", "ab" * 32)

    def test_templates_are_independent_copies(self) -> None:
        _, first = attestation_document("app_info_v1", "h")
        first["metadata"]["tags"].append("mutated")
        _, second = attestation_document("app_info_v1", "h")
        assert "mutated" not in second["metadata"]["tags"]

    def test_require_keys(self) -> None:
        require_keys({"wasm_hash": "h", "metadata": {"a": 1}}, ("wasm_hash", "metadata"), kind="Manifest")
        with pytest.raises(ManifestError, match="Manifest is malformed. It must contain `wasm_hash`, `metadata`"):
            require_keys({"wasm_hash": "h"}, ("wasm_hash", "metadata"), kind="Manifest")


class TestBallot:
    def test_document(self) -> None:
        header, body = ballot_document("w1")
        assert f"app-store-cli dao finalize ./{BALLOT_FILE}" in header
        assert body["wasm_id"] == "w1"
        assert set(body["metadata"]) == {"decision_summary", "proposal_url"}

    @pytest.mark.parametrize(("raw", "expected"), [("verified", "Verified"), (" REJECTED ", "Rejected")])
    def test_parse_outcome(self, raw: str, expected: str) -> None:
        assert parse_outcome(raw) == expected

    def test_placeholder_outcome_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Must be 'Verified' or 'Rejected'"):
            parse_outcome("Verified | Rejected")


# ---------------------------------------------------------------------------
# App bounties
# ---------------------------------------------------------------------------

class TestAppBounty:
    def test_file_name(self) -> None:
        assert app_bounty_file_name("PMP Token Faucet!") == "bounty_pmp-token-faucet.yml"

    def test_document(self) -> None:
        header, body = app_bounty_document("pmp-token-faucet")
        assert body["title"] == "Pmp Token Faucet"
        assert body["reward_token"] == "preMCPT"
        assert body["status"] == "Open"
        assert body["details_markdown"].startswith("# Bounty Details")
        assert "app-bounties publish ./bounty_pmp-token-faucet.yml" in header
