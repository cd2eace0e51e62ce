"""Builders and validators for the YAML documents the CLI reads and writes.

Covers the project manifest (``prometheus.yml``), attestation manifests,
DAO decision ballots and app-bounty files.  Everything here works on
plain dicts; reading and writing the files is done by
:mod:`prometheus_cli.infra.yaml_store`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from prometheus_cli.core.audit_types import ATTESTATION_TYPES, attestation_template
from prometheus_cli.exceptions import ManifestError, ValidationError

MANIFEST_FILE = "prometheus.yml"
REPRODUCIBLE_WASM_PATH = "./out/out_Linux_x86_64.wasm"
BALLOT_FILE = "dao_decision_ballot.yml"

NAMESPACE_PATTERN = re.compile(r"^[a-z0-9-]+(\.[a-z0-9-]+)+$")

CATEGORIES: tuple[str, ...] = (
    "Utilities",
    "AI",
    "Development",
    "Gaming",
    "Finance",
    "Social",
)

# Submission keys that describe the local build rather than the listing.
_LOCAL_SUBMISSION_KEYS: frozenset[str] = frozenset({"repo_url", "wasm_path", "git_commit"})

_PUBLISH_REQUIRED: tuple[str, ...] = (
    "repo_url",
    "wasm_path",
    "git_commit",
    "name",
    "description",
)


# ---------------------------------------------------------------------------
# Project manifest
# ---------------------------------------------------------------------------

MANIFEST_HEADER = """\
# Prometheus App Store manifest
#
# 1. Fill in the submission details below.
# 2. Run 'app-store-cli build' to produce a reproducible WASM.
# 3. Run 'app-store-cli release <version>' (or 'publish <version>') to publish it.
"""


def validate_namespace(namespace: str) -> str:
    """Return *namespace* or raise :class:`ValidationError`."""
    if not NAMESPACE_PATTERN.match(namespace):
        raise ValidationError(
            f"Invalid namespace '{namespace}'.",
            hint="Use reverse-domain form, e.g. com.example.my-app",
        )
    return namespace


def new_manifest(
    *,
    namespace: str,
    name: str,
    publisher: str = "",
    category: str = CATEGORIES[0],
    description: str = "",
    why_this_app: str = "",
    key_features: list[str] | None = None,
    tags: list[str] | None = None,
    repo_url: str = "",
    icon_url: str = "",
    banner_url: str = "",
) -> dict[str, Any]:
    """Build the initial ``prometheus.yml`` content for ``init``."""
    return {
        "namespace": validate_namespace(namespace),
        "submission": {
            "name": name,
            "description": description,
            "publisher": publisher,
            "category": category,
            "why_this_app": why_this_app,
            "key_features": list(key_features or []),
            "tags": list(tags or []),
            "repo_url": repo_url,
            "mcp_path": "/mcp",
            "visuals": {
                "icon_url": icon_url,
                "banner_url": banner_url,
                "gallery_images": [],
            },
            "git_commit": "",
            "wasm_path": REPRODUCIBLE_WASM_PATH,
        },
    }


def split_list(raw: str) -> list[str]:
    """Split a comma-separated answer into trimmed, non-empty items."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def require_submission(manifest: Mapping[str, Any]) -> dict[str, Any]:
    """Return the ``submission`` section or raise :class:`ManifestError`."""
    submission = manifest.get("submission")
    if not isinstance(submission, dict):
        raise ManifestError(
            f"The `submission` section is missing from {MANIFEST_FILE}.",
        )
    return submission


def require_namespace(manifest: Mapping[str, Any]) -> str:
    namespace = manifest.get("namespace")
    if not namespace:
        raise ManifestError(f"`namespace` is missing from {MANIFEST_FILE}.")
    return str(namespace)


def validate_for_publish(manifest: Mapping[str, Any]) -> dict[str, Any]:
    """Check that a manifest carries everything ``publish`` needs.

    Returns the ``submission`` section.

    Raises
    ------
    ManifestError
        Listing every missing key.
    """
    require_namespace(manifest)
    submission = require_submission(manifest)
    missing = [key for key in _PUBLISH_REQUIRED if not submission.get(key)]
    if missing:
        raise ManifestError(
            f"{MANIFEST_FILE} is incomplete. Missing: {', '.join(missing)}.",
            hint="Run 'app-store-cli release <version>' to fill git_commit and wasm_path.",
        )
    return submission


def verification_metadata(submission: Mapping[str, Any]) -> dict[str, Any]:
    """Return the listing metadata sent with a verification request."""
    return {
        key: value
        for key, value in submission.items()
        if key not in _LOCAL_SUBMISSION_KEYS
    }


def is_reproducible_wasm_path(wasm_path: str) -> bool:
    normalised = wasm_path if wasm_path.startswith("./") else f"./{wasm_path}"
    return normalised == REPRODUCIBLE_WASM_PATH


# ---------------------------------------------------------------------------
# Attestations
# ---------------------------------------------------------------------------

def attestation_file_name(audit_type: str) -> str:
    return f"{audit_type}_attestation.yml"


def attestation_document(audit_type: str, wasm_hash: str) -> tuple[str, dict[str, Any]]:
    """Return ``(header, body)`` for a new attestation manifest.

    Raises
    ------
    ValidationError
        If *audit_type* has no template.
    """
    if audit_type not in ATTESTATION_TYPES:
        raise ValidationError(
            f'Unknown audit type "{audit_type}".',
            hint=f"Available types: {', '.join(ATTESTATION_TYPES)}",
        )
    file_name = attestation_file_name(audit_type)
    header = (
        f"# Prometheus Attestation Manifest for Audit Type: {audit_type}\n"
        "#\n"
        f"# Target WASM Hash: {wasm_hash}\n"
        "#\n"
        "# Please fill in all the placeholder values below.\n"
        "# When you are ready, submit this file using the command:\n"
        f"#   app-store-cli attest submit ./{file_name}\n"
    )
    return header, {"wasm_hash": wasm_hash, "metadata": attestation_template(audit_type)}


def require_keys(document: Mapping[str, Any], keys: tuple[str, ...], *, kind: str) -> None:
    """Raise :class:`ManifestError` unless every key in *keys* is set."""
    missing = [key for key in keys if not document.get(key)]
    if missing:
        wanted = ", ".join(f"`{key}`" for key in keys)
        raise ManifestError(f"{kind} is malformed. It must contain {wanted} keys.")


# ---------------------------------------------------------------------------
# DAO ballots
# ---------------------------------------------------------------------------

def ballot_document(wasm_id: str) -> tuple[str, dict[str, Any]]:
    """Return ``(header, body)`` for a DAO decision ballot."""
    header = (
        "# Prometheus DAO Decision Ballot\n"
        "#\n"
        f"# Target WASM ID: {wasm_id}\n"
        "#\n"
        "# 1. Change 'outcome' to either 'Verified' or 'Rejected'.\n"
        "# 2. Fill in the metadata fields with the required information.\n"
        "# 3. Submit this file using the command:\n"
        f"#      app-store-cli dao finalize ./{BALLOT_FILE}\n"
    )
    body = {
        "wasm_id": wasm_id,
        "outcome": "Verified | Rejected",
        "metadata": {
            "decision_summary": (
                "A brief, human-readable summary of the DAO's reasoning for this decision."
            ),
            "proposal_url": (
                "A URL to the on-chain proposal or discussion that authorized this action."
            ),
        },
    }
    return header, body


def parse_outcome(raw: str) -> str:
    """Normalise a ballot outcome to ``"Verified"`` or ``"Rejected"``."""
    lowered = str(raw).strip().lower()
    if lowered == "verified":
        return "Verified"
    if lowered == "rejected":
        return "Rejected"
    raise ValidationError(
        "Invalid 'outcome' in ballot. Must be 'Verified' or 'Rejected'.",
    )


# ---------------------------------------------------------------------------
# App bounties
# ---------------------------------------------------------------------------

_APP_BOUNTY_DETAILS = """\
# Bounty Details

## 1. Project Goal

*A clear, concise statement of what this bounty aims to achieve.*

## 2. Scope of Work

*A detailed list of features and requirements.*

- Feature A
- Feature B
- Integration with X

## 3. Acceptance Criteria

*How the DAO will judge a successful submission. Be specific.*

- Must be deployed as an MCP server.
- Code must be open-sourced under an MIT license.
- Must pass all tests in the provided suite.

## 4. How to Claim

*Instructions for developers.*

- Submit your work by opening a pull request against the `bounty-submissions` repository.
- Post a link to your PR in the official Discord channel."""


def slugify(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


def app_bounty_file_name(name: str) -> str:
    return f"bounty_{slugify(name)}.yml"


def app_bounty_document(name: str) -> tuple[str, dict[str, Any]]:
    """Return ``(header, body)`` for a new blank app bounty."""
    file_name = app_bounty_file_name(name)
    title = re.sub(r"\b\w", lambda m: m.group(0).upper(), name.replace("-", " "))
    header = (
        "# Prometheus App Bounty Configuration\n"
        "#\n"
        "# 1. Fill in the details for your new bounty below.\n"
        "# 2. Publish this bounty to the canister using the command:\n"
        f"#      app-store-cli app-bounties publish ./{file_name}\n"
    )
    body = {
        "title": title,
        "short_description": "",
        "details_markdown": _APP_BOUNTY_DETAILS,
        "reward_amount": 0,
        "reward_token": "preMCPT",
        "status": "Open",
    }
    return header, body
