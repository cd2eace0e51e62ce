"""Audit types, attestation templates and the security-tier ladder."""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AuditType:
    """A bounty-able audit category."""

    key: str
    label: str
    description: str


AUDIT_TYPES: dict[str, AuditType] = {
    "build_reproducibility_v1": AuditType(
        key="build_reproducibility_v1",
        label="Build Reproducibility",
        description=(
            "Verify that the published WASM can be rebuilt bit-for-bit "
            "from the declared source commit."
        ),
    ),
    "tools_v1": AuditType(
        key="tools_v1",
        label="MCP Compatibility",
        description=(
            "Check that the server's MCP tools respond as declared and "
            "that their pricing matches the listing."
        ),
    ),
}


def audit_type_label(key: str) -> str:
    """Human label of *key*, or the key itself when unknown."""
    audit_type = AUDIT_TYPES.get(key)
    return audit_type.label if audit_type else key


# ---------------------------------------------------------------------------
# Security tiers
# ---------------------------------------------------------------------------

_TIERS: tuple[tuple[str, frozenset[str]], ...] = (
    ("Gold", frozenset({"app_info_v1", "build_reproducibility_v1", "tools_v1", "security_v1"})),
    ("Silver", frozenset({"app_info_v1", "build_reproducibility_v1", "tools_v1"})),
    ("Bronze", frozenset({"app_info_v1", "build_reproducibility_v1"})),
)


def calculate_security_tier(completed_audits: Iterable[str]) -> str:
    """Return the highest tier whose audits are all in *completed_audits*."""
    completed = set(completed_audits)
    for tier, required in _TIERS:
        if required <= completed:
            return tier
    return "Unranked"


# ---------------------------------------------------------------------------
# Attestation templates
# ---------------------------------------------------------------------------

_ATTESTATION_TEMPLATES: dict[str, dict[str, Any]] = {
    "app_info_v1": {
        "126:audit_type": "app_info_v1",
        "name": "Your App's Display Name",
        "publisher": "Your Company or Developer Name",
        "canister_id": "Your App Canister ID (e.g., aaaaa-aa)",
        "mcp_path": "/mcp",
        "category": "App Store Category (e.g., Productivity, Games)",
        "icon_url": "/path/to/your/icon.png",
        "banner_url": "/path/to/your/banner.png",
        "gallery_images": ["/path/to/screenshot1.png", "/path/to/screenshot2.png"],
        "description": (
            "A detailed, paragraph-long description of what your app does "
            "and who it's for."
        ),
        "key_features": [
            "Feature 1: Describe a key capability",
            "Feature 2: Another cool thing it does",
            "Feature 3: A third selling point",
        ],
        "why_this_app": (
            "A short, compelling reason why users should choose your app over others."
        ),
        "tags": ["Keyword1", "Keyword2", "SearchTerm"],
    },
    "build_reproducibility_v1": {
        "126:audit_type": "build_reproducibility_v1",
        "status": "success | failure",
        "git_commit": "The exact commit hash used for the build.",
        "repo_url": "The URL of the repository used for the build.",
        "canister_id": "The canister ID of the deployed version.",
        "failure_reason": 'If status is "failure", provide a brief explanation here.',
    },
    "data_safety_v1": {
        "126:audit_type": "data_safety_v1",
        "overall_description": (
            "A high-level, one-sentence summary of the app's data handling practices."
        ),
        "data_points": [
            {
                "category": "Data Collection",
                "title": "Example Point Title (e.g., Temporary Location Use)",
                "description": "A detailed explanation of this specific data practice.",
            },
            {
                "category": "Security Practices",
                "title": "Another Example (e.g., On-Chain Transparency)",
                "description": "Describe another key aspect of the app's data safety.",
            },
        ],
    },
    "tools_v1": {
        "126:audit_type": "tools_v1",
        "tools": [
            {
                "name": "example_tool_name",
                # String keeps decimal precision through YAML.
                "cost": "0.00",
                "token": "TOKEN_SYMBOL",
                "description": (
                    "A clear, human-readable description of what this tool does "
                    "and when the cost is incurred."
                ),
            },
        ],
    },
}

ATTESTATION_TYPES: tuple[str, ...] = tuple(_ATTESTATION_TEMPLATES)


def attestation_template(audit_type: str) -> dict[str, Any]:
    """Return a fresh copy of the attestation template for *audit_type*.

    Raises
    ------
    KeyError
        If *audit_type* has no template.
    """
    return copy.deepcopy(_ATTESTATION_TEMPLATES[audit_type])
