"""Custom exception hierarchy for prometheus-cli.

All exceptions that cross layer boundaries must inherit from
:class:`PrometheusCliError`.  Raw third-party exceptions (ic-py agent
failures, YAML parser errors, subprocess failures) must NEVER propagate
beyond the infrastructure layer — they are caught and re-raised as a
typed subclass defined here.

Hierarchy
---------
PrometheusCliError
├── ConfigurationError
├── IdentityError
│   ├── EncryptedIdentityError
│   └── InvalidKeyFormatError
├── ManifestError
├── ValidationError
├── RemoteCallError
│   └── UpgradeTimeoutError
├── BuildError
├── GitError
└── EnvironmentError
    └── EnvironmentCheckError
"""

from __future__ import annotations


class PrometheusCliError(Exception):
    """Base exception for all prometheus-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(PrometheusCliError):
    """Raised when the network or canister-ID configuration is unusable."""


# --- Identity --------------------------------------------------------------

class IdentityError(PrometheusCliError):
    """Raised when the dfx identity cannot be located or loaded."""


class EncryptedIdentityError(IdentityError):
    """Raised when the selected dfx identity is password protected."""


class InvalidKeyFormatError(IdentityError):
    """Raised when a PEM key does not have the expected byte layout."""


# --- Local input -----------------------------------------------------------

class ManifestError(PrometheusCliError):
    """Raised when a YAML manifest is missing, malformed or incomplete."""


class ValidationError(PrometheusCliError):
    """Raised when user input (versions, amounts, hashes) is invalid."""


# --- Remote calls ----------------------------------------------------------

class RemoteCallError(PrometheusCliError):
    """Raised when a canister call fails or returns an error result."""


class UpgradeTimeoutError(RemoteCallError):
    """Raised when an upgrade does not finish within the polling window."""


# --- Local tooling ---------------------------------------------------------

class BuildError(PrometheusCliError):
    """Raised when the reproducible docker build cannot be completed."""


class GitError(PrometheusCliError):
    """Raised when a git precondition or command fails."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(PrometheusCliError):
    """Raised when a required runtime dependency is not available."""


class EnvironmentCheckError(EnvironmentError):
    """Raised when a required environment precondition is not met."""
