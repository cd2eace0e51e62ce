"""dfx identity files.

dfx keeps each identity in ``<config root>/identity/<name>/``: a
plaintext ``identity.pem`` or, for password-protected identities, an
``identity.pem.encrypted``.  Only plaintext identities can be used.
"""

from __future__ import annotations

import logging
from pathlib import Path

from prometheus_cli.core.pem import KeyMaterial, decode_pem_identity
from prometheus_cli.exceptions import EncryptedIdentityError, IdentityError
from prometheus_cli.infra.process import run_command
from prometheus_cli.settings import AppSettings

logger = logging.getLogger(__name__)


def dfx_config_root(settings: AppSettings) -> Path:
    """Return the dfx configuration root (``~/.config/dfx`` by default)."""
    if settings.dfx_config_root is not None:
        return settings.dfx_config_root.expanduser()
    return Path.home() / ".config" / "dfx"


def current_identity_name(settings: AppSettings) -> str:
    """Name of the identity to use: the settings override, else ``dfx identity whoami``."""
    if settings.identity:
        return settings.identity
    return run_command(["dfx", "identity", "whoami"], error_cls=IdentityError)


def load_dfx_identity(name: str, settings: AppSettings) -> KeyMaterial:
    """Read and decode the plaintext PEM of identity *name*.

    Raises
    ------
    EncryptedIdentityError
        If the identity is password protected.
    IdentityError
        If no ``identity.pem`` exists for *name*.
    InvalidKeyFormatError
        If the PEM does not hold a supported key.
    """
    identity_dir = dfx_config_root(settings) / "identity" / name
    pem_path = identity_dir / "identity.pem"
    encrypted_path = identity_dir / "identity.pem.encrypted"

    if encrypted_path.exists():
        raise EncryptedIdentityError(
            f"Identity '{name}' is encrypted. This tool does not support "
            "encrypted identities directly.",
            hint=(
                "Export the key to a temporary unencrypted file:\n"
                f"  dfx identity export {name} > temp-key.pem\n"
                "then import it as a plaintext identity with "
                "'dfx identity import --storage-mode plaintext'."
            ),
        )
    if not pem_path.is_file():
        raise IdentityError(f"Could not find identity.pem in {identity_dir}")

    logger.debug("Loading identity '%s' from %s", name, pem_path)
    try:
        content = pem_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IdentityError(f"Could not read {pem_path}: {exc}") from exc
    return decode_pem_identity(content)
