"""PEM identity decoding.

dfx stores plaintext identities as PEM files.  Two layouts are in use:

* Secp256k1 — an ``EC PRIVATE KEY`` block (SEC1 DER, 118 bytes) whose
  32-byte secret sits at offset 7.
* Ed25519 — a ``PRIVATE KEY`` block (PKCS#8 v2 DER, 85 bytes) whose
  32-byte secret sits at offset 16.

The decoder only slices the secret out; building a signing identity from
it is the job of the infrastructure layer.
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
from dataclasses import dataclass

from prometheus_cli.exceptions import InvalidKeyFormatError

_PEM_BLOCK = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)


class KeyType(str, enum.Enum):
    """Signature scheme of a decoded identity."""

    ED25519 = "ed25519"
    SECP256K1 = "secp256k1"


@dataclass(frozen=True, slots=True)
class _KeyLayout:
    label: str
    length: int
    start: int
    end: int


_LAYOUTS: dict[KeyType, _KeyLayout] = {
    KeyType.SECP256K1: _KeyLayout("Secp256k1", 118, 7, 39),
    KeyType.ED25519: _KeyLayout("Ed25519", 85, 16, 48),
}


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """Secret key extracted from a PEM identity."""

    key_type: KeyType
    """Signature scheme of the key."""

    secret_key: bytes
    """Raw 32-byte secret."""

    @property
    def secret_hex(self) -> str:
        return self.secret_key.hex()


def detect_key_type(content: str) -> KeyType:
    """Return the key type implied by the PEM header text."""
    if "EC PRIVATE KEY" in content:
        return KeyType.SECP256K1
    return KeyType.ED25519


def decode_pem_identity(content: str) -> KeyMaterial:
    """Decode a dfx PEM identity into its raw secret key.

    Parameters
    ----------
    content:
        Full text of an ``identity.pem`` file.

    Raises
    ------
    InvalidKeyFormatError
        If no private-key block is present, the body is not valid base64,
        or the decoded DER has an unexpected length.
    """
    key_type = detect_key_type(content)
    layout = _LAYOUTS[key_type]
    raw = _private_key_der(content)

    if len(raw) != layout.length:
        raise InvalidKeyFormatError(
            f"Invalid {layout.label} key format: expecting byte length "
            f"{layout.length} but got {len(raw)}",
        )

    return KeyMaterial(key_type=key_type, secret_key=raw[layout.start:layout.end])


def _private_key_der(content: str) -> bytes:
    """Return the decoded DER bytes of the first private-key block."""
    for label, body in _PEM_BLOCK.findall(content):
        if not label.endswith("PRIVATE KEY"):
            continue
        try:
            return base64.b64decode("".join(body.split()), validate=True)
        except binascii.Error as exc:
            raise InvalidKeyFormatError(
                f"Invalid {label} block: {exc}",
            ) from exc
    raise InvalidKeyFormatError(
        "No private key block found in PEM content.",
        hint="Expected a '-----BEGIN ... PRIVATE KEY-----' section.",
    )
