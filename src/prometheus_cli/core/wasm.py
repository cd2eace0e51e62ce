"""WASM artifact analysis and semantic-version helpers."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

from prometheus_cli.exceptions import ValidationError

CHUNK_SIZE: int = 1024 * 1024
"""Upload chunk size in bytes (1 MiB)."""

_HEX_HASH = re.compile(r"^[a-fA-F0-9]{64}$")


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

def parse_version(version: str) -> tuple[int, int, int]:
    """Parse ``"x.y.z"`` into a tuple of three non-negative integers.

    Raises
    ------
    ValidationError
        If *version* does not have exactly three numeric components.
    """
    parts = version.strip().split(".")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        raise ValidationError(
            f'Invalid version format: "{version}". Must be "x.y.z".',
        )
    major, minor, patch = (int(part) for part in parts)
    return major, minor, patch


def format_version(version: tuple[int, ...]) -> str:
    return ".".join(str(part) for part in version)


# ---------------------------------------------------------------------------
# Hashes
# ---------------------------------------------------------------------------

def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def parse_wasm_hash(value: str) -> bytes:
    """Decode a 64-character hex SHA-256 into bytes.

    Raises
    ------
    ValidationError
        If *value* is not a 64-character hex string.
    """
    if not _HEX_HASH.match(value.strip()):
        raise ValidationError(
            "WASM ID must be a 64-character hex string (SHA-256 hash).",
        )
    return bytes.fromhex(value.strip())


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WasmArtifact:
    """A WASM module split into upload chunks."""

    hash: bytes
    """SHA-256 of the whole module."""

    chunks: tuple[bytes, ...]
    chunk_hashes: tuple[bytes, ...]

    @property
    def hash_hex(self) -> str:
        return self.hash.hex()

    @property
    def size(self) -> int:
        return sum(len(chunk) for chunk in self.chunks)


def analyze_wasm(data: bytes, *, chunk_size: int = CHUNK_SIZE) -> WasmArtifact:
    """Hash *data* and split it into *chunk_size* pieces with their hashes."""
    if not data:
        raise ValidationError("WASM file is empty.")
    chunks = tuple(data[i:i + chunk_size] for i in range(0, len(data), chunk_size))
    return WasmArtifact(
        hash=hashlib.sha256(data).digest(),
        chunks=chunks,
        chunk_hashes=tuple(hashlib.sha256(chunk).digest() for chunk in chunks),
    )
