"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, subprocess or network I/O.
* No imports from ``cli`` or ``infra``.
* Services talk to canisters only through
  :class:`~prometheus_cli.core.protocols.CanisterGateway`.
"""

from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.core.pem import KeyMaterial, KeyType, decode_pem_identity
from prometheus_cli.core.protocols import CanisterGateway
from prometheus_cli.core.tokens import Token

__all__: list[str] = [
    "CanisterGateway",
    "KeyMaterial",
    "KeyType",
    "NetworkConfig",
    "Token",
    "decode_pem_identity",
]
