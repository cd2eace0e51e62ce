"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so services can be exercised against a mock gateway.
"""

from __future__ import annotations

from typing import Any, Protocol


class CanisterGateway(Protocol):
    """Contract for objects that perform encoded canister calls.

    Any object providing these members satisfies the protocol
    structurally (no explicit inheritance required).
    """

    @property
    def principal(self) -> str:
        """Textual principal of the calling identity."""
        ...  # pragma: no cover

    def call(self, canister_id: str, interface: str, method: str, *args: Any) -> Any:
        """Invoke *method* of *interface* on *canister_id*.

        Whether the call is a query or an update is decided by the
        interface declaration.  Arguments are plain Python values:

        * records are dicts, variants single-key dicts;
        * ``opt`` values are ``[]`` or ``[value]``;
        * blobs are ``bytes``, principals are ``str``.

        Returns the single decoded return value (``None`` for methods
        without a return value).

        Raises
        ------
        RemoteCallError
            When the transport fails or the canister rejects the call.
        """
        ...  # pragma: no cover

    def read_module_hash(self, canister_id: str) -> bytes | None:
        """Return the live module hash of *canister_id*, or ``None``.

        ``None`` means the hash could not be read (the canister is empty,
        does not exist, or the state read failed).
        """
        ...  # pragma: no cover
