"""ic-py backed implementation of :class:`~prometheus_cli.core.protocols.CanisterGateway`.

This module and :mod:`prometheus_cli.infra.candid` are the only places in
the codebase that import ``ic``.
Agent and transport exceptions are caught here and re-raised as
:class:`~prometheus_cli.exceptions.RemoteCallError`; nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from prometheus_cli.core.models import PrincipalText
from prometheus_cli.core.pem import KeyMaterial
from prometheus_cli.exceptions import EnvironmentError, IdentityError, RemoteCallError
from prometheus_cli.infra.candid import Interfaces, MethodSignature, load_interfaces

logger = logging.getLogger(__name__)

_TUPLE_FIELD = re.compile(r"^_(\d+)_$")


def _import_ic() -> Any:
    """Import and return the ic-py modules needed by the gateway."""
    try:
        import ic.agent
        import ic.candid
        import ic.certificate
        import ic.client
        import ic.identity
        import ic.principal
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "ic-py is not installed. Install with: pip install ic-py",
        ) from exc
    return ic


# ---------------------------------------------------------------------------
# Value normalisation
# ---------------------------------------------------------------------------

def to_candid(value: Any) -> Any:
    """Convert service-level values to the shapes ic-py encodes.

    Blobs become lists of ints, tuples become lists and principal texts
    become plain strings.
    """
    if isinstance(value, PrincipalText):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, Mapping):
        return {key: to_candid(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_candid(item) for item in value]
    return value


def from_candid(value: Any) -> Any:
    """Convert ic-py decoded values to plain Python values.

    Principal objects become :class:`PrincipalText` and records with
    positional field names (``_0_``, ``_1_`` …) become tuples.
    """
    if hasattr(value, "to_str") and callable(value.to_str):
        return PrincipalText(value.to_str())
    if isinstance(value, Mapping):
        positions = [_TUPLE_FIELD.match(str(key)) for key in value]
        if value and all(positions):
            ordered = sorted(value.items(), key=lambda item: int(_TUPLE_FIELD.match(item[0]).group(1)))
            return tuple(from_candid(item) for _, item in ordered)
        return {key: from_candid(item) for key, item in value.items()}
    if isinstance(value, list):
        return [from_candid(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class IcAgentGateway:
    """Concrete :class:`CanisterGateway` backed by an ic-py ``Agent``.

    Usage::

        gateway = IcAgentGateway(key_material, host="https://icp-api.io")
        gateway.call(registry_id, "mcp_registry", "is_wasm_verified", wasm_hex)

    This class satisfies the protocol structurally — no explicit
    inheritance required.
    """

    def __init__(
        self,
        key: KeyMaterial,
        *,
        host: str,
        interfaces: Interfaces | None = None,
    ) -> None:
        ic = _import_ic()
        try:
            self._identity = ic.identity.Identity(
                privkey=key.secret_hex,
                type=key.key_type.value,
            )
        except Exception as exc:
            raise IdentityError(f"Could not create identity from key: {exc}") from exc
        self._agent = ic.agent.Agent(self._identity, ic.client.Client(url=host))
        self._ic = ic
        self._interfaces = interfaces if interfaces is not None else load_interfaces()
        self._host = host
        logger.debug("Agent ready for %s as %s", host, self.principal)

    @property
    def principal(self) -> str:
        return PrincipalText(self._identity.sender().to_str())

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def call(self, canister_id: str, interface: str, method: str, *args: Any) -> Any:
        """Encode *args*, call *method* and return the decoded reply.

        Returns ``None`` for methods without a return value.

        Raises
        ------
        RemoteCallError
            When the method is not declared, arguments do not match the
            declaration, or the replica rejects the call.
        """
        signature = self._signature(interface, method)
        if len(args) != len(signature.args):
            raise RemoteCallError(
                f"{method} expects {len(signature.args)} argument(s), got {len(args)}.",
            )
        try:
            encoded = self._ic.candid.encode(
                [
                    {"type": arg_type, "value": to_candid(arg)}
                    for arg_type, arg in zip(signature.args, args)
                ],
            )
        except Exception as exc:
            raise RemoteCallError(f"Could not encode arguments for {method}: {exc}") from exc

        send = self._agent.query_raw if signature.query else self._agent.update_raw
        return_types = list(signature.rets) or None
        try:
            reply = send(canister_id, method, encoded, return_types)
        except Exception as exc:
            raise RemoteCallError(f"Call to {method} on {canister_id} failed: {exc}") from exc
        return self._first_value(method, reply)

    def read_module_hash(self, canister_id: str) -> bytes | None:
        """Return the module hash of *canister_id* from certified state."""
        ic = self._ic
        try:
            principal = ic.principal.Principal.from_str(canister_id)
            path = [b"canister", principal.bytes, b"module_hash"]
            certificate = self._agent.read_state_raw(canister_id, [path])
            module_hash = ic.certificate.lookup(path, certificate)
        except Exception as exc:
            raise RemoteCallError(
                f"Could not read state for canister {canister_id}: {exc}",
            ) from exc
        return bytes(module_hash) if module_hash else None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _signature(self, interface: str, method: str) -> MethodSignature:
        try:
            return self._interfaces[interface][method]
        except KeyError:
            raise RemoteCallError(
                f"No declaration for {interface}.{method}.",
            ) from None

    @staticmethod
    def _first_value(method: str, reply: Any) -> Any:
        if not reply:
            return None
        if not isinstance(reply, list):
            raise RemoteCallError(f"Unexpected reply from {method}: {reply!r}")
        first = reply[0]
        value = first.get("value") if isinstance(first, Mapping) else first
        return from_candid(value)
