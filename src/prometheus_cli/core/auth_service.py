"""Auth service — OAuth resource servers on the ``AUTH_SERVER`` canister."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.models import ResourceServer
from prometheus_cli.core.results import option, unwrap, unwrap_option

OPENID_SCOPE: tuple[str, str] = (
    "openid",
    "Grants access to the user's unique identifier (Principal).",
)
CHARGE_SCOPE: tuple[str, str] = (
    "prometheus:charge",
    "Allows the canister to request payments from the user.",
)


def server_scopes(*, charges: bool) -> list[tuple[str, str]]:
    """Scopes a resource server requests; ``openid`` is always present."""
    return [OPENID_SCOPE, CHARGE_SCOPE] if charges else [OPENID_SCOPE]


class AuthService(CanisterService):
    """Client for the ``AUTH_SERVER`` canister."""

    interface = "auth_server"
    canister_name = "AUTH_SERVER"

    def list_my_resource_servers(self) -> list[ResourceServer]:
        result = self._call("list_my_resource_servers")
        servers = unwrap(result, action="Failed to list resource servers")
        return [self._parse(raw) for raw in servers]

    def register_resource_server(
        self,
        *,
        name: str,
        logo_uri: str,
        uris: Sequence[str],
        initial_service_principal: str,
        scopes: Sequence[tuple[str, str]],
        accepted_payment_canisters: Sequence[str],
        frontend_host: str | None = None,
    ) -> ResourceServer:
        result = self._call(
            "register_resource_server",
            {
                "name": name,
                "logo_uri": logo_uri,
                "uris": list(uris),
                "initial_service_principal": initial_service_principal,
                "scopes": [tuple(scope) for scope in scopes],
                "accepted_payment_canisters": list(accepted_payment_canisters),
                "frontend_host": option(frontend_host),
            },
        )
        return self._parse(unwrap(result, action="Failed to register resource server"))

    def update_resource_server(
        self,
        resource_server_id: str,
        *,
        name: str | None = None,
        logo_uri: str | None = None,
        uris: Sequence[str] | None = None,
        scopes: Sequence[tuple[str, str]] | None = None,
        accepted_payment_canisters: Sequence[str] | None = None,
        service_principals: Sequence[str] | None = None,
        frontend_host: str | None = None,
    ) -> str:
        """Update only the fields passed; returns the canister's message."""
        result = self._call(
            "update_resource_server",
            {
                "resource_server_id": resource_server_id,
                "name": option(name),
                "logo_uri": option(logo_uri),
                "uris": option(None if uris is None else list(uris)),
                "scopes": option(None if scopes is None else [tuple(s) for s in scopes]),
                "accepted_payment_canisters": option(
                    None if accepted_payment_canisters is None else list(accepted_payment_canisters),
                ),
                "service_principals": option(
                    None if service_principals is None else list(service_principals),
                ),
                "frontend_host": option(frontend_host),
            },
        )
        return str(unwrap(result, action="Failed to update resource server"))

    def delete_resource_server(self, resource_server_id: str) -> str:
        result = self._call("delete_resource_server", resource_server_id)
        return str(unwrap(result, action="Failed to delete resource server"))

    @staticmethod
    def _parse(raw: Mapping[str, Any]) -> ResourceServer:
        status = raw.get("status") or {"pending": None}
        return ResourceServer(
            resource_server_id=str(raw["resource_server_id"]),
            name=str(raw["name"]),
            owner=str(raw["owner"]),
            status=next(iter(status)),
            uris=tuple(str(uri) for uri in raw.get("uris", [])),
            scopes=tuple((str(s), str(d)) for s, d in raw.get("scopes", [])),
            accepted_payment_canisters=tuple(
                str(p) for p in raw.get("accepted_payment_canisters", [])
            ),
            logo_uri=str(raw.get("logo_uri", "")),
            service_principals=tuple(str(p) for p in raw.get("service_principals", [])),
            frontend_host=unwrap_option(raw.get("frontend_host", [])),
        )
