"""API keys issued by an MCP server canister.

Unlike the other services there is no configured target: every method
takes the server's canister ID.
"""

from __future__ import annotations

from collections.abc import Sequence

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.models import ApiKey


class ApiKeyService(CanisterService):
    interface = "mcp_server"

    def create_my_api_key(
        self,
        server_id: str,
        name: str,
        scopes: Sequence[str] = (),
    ) -> str:
        """Create a key; returns the raw key, shown only once."""
        return str(self._call("create_my_api_key", name, list(scopes), canister_id=server_id))

    def list_my_api_keys(self, server_id: str) -> list[ApiKey]:
        keys = self._call("list_my_api_keys", canister_id=server_id)
        return [
            ApiKey(
                hashed_key=str(raw["hashed_key"]),
                name=str(raw["info"]["name"]),
                principal=str(raw["info"]["principal"]),
                created=int(raw["info"]["created"]),
                scopes=tuple(str(s) for s in raw["info"].get("scopes", [])),
            )
            for raw in keys
        ]

    def revoke_my_api_key(self, server_id: str, hashed_key: str) -> None:
        self._call("revoke_my_api_key", hashed_key, canister_id=server_id)
