"""App-bounty service — bounties for building new apps (``APP_BOUNTIES``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.models import AppBounty
from prometheus_cli.core.results import unwrap, unwrap_option


class AppBountyService(CanisterService):
    interface = "app_bounties"
    canister_name = "APP_BOUNTIES"

    def list_bounties(self) -> list[AppBounty]:
        return [self._parse(raw) for raw in self._call("get_all_bounties")]

    def get_bounty(self, bounty_id: int) -> AppBounty | None:
        raw = unwrap_option(self._call("get_bounty", bounty_id))
        return self._parse(raw) if raw else None

    def create_bounty(self, fields: Mapping[str, Any]) -> int:
        """Create a bounty from a loaded bounty file; returns its ID."""
        result = self._call("create_bounty", *self._positional(fields))
        return int(unwrap(result, action="Failed to create app bounty"))

    def update_bounty(self, bounty_id: int, fields: Mapping[str, Any]) -> None:
        result = self._call("update_bounty", bounty_id, *self._positional(fields))
        unwrap(result, action=f"Failed to update app bounty {bounty_id}")

    @staticmethod
    def _positional(fields: Mapping[str, Any]) -> tuple[str, str, int, str, str, str]:
        return (
            str(fields["title"]),
            str(fields["short_description"]),
            int(fields["reward_amount"]),
            str(fields["reward_token"]),
            str(fields["status"]),
            str(fields["details_markdown"]),
        )

    @staticmethod
    def _parse(raw: Mapping[str, Any]) -> AppBounty:
        return AppBounty(
            id=int(raw["id"]),
            title=str(raw["title"]),
            short_description=str(raw["short_description"]),
            reward_amount=int(raw["reward_amount"]),
            reward_token=str(raw["reward_token"]),
            status=str(raw["status"]),
            details_markdown=str(raw["details_markdown"]),
            created_at=int(raw.get("created_at", 0)),
        )
