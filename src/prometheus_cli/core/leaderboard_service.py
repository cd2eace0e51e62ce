"""Leaderboard service — ranked tool-invocation counts (``LEADERBOARD``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.models import LeaderboardEntry
from prometheus_cli.core.results import unwrap


class LeaderboardService(CanisterService):
    interface = "leaderboard"
    canister_name = "LEADERBOARD"

    def get_user_leaderboard(self) -> list[LeaderboardEntry]:
        return [self._parse(raw, "user") for raw in self._call("get_user_leaderboard")]

    def get_server_leaderboard(self) -> list[LeaderboardEntry]:
        return [self._parse(raw, "server") for raw in self._call("get_server_leaderboard")]

    def get_last_updated(self) -> int:
        """Time of the last aggregation, in nanoseconds since the epoch."""
        return int(self._call("get_last_updated"))

    def trigger_manual_update(self) -> None:
        unwrap(self._call("trigger_manual_update"), action="Failed to update leaderboard")

    def get_tool_invocations_for_server(self, server_id: str) -> dict[str, int]:
        pairs = self._call("get_tool_invocations_for_server", server_id)
        return {str(tool): int(count) for tool, count in pairs}

    @staticmethod
    def _parse(raw: Mapping[str, Any], subject_key: str) -> LeaderboardEntry:
        return LeaderboardEntry(
            rank=int(raw["rank"]),
            subject=str(raw[subject_key]),
            total_invocations=int(raw["total_invocations"]),
        )
