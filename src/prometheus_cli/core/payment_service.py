"""ICRC-1 / ICRC-2 ledger client for one :class:`~prometheus_cli.core.tokens.Token`."""

from __future__ import annotations

from prometheus_cli.core.canister_service import CanisterService
from prometheus_cli.core.config import NetworkConfig
from prometheus_cli.core.protocols import CanisterGateway
from prometheus_cli.core.results import unwrap, unwrap_option
from prometheus_cli.core.tokens import Token


def _account(owner: str) -> dict[str, object]:
    return {"owner": owner, "subaccount": []}


class PaymentService(CanisterService):
    """Ledger operations against the canister of *token*."""

    interface = "icrc_ledger"

    def __init__(self, gateway: CanisterGateway, config: NetworkConfig, token: Token) -> None:
        super().__init__(gateway, config)
        self.token = token

    @property
    def canister_id(self) -> str:
        return self.token.canister_id

    def approve_allowance(self, *, spender: str, amount: int) -> int:
        """Allow *spender* to pull *amount* atomic units; returns the block index.

        The ledger fee is charged on top of *amount*.
        """
        result = self._call(
            "icrc2_approve",
            {
                "spender": _account(spender),
                "amount": amount,
                "fee": [],
                "memo": [],
                "created_at_time": [],
                "from_subaccount": [],
                "expected_allowance": [],
                "expires_at": [],
            },
        )
        return int(unwrap(result, action="ICRC-2 approve failed"))

    def get_allowance(self, *, owner: str, spender: str) -> tuple[int, int | None]:
        """Return ``(allowance, expires_at)`` granted by *owner* to *spender*."""
        result = self._call(
            "icrc2_allowance",
            {"account": _account(owner), "spender": _account(spender)},
        )
        expires_at = unwrap_option(result.get("expires_at", []))
        return int(result["allowance"]), None if expires_at is None else int(expires_at)

    def get_balance(self, owner: str | None = None) -> int:
        """Balance of *owner* (default: the caller) in atomic units."""
        return int(self._call("icrc1_balance_of", _account(owner or self._gateway.principal)))

    def transfer(self, *, to: str, amount: int) -> int:
        result = self._call(
            "icrc1_transfer",
            {
                "to": _account(to),
                "amount": amount,
                "fee": [],
                "memo": [],
                "created_at_time": [],
                "from_subaccount": [],
            },
        )
        return int(unwrap(result, action="ICRC-1 transfer failed"))
