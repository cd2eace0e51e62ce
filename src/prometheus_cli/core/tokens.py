"""Token descriptors and decimal-aware amount conversion.

Amounts typed by users ("12.5") are converted to the token's atomic
integer units with string arithmetic so no float rounding can creep in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from prometheus_cli.exceptions import ValidationError

_AMOUNT = re.compile(r"^\d*(\.\d*)?$")


@dataclass(frozen=True, slots=True)
class Token:
    """An ICRC-1 ledger token."""

    canister_id: str
    """Ledger canister ID."""

    name: str
    symbol: str
    decimals: int
    fee: int
    """Transfer fee in atomic units."""

    def to_atomic(self, amount: str | int | Decimal) -> int:
        """Convert a human-readable amount to atomic units.

        Raises
        ------
        ValidationError
            If *amount* is not a plain non-negative decimal number or has
            more fractional digits than the token supports.
        """
        text = format(amount, "f") if isinstance(amount, Decimal) else str(amount).strip()
        if not text or text == "." or not _AMOUNT.match(text):
            raise ValidationError(f'Invalid amount "{amount}".')

        integer, _, fraction = text.partition(".")
        if len(fraction) > self.decimals:
            raise ValidationError(
                f'Amount "{amount}" has more than {self.decimals} decimal places.',
            )
        return int((integer or "0") + fraction.ljust(self.decimals, "0"))

    def from_atomic(self, atomic: int) -> str:
        """Render atomic units as a decimal string without trailing zeros."""
        digits = str(abs(atomic)).rjust(self.decimals + 1, "0")
        sign = "-" if atomic < 0 else ""
        if self.decimals == 0:
            return f"{sign}{digits}"
        integer = digits[: -self.decimals]
        fraction = digits[-self.decimals:].rstrip("0")
        return f"{sign}{integer}.{fraction}" if fraction else f"{sign}{integer}"


def default_tokens(usdc_canister_id: str) -> dict[str, Token]:
    """Return the known tokens keyed by upper-case symbol."""
    usdc = Token(
        canister_id=usdc_canister_id,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        fee=10_000,
    )
    return {usdc.symbol: usdc}


def find_token(tokens: dict[str, Token], symbol: str) -> Token:
    """Look up a token by symbol, case-insensitively."""
    token = tokens.get(symbol.upper())
    if token is None:
        available = ", ".join(t.symbol for t in tokens.values())
        raise ValidationError(
            f'Invalid token symbol "{symbol}".',
            hint=f"Available symbols are: {available}",
        )
    return token
