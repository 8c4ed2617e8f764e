"""In-memory fungible token.

Balances and allowances are plain dicts keyed by normalized address. A
non-zero transfer_fee_bps burns that share of every transfer, which models
"fee-on-transfer" assets where the recipient gets less than was sent.
"""

from __future__ import annotations

import structlog

from swaprouter.constants import UINT256_MAX
from swaprouter.models.types import normalize_address, short
from swaprouter.safe_int import S, SafeIntError

logger = structlog.get_logger()

_BPS = 10_000


class Token:
    """Fungible asset with ERC20-style balances and allowances."""

    def __init__(
        self,
        address: str,
        symbol: str,
        decimals: int = 18,
        transfer_fee_bps: int = 0,
    ) -> None:
        if not 0 <= decimals <= 77:
            raise ValueError(f"decimals must be in [0, 77], got {decimals}")
        if not 0 <= transfer_fee_bps < _BPS:
            raise ValueError(f"transfer_fee_bps must be in [0, 10000), got {transfer_fee_bps}")
        self._address = normalize_address(address)
        self._symbol = symbol
        self._decimals = decimals
        self.transfer_fee_bps = transfer_fee_bps
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self.total_supply = 0

    @property
    def address(self) -> str:
        return self._address

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    def __repr__(self) -> str:
        return f"Token({self._symbol}, {short(self._address)})"

    def units(self, whole: int) -> int:
        """Raw amount for a number of whole tokens."""
        return whole * 10**self._decimals

    def mint(self, account: str, amount: int) -> None:
        """Credit new supply to account."""
        account = normalize_address(account)
        self._balances[account] = (S(self.balance_of(account)) + amount).to_uint256()
        self.total_supply = (S(self.total_supply) + amount).to_uint256()

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if not 0 <= amount <= UINT256_MAX:
            return False
        self._allowances[(normalize_address(owner), normalize_address(spender))] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self._move(normalize_address(sender), normalize_address(to), amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            logger.debug(
                "transfer_allowance_exceeded",
                token=self._symbol,
                owner=short(owner),
                spender=short(spender),
                allowance=allowed,
                amount=amount,
            )
            return False
        if not self._move(owner, normalize_address(to), amount):
            return False
        # Max allowance is treated as unlimited
        if allowed != UINT256_MAX:
            self._allowances[(owner, spender)] = allowed - amount
        return True

    def _move(self, sender: str, to: str, amount: int) -> bool:
        if amount < 0:
            return False
        try:
            sender_balance = (S(self.balance_of(sender)) - amount).to_uint256()
        except SafeIntError:
            logger.debug(
                "transfer_insufficient_balance",
                token=self._symbol,
                sender=short(sender),
                balance=self.balance_of(sender),
                amount=amount,
            )
            return False

        fee = amount * self.transfer_fee_bps // _BPS
        self._balances[sender] = sender_balance
        self._balances[to] = self.balance_of(to) + amount - fee
        self.total_supply -= fee
        return True

    def snapshot(self) -> tuple[dict[str, int], dict[tuple[str, str], int], int]:
        return dict(self._balances), dict(self._allowances), self.total_supply

    def restore(self, state: tuple[dict[str, int], dict[tuple[str, str], int], int]) -> None:
        balances, allowances, total_supply = state
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self.total_supply = total_supply


__all__ = ["Token"]
