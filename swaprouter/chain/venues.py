"""Reference venue implementations.

Two venue shapes cover the liquidity the router needs to be exercised
against:
- FixedRateVenue: an oracle shim that trades at configured rational rates
  out of its own inventory
- ConstantProductVenue: x * y = k pool with a fee on the input amount,
  whose reserves are its own token balances
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from swaprouter.chain.base import AssetToken
from swaprouter.errors import VenueSwapFailed
from swaprouter.models.types import normalize_address, short
from swaprouter.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class FixedRate:
    """Output per input as numerator / denominator of raw units."""

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        if self.numerator < 0:
            raise ValueError(f"Rate numerator must be non-negative, got {self.numerator}")
        if self.denominator <= 0:
            raise ValueError(f"Rate denominator must be positive, got {self.denominator}")

    def apply(self, amount_in: int) -> int:
        return (S(amount_in) * self.numerator // self.denominator).value


class FixedRateVenue:
    """Oracle-priced venue paying out of its own inventory.

    Quotes 0 for pairs without a configured rate and for amounts its
    inventory cannot cover.
    """

    def __init__(self, address: str) -> None:
        self._address = normalize_address(address)
        self._rates: dict[tuple[str, str], FixedRate] = {}

    @property
    def address(self) -> str:
        return self._address

    def __repr__(self) -> str:
        return f"FixedRateVenue({short(self._address)})"

    def set_rate(
        self,
        asset_in: AssetToken,
        asset_out: AssetToken,
        numerator: int,
        denominator: int = 1,
    ) -> None:
        """Set the one-directional rate asset_in -> asset_out."""
        self._rates[(asset_in.address, asset_out.address)] = FixedRate(numerator, denominator)

    def set_pair(
        self,
        asset_a: AssetToken,
        asset_b: AssetToken,
        numerator: int,
        denominator: int = 1,
    ) -> None:
        """Set a -> b at numerator/denominator and b -> a at the inverse."""
        self.set_rate(asset_a, asset_b, numerator, denominator)
        if numerator > 0:
            self.set_rate(asset_b, asset_a, denominator, numerator)

    def rate(self, asset_in: AssetToken, asset_out: AssetToken) -> FixedRate | None:
        return self._rates.get((asset_in.address, asset_out.address))

    def quote(self, asset_in: AssetToken, asset_out: AssetToken, amount_in: int) -> int:
        rate = self.rate(asset_in, asset_out)
        if rate is None or amount_in <= 0:
            return 0
        amount_out = rate.apply(amount_in)
        if amount_out > asset_out.balance_of(self._address):
            return 0
        return amount_out

    def swap(
        self,
        asset_in: AssetToken,
        asset_out: AssetToken,
        amount_in: int,
        min_amount_out: int,
        caller: str,
    ) -> int:
        amount_out = self.quote(asset_in, asset_out, amount_in)
        if amount_out == 0:
            raise VenueSwapFailed(
                f"{self!r} cannot serve {amount_in} {asset_in.symbol} -> {asset_out.symbol}"
            )
        if amount_out < min_amount_out:
            raise VenueSwapFailed(f"{self!r} output {amount_out} below {min_amount_out}")
        if not asset_in.transfer_from(self._address, caller, self._address, amount_in):
            raise VenueSwapFailed(f"{self!r} could not pull {amount_in} {asset_in.symbol}")
        if not asset_out.transfer(self._address, caller, amount_out):
            raise VenueSwapFailed(f"{self!r} could not pay {amount_out} {asset_out.symbol}")

        logger.debug(
            "venue_swap",
            venue=short(self._address),
            token_in=asset_in.symbol,
            token_out=asset_out.symbol,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out

    def snapshot(self) -> dict[tuple[str, str], FixedRate]:
        return dict(self._rates)

    def restore(self, state: dict[tuple[str, str], FixedRate]) -> None:
        self._rates = dict(state)


class ConstantProductVenue:
    """Constant product pool: x * y = k with a fee on input.

    Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)
    where fee = 10000 - fee_bps.
    """

    def __init__(
        self,
        address: str,
        token0: AssetToken,
        token1: AssetToken,
        fee_bps: int = 30,
    ) -> None:
        if token0.address == token1.address:
            raise ValueError("Constant product pool needs two distinct tokens")
        if not 0 <= fee_bps < 10_000:
            raise ValueError(f"fee_bps must be in [0, 10000), got {fee_bps}")
        self._address = normalize_address(address)
        self.token0 = token0
        self.token1 = token1
        self.fee_bps = fee_bps

    @property
    def address(self) -> str:
        return self._address

    @property
    def fee_multiplier(self) -> int:
        """10000 - fee_bps; 9970 for a 0.3% pool."""
        return 10_000 - self.fee_bps

    def __repr__(self) -> str:
        return (
            f"ConstantProductVenue({short(self._address)}, "
            f"{self.token0.symbol}/{self.token1.symbol})"
        )

    def get_reserves(self, asset_in: AssetToken) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        reserve0 = self.token0.balance_of(self._address)
        reserve1 = self.token1.balance_of(self._address)
        if asset_in.address == self.token0.address:
            return reserve0, reserve1
        if asset_in.address == self.token1.address:
            return reserve1, reserve0
        raise ValueError(f"Token {asset_in.address} not in pool")

    def serves(self, asset_in: AssetToken, asset_out: AssetToken) -> bool:
        pair = {self.token0.address, self.token1.address}
        return asset_in.address != asset_out.address and {
            asset_in.address,
            asset_out.address,
        } == pair

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
            return 0
        amount_in_with_fee = S(amount_in) * self.fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * 10_000 + amount_in_with_fee
        return (numerator // denominator).value

    def quote(self, asset_in: AssetToken, asset_out: AssetToken, amount_in: int) -> int:
        if not self.serves(asset_in, asset_out):
            return 0
        reserve_in, reserve_out = self.get_reserves(asset_in)
        return self.get_amount_out(amount_in, reserve_in, reserve_out)

    def swap(
        self,
        asset_in: AssetToken,
        asset_out: AssetToken,
        amount_in: int,
        min_amount_out: int,
        caller: str,
    ) -> int:
        if not self.serves(asset_in, asset_out):
            raise VenueSwapFailed(f"{self!r} does not trade {asset_in.symbol}/{asset_out.symbol}")
        reserve_in, reserve_out = self.get_reserves(asset_in)
        if not asset_in.transfer_from(self._address, caller, self._address, amount_in):
            raise VenueSwapFailed(f"{self!r} could not pull {amount_in} {asset_in.symbol}")

        # Price what actually arrived, not what was sent
        received = (S(asset_in.balance_of(self._address)) - reserve_in).value
        amount_out = self.get_amount_out(received, reserve_in, reserve_out)
        if amount_out == 0 or amount_out < min_amount_out:
            raise VenueSwapFailed(f"{self!r} output {amount_out} below {min_amount_out}")
        if not asset_out.transfer(self._address, caller, amount_out):
            raise VenueSwapFailed(f"{self!r} could not pay {amount_out} {asset_out.symbol}")

        logger.debug(
            "venue_swap",
            venue=short(self._address),
            token_in=asset_in.symbol,
            token_out=asset_out.symbol,
            amount_in=received,
            amount_out=amount_out,
        )
        return amount_out

    def snapshot(self) -> int:
        # Reserves live in the token ledgers; only the fee is venue state
        return self.fee_bps

    def restore(self, state: int) -> None:
        self.fee_bps = state


__all__ = ["FixedRate", "FixedRateVenue", "ConstantProductVenue"]
