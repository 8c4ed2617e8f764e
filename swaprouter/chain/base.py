"""Capability protocols consumed by the router.

The router never prices or settles anything itself. It talks to two kinds
of collaborator: fungible assets (balances, transfers, approvals) and
venues (quotes and swaps). Both are described structurally so any object
with the right methods can be registered.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AssetToken(Protocol):
    """Fungible asset with standard transfer semantics.

    Transfer and approval methods report failure by returning False rather
    than raising; the router turns a False into TransferFailed or
    ApprovalFailed.
    """

    @property
    def address(self) -> str: ...

    @property
    def symbol(self) -> str: ...

    @property
    def decimals(self) -> int: ...

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...


@runtime_checkable
class Venue(Protocol):
    """Exchange venue with a read-only quote and a state-changing swap."""

    @property
    def address(self) -> str: ...

    def quote(self, asset_in: AssetToken, asset_out: AssetToken, amount_in: int) -> int:
        """Expected output for amount_in, or 0 if the pair is not served.

        Must not raise for an unsupported pair.
        """
        ...

    def swap(
        self,
        asset_in: AssetToken,
        asset_out: AssetToken,
        amount_in: int,
        min_amount_out: int,
        caller: str,
    ) -> int:
        """Pull amount_in from caller and pay the output back to caller.

        Raises:
            VenueSwapFailed: If the venue cannot deliver at least
                min_amount_out, or cannot deliver at all
        """
        ...


@runtime_checkable
class StatefulComponent(Protocol):
    """Component whose state can be captured and restored by the ledger."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


__all__ = ["AssetToken", "Venue", "StatefulComponent"]
