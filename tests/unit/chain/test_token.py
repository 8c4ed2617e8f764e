"""Tests for the in-memory Token."""

import pytest

from swaprouter.chain import StatefulComponent, Token
from swaprouter.chain.base import AssetToken
from swaprouter.constants import UINT256_MAX
from tests.helpers import ALICE, BOB, TOKEN_A, make_token


@pytest.fixture
def token() -> Token:
    t = make_token()
    t.mint(ALICE, 1_000)
    return t


class TestTokenBasics:
    """Tests for construction and balances."""

    def test_satisfies_protocols(self, token):
        """Token is an AssetToken and can be snapshotted."""
        assert isinstance(token, AssetToken)
        assert isinstance(token, StatefulComponent)

    def test_address_is_normalized(self):
        """Addresses are stored lowercase."""
        assert Token(TOKEN_A.upper().replace("0X", "0x"), "AAA").address == TOKEN_A

    def test_units(self):
        """units() scales whole tokens by decimals."""
        assert Token(TOKEN_A, "USD", decimals=6).units(5) == 5_000_000

    def test_mint_increases_supply(self, token):
        """Minting credits the account and the total supply."""
        assert token.balance_of(ALICE) == 1_000
        assert token.total_supply == 1_000

    def test_unknown_account_has_zero_balance(self, token):
        """Accounts never credited hold nothing."""
        assert token.balance_of(BOB) == 0

    def test_invalid_decimals(self):
        """Decimals outside [0, 77] are rejected."""
        with pytest.raises(ValueError):
            Token(TOKEN_A, "AAA", decimals=78)

    def test_invalid_fee(self):
        """A 100% transfer fee is rejected."""
        with pytest.raises(ValueError):
            Token(TOKEN_A, "AAA", transfer_fee_bps=10_000)


class TestTransfer:
    """Tests for transfer and transfer_from."""

    def test_transfer(self, token):
        """A funded transfer moves the full amount."""
        assert token.transfer(ALICE, BOB, 400)
        assert token.balance_of(ALICE) == 600
        assert token.balance_of(BOB) == 400

    def test_transfer_insufficient_balance(self, token):
        """Overdrawing returns False and changes nothing."""
        assert not token.transfer(ALICE, BOB, 1_001)
        assert token.balance_of(ALICE) == 1_000
        assert token.balance_of(BOB) == 0

    def test_transfer_negative_amount(self, token):
        """Negative amounts are refused."""
        assert not token.transfer(ALICE, BOB, -1)

    def test_transfer_from_requires_allowance(self, token):
        """transfer_from without an allowance fails."""
        assert not token.transfer_from(BOB, ALICE, BOB, 1)

    def test_transfer_from_spends_allowance(self, token):
        """transfer_from decrements a finite allowance."""
        token.approve(ALICE, BOB, 500)
        assert token.transfer_from(BOB, ALICE, BOB, 200)
        assert token.allowance(ALICE, BOB) == 300
        assert token.balance_of(BOB) == 200

    def test_unlimited_allowance(self, token):
        """The maximum allowance is never decremented."""
        token.approve(ALICE, BOB, UINT256_MAX)
        assert token.transfer_from(BOB, ALICE, BOB, 200)
        assert token.allowance(ALICE, BOB) == UINT256_MAX

    def test_failed_transfer_from_keeps_allowance(self, token):
        """An underfunded transfer_from does not consume allowance."""
        token.approve(ALICE, BOB, 5_000)
        assert not token.transfer_from(BOB, ALICE, BOB, 2_000)
        assert token.allowance(ALICE, BOB) == 5_000

    def test_approve_out_of_range(self, token):
        """Allowances outside uint256 are refused."""
        assert not token.approve(ALICE, BOB, -1)
        assert not token.approve(ALICE, BOB, UINT256_MAX + 1)


class TestTransferFee:
    """Tests for fee-on-transfer assets."""

    def test_fee_is_burned(self):
        """The recipient gets the amount minus the fee; the fee leaves supply."""
        token = make_token(transfer_fee_bps=100)
        token.mint(ALICE, 1_000)
        assert token.transfer(ALICE, BOB, 1_000)
        assert token.balance_of(ALICE) == 0
        assert token.balance_of(BOB) == 990
        assert token.total_supply == 990


class TestSnapshot:
    """Tests for snapshot and restore."""

    def test_restore_undoes_changes(self, token):
        """Restoring a snapshot resets balances, allowances and supply."""
        state = token.snapshot()
        token.approve(ALICE, BOB, 10)
        token.transfer(ALICE, BOB, 100)
        token.mint(BOB, 5)

        token.restore(state)

        assert token.balance_of(ALICE) == 1_000
        assert token.balance_of(BOB) == 0
        assert token.allowance(ALICE, BOB) == 0
        assert token.total_supply == 1_000

    def test_snapshot_is_a_copy(self, token):
        """Later mutations do not leak into an earlier snapshot."""
        state = token.snapshot()
        token.transfer(ALICE, BOB, 100)
        balances, _, _ = state
        assert balances[ALICE] == 1_000
