"""Tests for InMemoryToken."""

import pytest

from swappool import FungibleToken, InMemoryToken
from tests.helpers import ALICE, BOB, CAROL, DEPLOYER, TOKEN0


def _token(supply: int = 1_000) -> InMemoryToken:
    return InMemoryToken(TOKEN0, "Bitcoin", "BTC", initial_supply=supply, owner=DEPLOYER)


class TestInMemoryToken:
    def test_initial_supply_goes_to_owner(self):
        token = _token()
        assert token.balance_of(DEPLOYER) == 1_000
        assert token.total_supply == 1_000
        assert token.balance_of(ALICE) == 0

    def test_satisfies_protocol(self):
        assert isinstance(_token(), FungibleToken)

    def test_supply_requires_owner(self):
        with pytest.raises(ValueError, match="owner"):
            InMemoryToken(TOKEN0, "Bitcoin", "BTC", initial_supply=1)

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            InMemoryToken("0xnope", "Bitcoin", "BTC")

    def test_transfer(self):
        token = _token()
        assert token.transfer(DEPLOYER, ALICE, 300)
        assert token.balance_of(DEPLOYER) == 700
        assert token.balance_of(ALICE) == 300

    def test_transfer_insufficient_balance_is_refused(self):
        token = _token()
        assert token.transfer(ALICE, BOB, 1) is False
        assert token.balance_of(BOB) == 0

    def test_addresses_are_case_insensitive(self):
        token = _token()
        token.transfer(DEPLOYER, ALICE.upper().replace("0X", "0x"), 5)
        assert token.balance_of(ALICE) == 5

    def test_transfer_from_uses_allowance(self):
        token = _token()
        token.approve(DEPLOYER, ALICE, 100)
        assert token.transfer_from(ALICE, DEPLOYER, CAROL, 60)
        assert token.balance_of(CAROL) == 60
        assert token.allowance(DEPLOYER, ALICE) == 40

    def test_transfer_from_over_allowance_is_refused(self):
        token = _token()
        token.approve(DEPLOYER, ALICE, 10)
        assert token.transfer_from(ALICE, DEPLOYER, CAROL, 11) is False
        assert token.allowance(DEPLOYER, ALICE) == 10
        assert token.balance_of(CAROL) == 0

    def test_transfer_from_over_balance_keeps_allowance(self):
        token = _token()
        token.transfer(DEPLOYER, BOB, 5)
        token.approve(BOB, ALICE, 10)
        assert token.transfer_from(ALICE, BOB, CAROL, 6) is False
        assert token.allowance(BOB, ALICE) == 10

    def test_approve_overwrites(self):
        token = _token()
        token.approve(DEPLOYER, ALICE, 10)
        token.approve(DEPLOYER, ALICE, 3)
        assert token.allowance(DEPLOYER, ALICE) == 3

    def test_negative_amount_rejected(self):
        token = _token()
        with pytest.raises(ValueError):
            token.transfer(DEPLOYER, ALICE, -1)

    def test_after_transfer_hook(self):
        calls = []

        class RecordingToken(InMemoryToken):
            def _after_transfer(self, sender, to, amount):
                calls.append((sender, to, amount))

        token = RecordingToken(TOKEN0, "Bitcoin", "BTC", initial_supply=10, owner=DEPLOYER)
        token.transfer(DEPLOYER, ALICE, 4)
        token.transfer(ALICE, BOB, 5)  # refused

        assert calls == [(DEPLOYER, ALICE, 4)]
