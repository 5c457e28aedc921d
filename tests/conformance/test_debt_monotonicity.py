"""
Debt Monotonicity Conformance Tests

INVARIANT: For every debt d, over any sequence of repayments:

    remaining(d, t0) = original(d)            at creation
    remaining(d, t+1) <= remaining(d, t)      always
    remaining(d, t) >= 0                      always
    original(d) never changes

A repayment larger than the remainder is rejected, never clamped.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from decimal import Decimal

from gameledger import Ledger, InvalidAmount, NotFound, BANK


money = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("10000"),
                    places=2, allow_nan=False, allow_infinity=False)


def _ledger_with_debtor():
    ledger = Ledger("debts", roster=(), verbose=False)
    debtor = ledger.add_player("Debtor", "#FF6B6B")
    return ledger, debtor.id


class TestDebtCreation:

    @given(money)
    @settings(max_examples=100)
    def test_remaining_starts_at_original(self, amount):
        ledger, pid = _ledger_with_debtor()
        debt = ledger.add_debt(pid, BANK, amount)
        assert debt.remaining_amount == debt.original_amount == amount


class TestRepaymentSequences:

    @given(money, st.lists(st.one_of(st.none(), money), max_size=20))
    @settings(max_examples=200)
    def test_remaining_never_increases(self, original, repayments):
        """
        PROPERTY: Any mix of partial and full repayments, accepted or
        rejected, keeps remaining within [0, previous remaining].
        """
        ledger, pid = _ledger_with_debtor()
        debt_id = ledger.add_debt(pid, BANK, original).id
        previous = original

        for amount in repayments:
            try:
                ledger.repay_debt(debt_id, amount)
            except InvalidAmount:
                assert amount is not None and amount > previous
            current = ledger.get_debt(debt_id)
            assert Decimal("0") <= current.remaining_amount <= previous
            assert current.original_amount == original
            previous = current.remaining_amount

    @given(money, money)
    @settings(max_examples=100)
    def test_over_repayment_leaves_debt_unchanged(self, original, extra):
        ledger, pid = _ledger_with_debtor()
        debt = ledger.add_debt(pid, BANK, original)
        with pytest.raises(InvalidAmount):
            ledger.repay_debt(debt.id, original + extra)
        assert ledger.get_debt(debt.id) == debt

    def test_full_repayment_is_idempotent(self):
        ledger, pid = _ledger_with_debtor()
        debt = ledger.add_debt(pid, BANK, 100)
        ledger.repay_debt(debt.id)
        ledger.repay_debt(debt.id)
        assert ledger.get_debt(debt.id).remaining_amount == Decimal("0")

    def test_partial_repayment_on_settled_debt_rejected(self):
        ledger, pid = _ledger_with_debtor()
        debt = ledger.add_debt(pid, BANK, 100)
        ledger.repay_debt(debt.id)
        with pytest.raises(InvalidAmount):
            ledger.repay_debt(debt.id, "0.01")


class TestRemovedDebts:

    def test_every_lookup_of_removed_debt_is_not_found(self):
        ledger, pid = _ledger_with_debtor()
        debt = ledger.add_debt(pid, BANK, 100)
        ledger.remove_debt(debt.id)

        for call in (ledger.get_debt, ledger.repay_debt, ledger.remove_debt, ledger.describe_debt):
            with pytest.raises(NotFound):
                call(debt.id)
        assert ledger.list_debts() == []

    def test_removed_id_is_not_reused(self):
        ledger, pid = _ledger_with_debtor()
        first = ledger.add_debt(pid, BANK, 100)
        ledger.remove_debt(first.id)
        assert ledger.add_debt(pid, BANK, 100).id != first.id
