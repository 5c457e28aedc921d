"""
debts.py - Debt repayment, party resolution and summaries

=== DEBT MODEL ===

A Debt is an IOU from a debtor (always a player at creation) to a creditor
(a player or the bank):

    original_amount   fixed at creation
    remaining_amount  starts at original_amount, only goes down, floor 0

Repayment only reduces remaining_amount. It never moves player cash; a
caller that wants a linked cash transfer performs it separately.

=== DANGLING PARTIES ===

Removing a player or resetting the roster does not touch debts, so a debt
may name a party that no longer exists. Lookups return UnresolvedParty for
such ids instead of raising, and render it as "unknown".
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Optional

from .core import (
    BANK, DEFAULT_PARTY_COLOR, ZERO,
    Debt, LedgerView, Party, BankParty, ResolvedParty, UnresolvedParty,
    InvalidAmount, MoneyLike, to_money,
)


@dataclass(frozen=True, slots=True)
class DebtView:
    """A debt together with its resolved parties, ready for display."""
    debt: Debt
    debtor: Party
    creditor: Party
    debtor_color: str

    @property
    def is_bank_debt(self) -> bool:
        return isinstance(self.creditor, BankParty)

    def describe(self) -> str:
        return (f"{self.debtor.display_name} owes {self.creditor.display_name} "
                f"{self.debt.remaining_amount} (of {self.debt.original_amount})")


@dataclass(frozen=True, slots=True)
class DebtSummary:
    """Outstanding totals for one party across all unsettled debts."""
    party_id: str
    owed: Decimal
    receivable: Decimal

    @property
    def net(self) -> Decimal:
        """Receivable minus owed. Negative means the party is a net debtor."""
        return self.receivable - self.owed


def compute_repayment(debt: Debt, amount: Optional[MoneyLike] = None) -> Debt:
    """
    Compute the debt record after a repayment. Pure function.

    Args:
        debt: Current debt record
        amount: Partial repayment, or None to repay in full

    Returns:
        New Debt with reduced remaining_amount

    Raises:
        InvalidAmount: If a partial amount is malformed, non-positive, or
                       exceeds the remaining balance
    """
    if amount is None:
        return replace(debt, remaining_amount=ZERO)

    amount = to_money(amount)
    if amount <= ZERO:
        raise InvalidAmount(f"Repayment must be positive, got {amount}")
    if amount > debt.remaining_amount:
        raise InvalidAmount(
            f"Repayment of {amount} exceeds remaining {debt.remaining_amount} on {debt.id}"
        )
    return replace(debt, remaining_amount=debt.remaining_amount - amount)


def resolve_party(view: LedgerView, party_id: str) -> Party:
    """Look up a debt party without ever raising."""
    if party_id == BANK:
        return BankParty()
    player = view.find_player(party_id)
    if player is None:
        return UnresolvedParty(party_id)
    return ResolvedParty(player)


def describe_debt(view: LedgerView, debt: Debt) -> DebtView:
    debtor = resolve_party(view, debt.debtor_id)
    color = debtor.player.color if isinstance(debtor, ResolvedParty) else DEFAULT_PARTY_COLOR
    return DebtView(
        debt=debt,
        debtor=debtor,
        creditor=resolve_party(view, debt.creditor_id),
        debtor_color=color,
    )


def summarize_debts(debts: Iterable[Debt], party_id: str) -> DebtSummary:
    """
    Total what a party owes and is owed over outstanding balances.

    Settled debts contribute zero, so they need not be filtered out first.
    """
    owed = ZERO
    receivable = ZERO
    for debt in debts:
        if debt.debtor_id == party_id:
            owed += debt.remaining_amount
        if debt.creditor_id == party_id:
            receivable += debt.remaining_amount
    return DebtSummary(party_id=party_id, owed=owed, receivable=receivable)
