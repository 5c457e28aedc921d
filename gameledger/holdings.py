"""
holdings.py - Share valuation and liquidation

=== VALUATION MODEL ===

Every instrument has one price shared by all players. A player's
liquidation value is

    value = Σ_k holding(k) * price(k)

=== CASH-OUT MODEL ===

A cash-out converts `amount` of liquidation value into cash. Shares are
integers, so the exact proportional reduction

    exact(k) = amount * holding(k) / value

is rounded in three steps:
    1. every instrument gives up floor(exact(k)) shares
    2. while the value given up is short of `amount`, one more share is taken
       from the instrument with the largest remaining fraction
       exact(k) - sold(k), ties going to instrument table order
    3. once a single share can close the gap, the cheapest such share is
       taken instead, so the final overshoot is as small as one share allows

The value given up ends at or just above `amount`. The excess (`residual`)
is strictly less than the highest price involved, and no share left in
the holdings could have closed the final gap with a smaller excess. When
`amount` equals the whole liquidation value every holding goes to zero and
residual is 0.

=== PURE FUNCTIONS ===

    compute_holdings_value(holdings, instruments) -> Decimal
    compute_sale(holding, instrument, quantity) -> Sale
    compute_cash_out(holdings, instruments, amount) -> CashOut

None of these touch a ledger; the Ledger class applies their results.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_FLOOR
from typing import Dict, List, Mapping, Sequence, Tuple

from .core import (
    Instrument, HoldingsMap, MoneyLike, ZERO,
    InvalidAmount, InvalidQuantity, InsufficientValue,
    quantize_money, to_money, to_quantity,
)


@dataclass(frozen=True, slots=True)
class Sale:
    """Result of selling shares of one instrument at the current price."""
    instrument_key: str
    quantity: int
    price: Decimal
    proceeds: Decimal
    new_holding: int


@dataclass(frozen=True, slots=True)
class CashOut:
    """
    Plan (and, once applied, record) of a cash-out.

    Attributes:
        amount: Cash credited to the player.
        value_removed: Liquidation value of the shares given up.
        residual: value_removed - amount, the rounding cost of whole shares.
        _frozen_sold: (instrument key, shares given up) pairs.
        _frozen_remaining: (instrument key, shares left) pairs.
    """
    amount: Decimal
    value_removed: Decimal
    residual: Decimal
    _frozen_sold: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)
    _frozen_remaining: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def shares_sold(self) -> HoldingsMap:
        return dict(self._frozen_sold)

    @property
    def remaining_holdings(self) -> HoldingsMap:
        return dict(self._frozen_remaining)


def compute_holdings_value(
    holdings: Mapping[str, int],
    instruments: Sequence[Instrument],
) -> Decimal:
    """
    Liquidation value of a holdings map at current prices.

    Keys without an instrument definition contribute nothing.
    """
    total = ZERO
    for inst in instruments:
        total += inst.price * holdings.get(inst.key, 0)
    return quantize_money(total)


def compute_sale(holding: int, instrument: Instrument, quantity: int) -> Sale:
    """
    Validate and price a sale of `quantity` shares out of `holding`.

    Raises:
        InvalidQuantity: If quantity is not a positive int or exceeds holding.
    """
    quantity = to_quantity(quantity)
    if quantity <= 0:
        raise InvalidQuantity(f"Sell quantity must be positive, got {quantity}")
    if quantity > holding:
        raise InvalidQuantity(
            f"Cannot sell {quantity} {instrument.key}: only {holding} held"
        )
    return Sale(
        instrument_key=instrument.key,
        quantity=quantity,
        price=instrument.price,
        proceeds=instrument.value_of(quantity),
        new_holding=holding - quantity,
    )


def compute_cash_out(
    holdings: Mapping[str, int],
    instruments: Sequence[Instrument],
    amount: MoneyLike,
) -> CashOut:
    """
    Plan a proportional liquidation worth `amount`.

    Args:
        holdings: Current share counts by instrument key
        instruments: Instrument table, in configuration order
        amount: Cash to raise

    Returns:
        CashOut describing shares sold and holdings left

    Raises:
        InvalidAmount: If amount is malformed or not positive
        InsufficientValue: If amount exceeds the liquidation value

    Example:
        10 property @100 and 10 education @50 (value 1500), cash out 600:
            exact = 4 property, 4 education -> 400 + 200 = 600, residual 0
    """
    amount = to_money(amount)
    if amount <= ZERO:
        raise InvalidAmount(f"Cash-out amount must be positive, got {amount}")

    total = compute_holdings_value(holdings, instruments)
    if amount > total:
        raise InsufficientValue(
            f"Cash-out of {amount} exceeds holdings value {total}"
        )

    current = {inst.key: holdings.get(inst.key, 0) for inst in instruments}

    if amount == total:
        sold = {key: count for key, count in current.items() if count > 0}
        return CashOut(
            amount=amount,
            value_removed=total,
            residual=ZERO,
            _frozen_sold=tuple(sold.items()),
            _frozen_remaining=tuple((key, 0) for key in current),
        )

    # Only priced, held instruments carry value to liquidate.
    candidates: List[Tuple[int, Instrument, Decimal]] = []
    sold: Dict[str, int] = {}
    removed = ZERO
    for index, inst in enumerate(instruments):
        held = current[inst.key]
        if held <= 0 or inst.price <= ZERO:
            continue
        exact = amount * held / total
        base = int(exact.to_integral_value(rounding=ROUND_FLOOR))
        candidates.append((index, inst, exact))
        if base:
            sold[inst.key] = base
            removed += inst.price * base

    while removed < amount:
        open_candidates = [
            (index, inst, exact) for index, inst, exact in candidates
            if sold.get(inst.key, 0) < current[inst.key]
        ]
        # removed < amount < total guarantees a share is still available
        shortfall = amount - removed
        closing = [c for c in open_candidates if c[1].price >= shortfall]
        if closing:
            # Last share: the one that overshoots least
            index, inst, exact = min(
                closing,
                key=lambda c: (c[1].price, -(c[2] - sold.get(c[1].key, 0)), c[0]),
            )
        else:
            index, inst, exact = max(
                open_candidates,
                key=lambda c: (c[2] - sold.get(c[1].key, 0), -c[0]),
            )
        sold[inst.key] = sold.get(inst.key, 0) + 1
        removed += inst.price

    remaining = {key: count - sold.get(key, 0) for key, count in current.items()}
    removed = quantize_money(removed)
    return CashOut(
        amount=amount,
        value_removed=removed,
        residual=removed - amount,
        _frozen_sold=tuple((key, sold[key]) for key in current if sold.get(key)),
        _frozen_remaining=tuple(remaining.items()),
    )
