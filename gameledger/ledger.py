"""
ledger.py - Stateful Board Game Ledger

The Ledger class is the central state manager for a game session.
It is the only module that mutates state, ensuring controlled changes.

Key responsibilities:
    - Implements the LedgerView protocol for pure functions in holdings.py
      and debts.py
    - Owns players, the instrument table, and debts, keyed by id
    - Validates every operation completely before changing anything, so a
      rejected call leaves no trace
    - Serializes callers through a single lock (one logical writer)
    - Reports every applied or rejected operation to a NotificationSink
"""

from __future__ import annotations
from dataclasses import replace
from decimal import Decimal
from functools import wraps
from typing import Dict, List, Mapping, Optional, Sequence
import sys
import threading

from .core import (
    # Types
    Player, Instrument, Debt, PlayerSpec, Party,
    NotificationSink, HoldingsMap, MoneyLike,
    # Constants
    BANK, ZERO, MAX_SHARES, DEFAULT_INSTRUMENTS, DEFAULT_ROSTER,
    # Exceptions
    LedgerError, NotFound, InvalidAmount, InvalidQuantity, InvalidParty,
    # Helpers
    _freeze_holdings, to_money, to_quantity,
)
from .holdings import CashOut, compute_cash_out, compute_holdings_value, compute_sale
from .debts import DebtSummary, DebtView, compute_repayment, describe_debt, resolve_party, summarize_debts
from .notifications import ConsoleSink, NullSink


def _deliver(send, message: str) -> None:
    """
    Hand a message to a sink callback.

    A sink that raises is reported on stderr instead of propagating: by the
    time a success is sent the change is already applied, and a failure is
    always followed by the original LedgerError.
    """
    try:
        send(message)
    except Exception as exc:
        print(f"⚠️  notification sink failed ({type(exc).__name__}: {exc}): {message}",
              file=sys.stderr)


def _command(method):
    """Run a mutating operation under the ledger lock and report rejections."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            except LedgerError as exc:
                _deliver(self.sink.failure, f"{method.__name__}: {exc}")
                raise
    return wrapper


def _query(method):
    """Run a read under the ledger lock so it never sees a half-applied change."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class Ledger:
    """
    In-memory ledger for cash, share holdings and debts of a game session.

    Design Principles:
        - Validate, then apply: each operation computes the complete new
          records first and swaps them in only when every check passed.
        - Records are immutable: Player and Debt are frozen; mutation means
          replacing the record under its id.
        - Dangling references are tolerated: debts may outlive their parties.

    Thread Safety:
        Every public method holds one re-entrant lock for its whole duration,
        so concurrent callers are applied one at a time in arrival order.

    Example:
        ledger = Ledger("friday_night", verbose=False)
        ana = ledger.add_player("Ana", "#FF6B6B")
        ledger.adjust_holdings(ana.id, "property", 10)
        ledger.cash_out_holdings(ana.id, 400)
        ledger.add_debt(ana.id, BANK, 500)
    """

    def __init__(
        self,
        name: str = "game",
        instruments: Optional[Sequence[Instrument]] = None,
        roster: Optional[Sequence[PlayerSpec]] = None,
        verbose: bool = True,
        sink: Optional[NotificationSink] = None,
    ):
        """
        Create a ledger seeded with a roster.

        Args:
            name: Ledger identifier
            instruments: Instrument table (default: DEFAULT_INSTRUMENTS)
            roster: Players to seed and to restore on reset (default: DEFAULT_ROSTER)
            verbose: Print notifications to the console when no sink is given
            sink: Explicit notification sink (overrides verbose)

        Raises:
            ValueError: If instrument keys repeat or the roster is invalid
        """
        self.name = name
        self.verbose = verbose
        self.sink: NotificationSink = sink if sink is not None else (
            ConsoleSink() if verbose else NullSink()
        )
        self._lock = threading.RLock()

        self.instruments: Dict[str, Instrument] = {}
        for inst in (DEFAULT_INSTRUMENTS if instruments is None else instruments):
            if inst.key in self.instruments:
                raise ValueError(f"Instrument {inst.key} defined twice")
            self.instruments[inst.key] = inst

        self.roster: tuple = tuple(DEFAULT_ROSTER if roster is None else roster)
        self.players: Dict[str, Player] = {}
        self.debts: Dict[str, Debt] = {}
        # Monotonic counters; ids are never reused, even across resets
        self._next_player_seq: int = 1
        self._next_debt_seq: int = 1

        try:
            self.players = self._build_roster()
        except LedgerError as exc:
            raise ValueError(f"Invalid roster: {exc}") from exc

    def _notify(self, message: str) -> None:
        """Report an applied change. Called last, after every record is swapped in."""
        _deliver(self.sink.success, message)

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @_query
    def get_player(self, player_id: str) -> Player:
        """
        Get a player by id.

        Raises:
            NotFound: If no player has this id
        """
        player = self.players.get(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        return player

    @_query
    def find_player(self, player_id: str) -> Optional[Player]:
        """Get a player by id, or None."""
        return self.players.get(player_id)

    @_query
    def get_instrument(self, key: str) -> Instrument:
        """
        Get an instrument definition.

        Raises:
            NotFound: If the key is not in the instrument table
        """
        inst = self.instruments.get(key)
        if inst is None:
            raise NotFound(f"Instrument {key} not found")
        return inst

    @_query
    def list_instruments(self) -> List[Instrument]:
        """Instrument table in configuration order."""
        return list(self.instruments.values())

    # ========================================================================
    # QUERIES
    # ========================================================================

    @_query
    def list_players(self) -> List[Player]:
        """Players in the order they were added."""
        return list(self.players.values())

    @_query
    def get_debt(self, debt_id: str) -> Debt:
        """
        Get a debt by id.

        Raises:
            NotFound: If no debt has this id (including removed debts)
        """
        debt = self.debts.get(debt_id)
        if debt is None:
            raise NotFound(f"Debt {debt_id} not found")
        return debt

    @_query
    def list_debts(self, party_id: Optional[str] = None, include_settled: bool = True) -> List[Debt]:
        """
        Debts in creation order.

        Args:
            party_id: Only debts where this id is debtor or creditor
            include_settled: Include fully repaid debts
        """
        debts = list(self.debts.values())
        if party_id is not None:
            debts = [d for d in debts if party_id in (d.debtor_id, d.creditor_id)]
        if not include_settled:
            debts = [d for d in debts if not d.is_settled]
        return debts

    @_query
    def total_holdings_value(self, player_id: str) -> Decimal:
        """
        Liquidation value of a player's shares at current prices.

        Raises:
            NotFound: If the player does not exist
        """
        player = self.get_player(player_id)
        return compute_holdings_value(player.holdings, self.list_instruments())

    @_query
    def net_worth(self, player_id: str) -> Decimal:
        """
        Cash plus liquidation value. Debts are tracked separately and not netted.

        Raises:
            NotFound: If the player does not exist
        """
        player = self.get_player(player_id)
        return player.cash + self.total_holdings_value(player_id)

    @_query
    def resolve_party(self, party_id: str) -> Party:
        """Resolve a debt party id to the bank, a player, or an unresolved id."""
        return resolve_party(self, party_id)

    @_query
    def describe_debt(self, debt_id: str) -> DebtView:
        """
        A debt with both parties resolved for display.

        Raises:
            NotFound: If the debt does not exist
        """
        return describe_debt(self, self.get_debt(debt_id))

    @_query
    def debt_summary(self, party_id: str) -> DebtSummary:
        """Outstanding owed/receivable totals for any party id, resolved or not."""
        return summarize_debts(self.debts.values(), party_id)

    # ========================================================================
    # PLAYER OPERATIONS (Mutating)
    # ========================================================================

    def _build_player(
        self,
        name: str,
        color: str,
        cash: MoneyLike,
        holdings: Optional[Mapping[str, int]],
        player_id: str,
    ) -> Player:
        """Validate inputs and build a Player record without registering it."""
        cash = to_money(cash, "initial cash")
        if cash < ZERO:
            raise InvalidAmount(f"Initial cash cannot be negative, got {cash}")

        full_holdings: HoldingsMap = {key: 0 for key in self.instruments}
        for key, count in (holdings or {}).items():
            if key not in self.instruments:
                raise NotFound(f"Instrument {key} not found")
            count = to_quantity(count, f"{key} holding")
            if count < 0:
                raise InvalidQuantity(f"{key} holding cannot be negative, got {count}")
            full_holdings[key] = count

        return Player(
            id=player_id,
            name=name,
            color=color,
            cash=cash,
            _frozen_holdings=_freeze_holdings(full_holdings),
        )

    def _build_roster(self) -> Dict[str, Player]:
        """Build fresh players for every roster entry, consuming ids."""
        players: Dict[str, Player] = {}
        seq = self._next_player_seq
        for spec in self.roster:
            player_id = f"player_{seq}"
            players[player_id] = self._build_player(
                spec.name, spec.color, spec.cash, spec.holdings, player_id
            )
            seq += 1
        self._next_player_seq = seq
        return players

    @_command
    def add_player(
        self,
        name: str,
        color: str,
        initial_cash: MoneyLike = 0,
        initial_holdings: Optional[Mapping[str, int]] = None,
    ) -> Player:
        """
        Add a player with a fresh id.

        Names are not validated; the presentation layer rejects empty names.

        Args:
            name: Display name
            color: Display color
            initial_cash: Starting cash (default 0)
            initial_holdings: Starting shares; unspecified keys start at 0

        Returns:
            The new Player

        Raises:
            InvalidAmount: If initial_cash is malformed or negative
            InvalidQuantity: If a holding is not a non-negative int
            NotFound: If a holding names an unknown instrument
        """
        player_id = f"player_{self._next_player_seq}"
        player = self._build_player(name, color, initial_cash, initial_holdings, player_id)
        self._next_player_seq += 1
        self.players[player_id] = player
        self._notify(f"added player {player_id} ({name})")
        return player

    @_command
    def update_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Player:
        """
        Update a player's name and/or color. Fields left as None are kept.

        Raises:
            NotFound: If the player does not exist
        """
        player = self.get_player(player_id)
        changes = {}
        if name is not None:
            changes['name'] = name
        if color is not None:
            changes['color'] = color
        updated = replace(player, **changes)
        self.players[player_id] = updated
        self._notify(f"updated player {player_id} ({updated.name})")
        return updated

    @_command
    def remove_player(self, player_id: str) -> Player:
        """
        Remove a player.

        Debts naming this player are kept and resolve as unknown afterwards.

        Raises:
            NotFound: If the player does not exist
        """
        player = self.get_player(player_id)
        del self.players[player_id]
        self._notify(f"removed player {player_id} ({player.name})")
        return player

    @_command
    def reset_to_defaults(self) -> List[Player]:
        """
        Replace every player with a fresh copy of the roster.

        Debts are left untouched, so any debt that named a discarded player
        now resolves as unknown.
        """
        self.players = self._build_roster()
        dangling = sum(
            1 for d in self.debts.values()
            if d.debtor_id not in self.players
            or (d.creditor_id != BANK and d.creditor_id not in self.players)
        )
        message = f"reset to {len(self.players)} default players"
        if dangling:
            message += f" ({dangling} debts now reference unknown players)"
        self._notify(message)
        return list(self.players.values())

    # ========================================================================
    # HOLDINGS OPERATIONS (Mutating)
    # ========================================================================

    @_command
    def adjust_holdings(self, player_id: str, instrument_key: str, delta: int) -> int:
        """
        Grant (positive delta) or remove (negative delta) shares with no cash effect.

        Returns:
            The new holding

        Raises:
            NotFound: If the player or instrument does not exist
            InvalidQuantity: If delta is not an int or the holding would go negative
        """
        player = self.get_player(player_id)
        self.get_instrument(instrument_key)
        delta = to_quantity(delta, "delta")
        new_holding = player.holding(instrument_key) + delta
        if new_holding < 0:
            raise InvalidQuantity(
                f"{player_id} holds {player.holding(instrument_key)} {instrument_key}, "
                f"cannot remove {-delta}"
            )
        if new_holding > MAX_SHARES:
            raise InvalidQuantity(
                f"{player_id} would hold {new_holding} {instrument_key}, above {MAX_SHARES}"
            )
        holdings = player.holdings
        holdings[instrument_key] = new_holding
        self.players[player_id] = replace(player, _frozen_holdings=_freeze_holdings(holdings))
        verb = "gained" if delta >= 0 else "lost"
        self._notify(f"{player.name} {verb} {abs(delta)} {instrument_key} (now {new_holding})")
        return new_holding

    @_command
    def sell_shares(self, player_id: str, instrument_key: str, quantity: int) -> Decimal:
        """
        Sell shares at the current price and credit the proceeds to cash.

        Returns:
            Proceeds (quantity * price), already added to the player's cash

        Raises:
            NotFound: If the player or instrument does not exist
            InvalidQuantity: If quantity is not positive or exceeds the holding
        """
        player = self.get_player(player_id)
        inst = self.get_instrument(instrument_key)
        sale = compute_sale(player.holding(instrument_key), inst, quantity)
        holdings = player.holdings
        holdings[instrument_key] = sale.new_holding
        self.players[player_id] = replace(
            player,
            cash=player.cash + sale.proceeds,
            _frozen_holdings=_freeze_holdings(holdings),
        )
        self._notify(
            f"{player.name} sold {sale.quantity} {inst.name} for {sale.proceeds}"
        )
        return sale.proceeds

    @_command
    def cash_out_holdings(self, player_id: str, amount: MoneyLike) -> CashOut:
        """
        Convert `amount` of liquidation value into cash.

        Shares are given up across instruments in proportion to their value
        (see holdings.compute_cash_out). Cash rises by exactly `amount`.

        Returns:
            CashOut record with shares sold and the whole-share residual

        Raises:
            NotFound: If the player does not exist
            InvalidAmount: If amount is malformed or not positive
            InsufficientValue: If amount exceeds total_holdings_value
        """
        player = self.get_player(player_id)
        plan = compute_cash_out(player.holdings, self.list_instruments(), amount)
        holdings = player.holdings
        holdings.update(plan.remaining_holdings)
        self.players[player_id] = replace(
            player,
            cash=player.cash + plan.amount,
            _frozen_holdings=_freeze_holdings(holdings),
        )
        self._notify(f"{player.name} cashed out {plan.amount}")
        return plan

    # ========================================================================
    # DEBT OPERATIONS (Mutating)
    # ========================================================================

    @_command
    def add_debt(self, debtor_id: str, creditor_id: str, amount: MoneyLike) -> Debt:
        """
        Record that debtor owes creditor `amount`.

        Args:
            debtor_id: Existing player id
            creditor_id: Existing player id or BANK
            amount: Positive amount owed

        Raises:
            InvalidParty: If debtor == creditor or either party does not resolve
            InvalidAmount: If amount is malformed or not positive
        """
        if debtor_id == creditor_id:
            raise InvalidParty(f"Debtor and creditor are the same party: {debtor_id}")
        if debtor_id not in self.players:
            raise InvalidParty(f"Debtor {debtor_id} is not a player")
        if creditor_id != BANK and creditor_id not in self.players:
            raise InvalidParty(f"Creditor {creditor_id} is neither a player nor the bank")
        amount = to_money(amount)
        if amount <= ZERO:
            raise InvalidAmount(f"Debt amount must be positive, got {amount}")

        debt_id = f"debt_{self._next_debt_seq}"
        self._next_debt_seq += 1
        debt = Debt(
            id=debt_id,
            debtor_id=debtor_id,
            creditor_id=creditor_id,
            original_amount=amount,
            remaining_amount=amount,
        )
        self.debts[debt_id] = debt
        self._notify(f"recorded {debt_id}: {debtor_id} owes {creditor_id} {amount}")
        return debt

    @_command
    def repay_debt(self, debt_id: str, amount: Optional[MoneyLike] = None) -> Debt:
        """
        Reduce a debt's remaining amount. Player cash is not touched.

        Args:
            debt_id: Debt to repay
            amount: Partial repayment, or None to settle in full

        Raises:
            NotFound: If the debt does not exist
            InvalidAmount: If a partial amount is non-positive or exceeds the remainder
        """
        debt = self.get_debt(debt_id)
        updated = compute_repayment(debt, amount)
        self.debts[debt_id] = updated
        repaid = debt.remaining_amount - updated.remaining_amount
        self._notify(f"repaid {repaid} on {debt_id} (remaining {updated.remaining_amount})")
        return updated

    @_command
    def remove_debt(self, debt_id: str) -> Debt:
        """
        Delete a debt record whatever its remaining balance.

        This is a data correction, not a repayment.

        Raises:
            NotFound: If the debt does not exist
        """
        debt = self.get_debt(debt_id)
        del self.debts[debt_id]
        self._notify(f"removed {debt_id}")
        return debt

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    @_query
    def clone(self) -> Ledger:
        """
        Create an independent copy of this ledger.

        Records are immutable, so copying the id maps is enough for the
        clone and the original to evolve separately. The clone shares the
        notification sink.
        """
        cloned = Ledger.__new__(Ledger)
        cloned.name = self.name
        cloned.verbose = self.verbose
        cloned.sink = self.sink
        cloned._lock = threading.RLock()
        cloned.instruments = dict(self.instruments)
        cloned.roster = self.roster
        cloned.players = dict(self.players)
        cloned.debts = dict(self.debts)
        cloned._next_player_seq = self._next_player_seq
        cloned._next_debt_seq = self._next_debt_seq
        return cloned

    def __repr__(self) -> str:
        return (f"Ledger({self.name}: {len(self.players)} players, "
                f"{len(self.instruments)} instruments, {len(self.debts)} debts)")
