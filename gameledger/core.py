"""
Core types and pure helpers for the board game ledger.

This module provides the foundational data structures and protocols:
1. Protocols: LedgerView for read-only ledger access, NotificationSink for
   success/failure reporting
2. Immutable records: Instrument, Player, Debt, PlayerSpec
3. Party lookups: BankParty, ResolvedParty, UnresolvedParty
4. Exceptions: LedgerError and the domain-specific error kinds
5. Coercion: to_money() and to_quantity() for caller-supplied numbers
6. Configuration: default instrument table, roster and color palette

Nothing in this module mutates ledger state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import (
    Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Sentinel creditor id for debts owed to the bank. Always resolves.
BANK = "bank"

BANK_NAME = "Bank"
UNKNOWN_PARTY_NAME = "unknown"

# Display color used when a debt party no longer resolves to a player.
DEFAULT_PARTY_COLOR = "#666666"

# Money is tracked to the cent. Finer caller inputs are rejected, not rounded.
MONEY_DECIMAL_PLACES = 2
MONEY_ROUNDING = ROUND_HALF_EVEN
ZERO = Decimal("0")

# Upper bounds on caller-supplied numbers. Together they keep
# holding * price well inside the default 28-digit decimal context.
MAX_MONEY = Decimal("1e12")
MAX_SHARES = 10 ** 9

# Palette offered when a player is added.
PLAYER_COLORS = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
)


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from instrument key to share count for one player.
HoldingsMap = Dict[str, int]

# Anything a caller may hand in as a monetary amount.
MoneyLike = Union[Decimal, int, float, str]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class NotFound(LedgerError):
    """Raised when a referenced player, instrument or debt id does not exist."""
    pass


class InvalidAmount(LedgerError):
    """Raised when a monetary amount is non-positive, malformed, or exceeds an available balance."""
    pass


class InvalidQuantity(LedgerError):
    """Raised when a share count is malformed, non-positive, or exceeds the holding."""
    pass


class InvalidParty(LedgerError):
    """Raised when debtor and creditor are identical or a party does not resolve."""
    pass


class InsufficientValue(LedgerError):
    """Raised when a cash-out amount exceeds the player's liquidation value."""
    pass


# ============================================================================
# COERCION
# ============================================================================

def quantize_money(value: Decimal) -> Decimal:
    """Round a Decimal to cents using the ledger rounding mode."""
    quantizer = Decimal(10) ** -MONEY_DECIMAL_PLACES
    return value.quantize(quantizer, rounding=MONEY_ROUNDING)


def to_money(value: Any, label: str = "amount") -> Decimal:
    """
    Convert a caller-supplied number to a money Decimal.

    Floats go through str() so that 0.1 becomes Decimal("0.1") rather than
    its binary expansion. Values with sub-cent digits are rejected rather
    than rounded, so "1000.004" never passes a check against 1000.00. Sign
    is not checked here; callers decide what range is acceptable.

    Raises:
        InvalidAmount: If the value is a bool, not numeric, NaN, infinite,
                       larger than MAX_MONEY in magnitude, or finer than a cent.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"{label} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(f"{label} is not a number: {value!r}") from None
    else:
        raise InvalidAmount(f"{label} must be a number, got {type(value).__name__}")
    if result.is_nan() or result.is_infinite():
        raise InvalidAmount(f"{label} must be finite, got {value!r}")
    if abs(result) > MAX_MONEY:
        raise InvalidAmount(f"{label} is too large: {value!r} (max {MAX_MONEY})")
    quantized = quantize_money(result)
    if quantized != result:
        raise InvalidAmount(
            f"{label} has more than {MONEY_DECIMAL_PLACES} decimal places: {value!r}"
        )
    return quantized


def to_quantity(value: Any, label: str = "quantity") -> int:
    """
    Validate a share count.

    Raises:
        InvalidQuantity: If the value is not an int (bools are rejected) or
                         exceeds MAX_SHARES in magnitude.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantity(f"{label} must be a whole number of shares, got {value!r}")
    if abs(value) > MAX_SHARES:
        raise InvalidQuantity(f"{label} is too large: {value} (max {MAX_SHARES})")
    return value


# ============================================================================
# RECORDS
# ============================================================================

def _freeze_holdings(holdings: Optional[Mapping[str, int]]) -> Tuple[Tuple[str, int], ...]:
    """Convert a holdings mapping to a sorted tuple of (key, count) pairs."""
    if not holdings:
        return ()
    return tuple(sorted(holdings.items()))


@dataclass(frozen=True, slots=True)
class Instrument:
    """
    A tradeable share type with one price shared by every player.

    Attributes:
        key: Fixed identifier (e.g., "property").
        name: Display label.
        price: Non-negative price per share.
    """
    key: str
    name: str
    price: Decimal

    def __post_init__(self):
        if not self.key or not self.key.strip():
            raise ValueError("Instrument key cannot be empty")
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, 'price', to_money(self.price, "price"))
        if self.price.is_nan() or self.price.is_infinite() or self.price < ZERO:
            raise ValueError(f"Instrument price must be a non-negative number, got {self.price}")
        if self.price > MAX_MONEY:
            raise ValueError(f"Instrument price {self.price} exceeds {MAX_MONEY}")

    def value_of(self, shares: int) -> Decimal:
        """Liquidation value of a share count at the current price."""
        return quantize_money(self.price * shares)


@dataclass(frozen=True, slots=True)
class Player:
    """
    A participant with cash and share holdings.

    Holdings are stored frozen; the holdings property returns a fresh dict.
    Every configured instrument key is present in a player created by the
    ledger.
    """
    id: str
    name: str
    color: str
    cash: Decimal = ZERO
    _frozen_holdings: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def holdings(self) -> HoldingsMap:
        """Share counts by instrument key. Returns a new dict each time."""
        return dict(self._frozen_holdings)

    def holding(self, instrument_key: str) -> int:
        """Share count for one instrument (0 if absent)."""
        return dict(self._frozen_holdings).get(instrument_key, 0)

    def __repr__(self) -> str:
        return f"Player({self.id}: {self.name!r}, cash={self.cash}, holdings={self.holdings})"


@dataclass(frozen=True, slots=True)
class Debt:
    """
    A directed obligation from a debtor to a creditor (a player or the bank).

    original_amount never changes; remaining_amount only goes down and is
    floored at zero.
    """
    id: str
    debtor_id: str
    creditor_id: str
    original_amount: Decimal
    remaining_amount: Decimal

    def __post_init__(self):
        if self.remaining_amount < ZERO:
            raise ValueError(f"Debt {self.id}: remaining amount cannot be negative")
        if self.remaining_amount > self.original_amount:
            raise ValueError(f"Debt {self.id}: remaining amount exceeds original amount")

    @property
    def is_settled(self) -> bool:
        return self.remaining_amount == ZERO

    @property
    def repaid_amount(self) -> Decimal:
        return self.original_amount - self.remaining_amount

    def __repr__(self) -> str:
        return (f"Debt({self.id}: {self.debtor_id}→{self.creditor_id}, "
                f"{self.remaining_amount}/{self.original_amount})")


@dataclass(frozen=True, slots=True)
class PlayerSpec:
    """Template for a roster entry, used when seeding or resetting the ledger."""
    name: str
    color: str
    cash: Decimal = ZERO
    _frozen_holdings: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def holdings(self) -> HoldingsMap:
        return dict(self._frozen_holdings)


# ============================================================================
# PARTY LOOKUPS
# ============================================================================

@dataclass(frozen=True, slots=True)
class BankParty:
    """The bank as a creditor."""
    party_id: str = BANK

    @property
    def display_name(self) -> str:
        return BANK_NAME

    @property
    def resolved(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ResolvedParty:
    """A party id that names an existing player."""
    player: Player

    @property
    def party_id(self) -> str:
        return self.player.id

    @property
    def display_name(self) -> str:
        return self.player.name

    @property
    def resolved(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class UnresolvedParty:
    """A party id that no longer names a player (removed or reset away)."""
    party_id: str

    @property
    def display_name(self) -> str:
        return UNKNOWN_PARTY_NAME

    @property
    def resolved(self) -> bool:
        return False


Party = Union[BankParty, ResolvedParty, UnresolvedParty]


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Pure functions in holdings.py and debts.py accept a LedgerView to declare
    that they only read. The Ledger class implements this protocol alongside
    its mutating operations.
    """

    def get_player(self, player_id: str) -> Player:
        """Return the player with this id, raising NotFound if absent."""
        ...

    def find_player(self, player_id: str) -> Optional[Player]:
        """Return the player with this id, or None."""
        ...

    def get_instrument(self, key: str) -> Instrument:
        """Return the instrument with this key, raising NotFound if absent."""
        ...

    def list_instruments(self) -> List[Instrument]:
        """Return the instrument table in configuration order."""
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """
    Receiver for success/failure signals destined for the user.

    Sinks are informational only; the ledger never reads anything back.
    """

    def success(self, message: str) -> None:
        ...

    def failure(self, message: str) -> None:
        ...


# ============================================================================
# FACTORIES
# ============================================================================

def instrument(key: str, name: str, price: MoneyLike) -> Instrument:
    """
    Create an instrument definition.

    Args:
        key: Fixed identifier used in holdings maps.
        name: Display label.
        price: Non-negative price per share.
    """
    return Instrument(key=key, name=name, price=to_money(price, "price"))


def player_spec(
    name: str,
    color: str,
    cash: MoneyLike = 0,
    holdings: Optional[Mapping[str, int]] = None,
) -> PlayerSpec:
    """Create a roster entry."""
    return PlayerSpec(
        name=name,
        color=color,
        cash=to_money(cash, "cash"),
        _frozen_holdings=_freeze_holdings(holdings),
    )


# ============================================================================
# DEFAULT CONFIGURATION
# ============================================================================

DEFAULT_INSTRUMENTS: Tuple[Instrument, ...] = (
    instrument("property", "Property", 100),
    instrument("education", "Education", 50),
)

DEFAULT_ROSTER: Tuple[PlayerSpec, ...] = tuple(
    player_spec(f"Player {i + 1}", PLAYER_COLORS[i]) for i in range(4)
)
