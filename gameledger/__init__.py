"""
gameledger - Companion ledger for tabletop board games

Tracks each player's cash, share holdings and debts in memory, and derives
liquidation value and net worth as the game goes on.

Usage:
    from gameledger import Ledger, BANK

    ledger = Ledger("friday_night", verbose=False)
    ana = ledger.add_player("Ana", "#FF6B6B")

    # Shares granted by a game card
    ledger.adjust_holdings(ana.id, "property", 10)

    # Turn 400 worth of shares into cash
    ledger.cash_out_holdings(ana.id, 400)

    # Borrow from the bank and pay part of it back
    debt = ledger.add_debt(ana.id, BANK, 500)
    ledger.repay_debt(debt.id, 200)
"""

# Core types
from .core import (
    Player,
    Instrument,
    Debt,
    PlayerSpec,
    Party,
    BankParty,
    ResolvedParty,
    UnresolvedParty,
    LedgerView,
    NotificationSink,
    LedgerError,
    NotFound,
    InvalidAmount,
    InvalidQuantity,
    InvalidParty,
    InsufficientValue,
    instrument,
    player_spec,
    to_money,
    to_quantity,
    BANK,
    BANK_NAME,
    UNKNOWN_PARTY_NAME,
    DEFAULT_PARTY_COLOR,
    MAX_MONEY,
    MAX_SHARES,
    PLAYER_COLORS,
    DEFAULT_INSTRUMENTS,
    DEFAULT_ROSTER,
)

# Ledger
from .ledger import Ledger

# Holdings
from .holdings import (
    Sale,
    CashOut,
    compute_holdings_value,
    compute_sale,
    compute_cash_out,
)

# Debts
from .debts import (
    DebtView,
    DebtSummary,
    compute_repayment,
    resolve_party,
    describe_debt,
    summarize_debts,
)

# Notifications
from .notifications import ConsoleSink, NullSink, RecordingSink

__all__ = [
    # Core
    'Player', 'Instrument', 'Debt', 'PlayerSpec',
    'Party', 'BankParty', 'ResolvedParty', 'UnresolvedParty',
    'LedgerView', 'NotificationSink',
    'LedgerError', 'NotFound', 'InvalidAmount', 'InvalidQuantity',
    'InvalidParty', 'InsufficientValue',
    'instrument', 'player_spec', 'to_money', 'to_quantity',
    'BANK', 'BANK_NAME', 'UNKNOWN_PARTY_NAME', 'DEFAULT_PARTY_COLOR',
    'MAX_MONEY', 'MAX_SHARES',
    'PLAYER_COLORS', 'DEFAULT_INSTRUMENTS', 'DEFAULT_ROSTER',
    # Ledger
    'Ledger',
    # Holdings
    'Sale', 'CashOut', 'compute_holdings_value', 'compute_sale', 'compute_cash_out',
    # Debts
    'DebtView', 'DebtSummary', 'compute_repayment', 'resolve_party',
    'describe_debt', 'summarize_debts',
    # Notifications
    'ConsoleSink', 'NullSink', 'RecordingSink',
]

__version__ = '1.0.0'
