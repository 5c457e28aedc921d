"""
conftest.py - Shared pytest fixtures for ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Quiet ledgers (default table, single instrument, empty roster)
- Recording sinks for notification assertions

State snapshot helpers live in ledger_state.py.
"""

import pytest
from typing import Tuple

from gameledger import (
    Ledger, Player,
    RecordingSink,
    instrument, player_spec,
    BANK,
)


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def ledger():
    """Default instruments (property @100, education @50) and default roster."""
    return Ledger("test", verbose=False)


@pytest.fixture
def empty_ledger():
    """Default instruments, no players."""
    return Ledger("test", roster=(), verbose=False)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def recorded_ledger(sink):
    """Empty-roster ledger reporting to a RecordingSink."""
    return Ledger("test", roster=(), sink=sink)


# =============================================================================
# SCENARIO FIXTURES
# =============================================================================

@pytest.fixture
def single_instrument_ledger():
    """One instrument priced at 100, no players."""
    return Ledger(
        "single",
        instruments=(instrument("property", "Property", 100),),
        roster=(),
        verbose=False,
    )


@pytest.fixture
def alice(single_instrument_ledger) -> Player:
    """Player with 0 cash and 10 shares at 100 in single_instrument_ledger."""
    return single_instrument_ledger.add_player(
        "Alice", "#FF6B6B", initial_holdings={"property": 10}
    )


@pytest.fixture
def two_players(empty_ledger) -> Tuple[Player, Player]:
    """Ana and Ben in empty_ledger, each with shares of both instruments."""
    ana = empty_ledger.add_player(
        "Ana", "#FF6B6B", initial_holdings={"property": 10, "education": 10}
    )
    ben = empty_ledger.add_player(
        "Ben", "#4ECDC4", initial_cash=250, initial_holdings={"property": 3}
    )
    return ana, ben


@pytest.fixture
def debt_ledger(empty_ledger, two_players):
    """empty_ledger with one bank debt and one player-to-player debt."""
    ana, ben = two_players
    empty_ledger.add_debt(ana.id, BANK, 500)
    empty_ledger.add_debt(ben.id, ana.id, 120)
    return empty_ledger


@pytest.fixture
def custom_roster_ledger():
    """Ledger whose reset roster starts players with cash and shares."""
    roster = (
        player_spec("Host", "#FF6B6B", cash=1000, holdings={"property": 2}),
        player_spec("Guest", "#45B7D1"),
    )
    return Ledger("custom", roster=roster, verbose=False)
