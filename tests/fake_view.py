"""
fake_view.py - Test Helper for LedgerView

Provides a minimal LedgerView implementation for testing the pure functions
in holdings.py and debts.py without building a full Ledger.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from gameledger import Instrument, NotFound, Player, DEFAULT_INSTRUMENTS


class FakeView:
    """
    Minimal LedgerView implementation.

    Example:
        view = FakeView(players=[Player("p1", "Ana", "#FF6B6B")])
        view.find_player("p1")       # Player(p1: 'Ana', ...)
        view.find_player("missing")  # None
    """

    def __init__(
        self,
        players: Optional[Sequence[Player]] = None,
        instruments: Optional[Sequence[Instrument]] = None,
    ):
        self._players: Dict[str, Player] = {p.id: p for p in (players or [])}
        self._instruments: Dict[str, Instrument] = {
            i.key: i for i in (DEFAULT_INSTRUMENTS if instruments is None else instruments)
        }

    def get_player(self, player_id: str) -> Player:
        if player_id not in self._players:
            raise NotFound(player_id)
        return self._players[player_id]

    def find_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def get_instrument(self, key: str) -> Instrument:
        if key not in self._instruments:
            raise NotFound(key)
        return self._instruments[key]

    def list_instruments(self) -> List[Instrument]:
        return list(self._instruments.values())
