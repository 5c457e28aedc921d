"""
notifications.py - Success/failure reporting for ledger operations

The ledger reports every applied operation and every rejection to a
NotificationSink. Sinks only display or collect messages.
"""

from typing import List, Tuple


class ConsoleSink:
    """Prints one line per notification. Used by verbose ledgers."""

    def success(self, message: str) -> None:
        print(f"✓ {message}")

    def failure(self, message: str) -> None:
        print(f"✗ REJECTED: {message}")


class NullSink:
    """Discards every notification."""

    def success(self, message: str) -> None:
        pass

    def failure(self, message: str) -> None:
        pass


class RecordingSink:
    """
    Keeps notifications in memory, in arrival order.

    Example:
        sink = RecordingSink()
        ledger = Ledger("game", sink=sink)
        ledger.add_player("Ana", "#FF6B6B")
        sink.successes  # ['added player player_5 (Ana)']
    """

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def failure(self, message: str) -> None:
        self.events.append(("failure", message))

    @property
    def successes(self) -> List[str]:
        return [message for kind, message in self.events if kind == "success"]

    @property
    def failures(self) -> List[str]:
        return [message for kind, message in self.events if kind == "failure"]

    def clear(self) -> None:
        self.events.clear()

    def __repr__(self):
        return f"RecordingSink({len(self.events)} events)"
