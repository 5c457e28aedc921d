"""
test_core_types.py - Unit tests for core.py

Tests:
- Money and quantity coercion
- Instrument, Player and Debt record validation
- Party lookup variants
- Factories and default configuration
"""

import pytest
from decimal import Decimal

from gameledger import (
    Player, Instrument, Debt, PlayerSpec,
    BankParty, ResolvedParty, UnresolvedParty,
    LedgerView, NotificationSink, LedgerError,
    NotFound, InvalidAmount, InvalidQuantity, InvalidParty, InsufficientValue,
    instrument, player_spec, to_money, to_quantity,
    BANK, BANK_NAME, UNKNOWN_PARTY_NAME, PLAYER_COLORS, MAX_MONEY, MAX_SHARES,
    DEFAULT_INSTRUMENTS, DEFAULT_ROSTER,
    Ledger, ConsoleSink, NullSink, RecordingSink,
)
from tests.fake_view import FakeView


class TestToMoney:
    """Tests for to_money coercion."""

    def test_int(self):
        assert to_money(5) == Decimal("5.00")

    def test_float_goes_through_str(self):
        assert to_money(0.1) == Decimal("0.10")

    def test_string_with_whitespace(self):
        assert to_money(" 12.5 ") == Decimal("12.50")

    def test_trailing_zeros_beyond_cents_accepted(self):
        assert to_money(Decimal("12.340")) == Decimal("12.34")
        assert to_money("7.000") == Decimal("7.00")

    @pytest.mark.parametrize("bad", [Decimal("12.345"), "1000.004", 0.001, "0.005"])
    def test_rejects_sub_cent_values(self, bad):
        with pytest.raises(InvalidAmount, match="decimal places"):
            to_money(bad)

    def test_negative_allowed_here(self):
        assert to_money("-3") == Decimal("-3")

    @pytest.mark.parametrize("bad", ["abc", "", None, True, [1], float("nan"), float("inf"), "Infinity"])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(InvalidAmount):
            to_money(bad)

    def test_rejects_values_too_large_to_quantize(self):
        with pytest.raises(InvalidAmount, match="too large"):
            to_money(Decimal("1e40"))

    def test_bound_is_inclusive(self):
        assert to_money(MAX_MONEY) == MAX_MONEY
        with pytest.raises(InvalidAmount, match="too large"):
            to_money(MAX_MONEY + Decimal("0.01"))
        with pytest.raises(InvalidAmount, match="too large"):
            to_money(-MAX_MONEY - 1)


class TestToQuantity:
    """Tests for to_quantity validation."""

    def test_int_passes_through(self):
        assert to_quantity(7) == 7
        assert to_quantity(-2) == -2

    @pytest.mark.parametrize("bad", [1.0, "3", Decimal("2"), True, None])
    def test_rejects_non_ints(self, bad):
        with pytest.raises(InvalidQuantity):
            to_quantity(bad)

    def test_rejects_huge_counts(self):
        assert to_quantity(MAX_SHARES) == MAX_SHARES
        for bad in (MAX_SHARES + 1, -MAX_SHARES - 1, 10 ** 27):
            with pytest.raises(InvalidQuantity, match="too large"):
                to_quantity(bad)


class TestExceptions:

    @pytest.mark.parametrize("exc", [NotFound, InvalidAmount, InvalidQuantity, InvalidParty, InsufficientValue])
    def test_all_are_ledger_errors(self, exc):
        assert issubclass(exc, LedgerError)


class TestInstrument:

    def test_factory(self):
        inst = instrument("property", "Property", 100)
        assert inst.key == "property"
        assert inst.price == Decimal("100")

    def test_float_price_converted(self):
        inst = Instrument("gold", "Gold", 2.5)
        assert inst.price == Decimal("2.5")

    def test_zero_price_allowed(self):
        assert instrument("junk", "Junk", 0).price == Decimal("0")

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            instrument("property", "Property", -1)

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError, match="key cannot be empty"):
            instrument("  ", "Blank", 1)

    def test_value_of(self):
        assert instrument("education", "Education", "12.50").value_of(3) == Decimal("37.50")

    def test_immutable(self):
        inst = instrument("property", "Property", 100)
        with pytest.raises(AttributeError):
            inst.price = Decimal("1")


class TestPlayer:

    def test_holdings_returns_copy(self):
        p = Player("p1", "Ana", "#FF6B6B", _frozen_holdings=(("property", 3),))
        holdings = p.holdings
        holdings["property"] = 99
        assert p.holding("property") == 3

    def test_missing_holding_is_zero(self):
        p = Player("p1", "Ana", "#FF6B6B")
        assert p.holding("education") == 0
        assert p.cash == Decimal("0")


class TestDebt:

    def test_settled_and_repaid(self):
        d = Debt("d1", "p1", BANK, Decimal("100"), Decimal("40"))
        assert not d.is_settled
        assert d.repaid_amount == Decimal("60")

    def test_remaining_above_original_rejected(self):
        with pytest.raises(ValueError, match="exceeds original"):
            Debt("d1", "p1", BANK, Decimal("100"), Decimal("101"))

    def test_negative_remaining_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            Debt("d1", "p1", BANK, Decimal("100"), Decimal("-1"))


class TestParties:

    def test_bank(self):
        party = BankParty()
        assert party.party_id == BANK
        assert party.display_name == BANK_NAME
        assert party.resolved

    def test_resolved(self):
        p = Player("p1", "Ana", "#FF6B6B")
        party = ResolvedParty(p)
        assert party.party_id == "p1"
        assert party.display_name == "Ana"

    def test_unresolved(self):
        party = UnresolvedParty("ghost")
        assert party.display_name == UNKNOWN_PARTY_NAME
        assert not party.resolved


class TestFactoriesAndDefaults:

    def test_player_spec(self):
        spec = player_spec("Host", "#FF6B6B", cash="10.5", holdings={"property": 2})
        assert isinstance(spec, PlayerSpec)
        assert spec.cash == Decimal("10.50")
        assert spec.holdings == {"property": 2}

    def test_default_instruments(self):
        assert [i.key for i in DEFAULT_INSTRUMENTS] == ["property", "education"]

    def test_default_roster_uses_palette(self):
        assert len(DEFAULT_ROSTER) == 4
        assert [s.color for s in DEFAULT_ROSTER] == list(PLAYER_COLORS[:4])
        assert all(s.cash == 0 and s.holdings == {} for s in DEFAULT_ROSTER)


class TestProtocols:

    def test_ledger_is_a_view(self):
        assert isinstance(Ledger("t", verbose=False), LedgerView)

    def test_fake_view_is_a_view(self):
        assert isinstance(FakeView(), LedgerView)

    @pytest.mark.parametrize("sink_cls", [ConsoleSink, NullSink, RecordingSink])
    def test_sinks(self, sink_cls):
        assert isinstance(sink_cls(), NotificationSink)
