#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Game Ledger Step by Step

This is a walk through one evening of a board game, kept by the ledger.
Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:   Setup      - The default table, renaming seats, handing out shares
  4-6:   Shares     - Liquidation value, selling, proportional cash-out
  7-9:   Debts      - Bank loans, IOUs between players, repayment
  10-11: Edge Cases - Rejections leave no trace, players leaving owing money
  12:    New Game   - Resetting the roster

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
from decimal import Decimal
import sys

from gameledger import (
    Ledger, LedgerError,
    BANK, DEFAULT_INSTRUMENTS,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    # Starting shares dealt by the opening cards
    ana_property: int = 4
    ana_education: int = 6
    ben_education: int = 2

    # Money moves
    ana_cash_out: Decimal = Decimal("250")
    bank_loan: Decimal = Decimal("300")
    loan_installment: Decimal = Decimal("100")
    iou_amount: Decimal = Decimal("75")


CONFIG = DemoConfig()

# Global state for interactive mode
QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def show_table(ledger: Ledger):
    """Print every player's cash, holdings and net worth."""
    for p in ledger.list_players():
        shares = ", ".join(f"{k}={v}" for k, v in p.holdings.items())
        print(f"  {p.id:<10} {p.name:<10} cash={p.cash:<8} {shares:<28} "
              f"net worth={ledger.net_worth(p.id)}")


def show_debts(ledger: Ledger):
    debts = ledger.list_debts()
    if not debts:
        print("  (no debts)")
    for d in debts:
        print(f"  {d.id:<8} {ledger.describe_debt(d.id).describe()}")


# ============================================================================
# PHASE 1: SETUP (Steps 1-3)
# ============================================================================

def step_01_default_table():
    """Create a ledger and look at what it starts with."""
    step_header(1, "The Default Table",
        "A new ledger comes seeded with four players and two instruments.")

    print("""
    The ledger tracks three things for a game session:

    1. INSTRUMENTS - Share types with ONE price shared by every player
    2. PLAYERS     - Cash plus a whole number of shares per instrument
    3. DEBTS       - Who owes whom (another player or the bank)

    Let's create a ledger with verbose=True to see every change it makes.
    """)

    wait_for_enter()

    print(">>> ledger = Ledger('game_night', verbose=True)")
    ledger = Ledger("game_night", verbose=True)

    section_header("Instruments")
    for inst in DEFAULT_INSTRUMENTS:
        print(f"  {inst.key:<10} {inst.name:<10} price={inst.price}")

    section_header("Players")
    show_table(ledger)

    return ledger


def step_02_seats(ledger: Ledger):
    """Rename seats and drop the empty one."""
    step_header(2, "Taking Seats",
        "Players are renamed and removed by id; ids never change or get reused.")

    p1, p2, p3, p4 = ledger.list_players()
    print(f">>> ledger.update_player('{p1.id}', name='Ana')")
    ledger.update_player(p1.id, name="Ana")
    print(f">>> ledger.update_player('{p2.id}', name='Ben')")
    ledger.update_player(p2.id, name="Ben")
    print(f">>> ledger.update_player('{p3.id}', name='Cleo')")
    ledger.update_player(p3.id, name="Cleo")
    print(f">>> ledger.remove_player('{p4.id}')")
    ledger.remove_player(p4.id)

    section_header("Players")
    show_table(ledger)

    return ledger


def step_03_deal_shares(ledger: Ledger):
    """Grant shares the way game cards do."""
    step_header(3, "Dealing Shares",
        "adjust_holdings grants or confiscates shares with no cash effect.")

    ana, ben, _ = ledger.list_players()
    print(f">>> ledger.adjust_holdings('{ana.id}', 'property', {CONFIG.ana_property})")
    ledger.adjust_holdings(ana.id, "property", CONFIG.ana_property)
    print(f">>> ledger.adjust_holdings('{ana.id}', 'education', {CONFIG.ana_education})")
    ledger.adjust_holdings(ana.id, "education", CONFIG.ana_education)
    print(f">>> ledger.adjust_holdings('{ben.id}', 'education', {CONFIG.ben_education})")
    ledger.adjust_holdings(ben.id, "education", CONFIG.ben_education)

    section_header("Players")
    show_table(ledger)

    return ledger


# ============================================================================
# PHASE 2: SHARES (Steps 4-6)
# ============================================================================

def step_04_value(ledger: Ledger):
    """Compute liquidation value."""
    step_header(4, "Liquidation Value",
        "Value is holding times current price, summed over instruments.")

    ana = ledger.list_players()[0]
    print(f">>> ledger.total_holdings_value('{ana.id}')")
    print(f"{ledger.total_holdings_value(ana.id)}")

    section_header("Key Insight")
    print("""
    Net worth adds cash on top. Debts are tracked separately and are NOT
    netted against it; use debt_summary() for that side of the picture.
    """)

    return ledger


def step_05_sell(ledger: Ledger):
    """Sell shares for cash."""
    step_header(5, "Selling Shares",
        "Proceeds (quantity * price) land in cash; value moves, never appears.")

    ana = ledger.list_players()[0]
    before = ledger.net_worth(ana.id)
    print(f">>> ledger.sell_shares('{ana.id}', 'property', 1)")
    proceeds = ledger.sell_shares(ana.id, "property", 1)
    print(f"Proceeds:   {proceeds}")
    print(f"Net worth:  {before} -> {ledger.net_worth(ana.id)} (unchanged)")

    return ledger


def step_06_cash_out(ledger: Ledger):
    """Cash out a sum across every instrument."""
    step_header(6, "Proportional Cash-Out",
        "A cash-out takes shares from every instrument in proportion to value.")

    ana = ledger.list_players()[0]
    print(f">>> plan = ledger.cash_out_holdings('{ana.id}', {CONFIG.ana_cash_out})")
    plan = ledger.cash_out_holdings(ana.id, CONFIG.ana_cash_out)

    section_header("Result")
    print(f"Shares sold:      {plan.shares_sold}")
    print(f"Shares left:      {plan.remaining_holdings}")
    print(f"Value given up:   {plan.value_removed}")
    print(f"Residual:         {plan.residual}")

    section_header("Key Insight")
    print("""
    Shares are whole, so the value given up can overshoot the amount by
    less than one share's price. Cash rises by exactly the amount asked;
    the overshoot is the residual, forfeited to the bank.
    """)

    return ledger


# ============================================================================
# PHASE 3: DEBTS (Steps 7-9)
# ============================================================================

def step_07_bank_loan(ledger: Ledger):
    """Borrow from the bank."""
    step_header(7, "Bank Loans",
        "The bank is a creditor that always exists under the id 'bank'.")

    _, ben, _ = ledger.list_players()
    print(f">>> loan = ledger.add_debt('{ben.id}', BANK, {CONFIG.bank_loan})")
    loan = ledger.add_debt(ben.id, BANK, CONFIG.bank_loan)
    show_debts(ledger)

    return ledger, loan


def step_08_iou(ledger: Ledger):
    """Record a debt between two players."""
    step_header(8, "IOUs Between Players",
        "Any player can owe any other player; never themselves.")

    ana, _, cleo = ledger.list_players()
    print(f">>> ledger.add_debt('{cleo.id}', '{ana.id}', {CONFIG.iou_amount})")
    iou = ledger.add_debt(cleo.id, ana.id, CONFIG.iou_amount)
    show_debts(ledger)

    return ledger, iou


def step_09_repay(ledger: Ledger, loan, iou):
    """Repay partially, then in full."""
    step_header(9, "Repayment",
        "Repayments only reduce the remaining amount. Cash is not touched.")

    print(f">>> ledger.repay_debt('{loan.id}', {CONFIG.loan_installment})")
    ledger.repay_debt(loan.id, CONFIG.loan_installment)
    print(f">>> ledger.repay_debt('{iou.id}')   # no amount = settle in full")
    ledger.repay_debt(iou.id)
    show_debts(ledger)

    section_header("Summaries")
    for p in ledger.list_players():
        s = ledger.debt_summary(p.id)
        print(f"  {p.name:<6} owes {s.owed:<8} is owed {s.receivable:<8} net {s.net}")

    return ledger


# ============================================================================
# PHASE 4: EDGE CASES (Steps 10-11)
# ============================================================================

def step_10_rejections(ledger: Ledger):
    """See that rejected calls change nothing."""
    step_header(10, "Rejected Operations",
        "Every operation validates fully first. Rejected means NOTHING happened.")

    ana, ben, _ = ledger.list_players()
    attempts = [
        (f"ledger.sell_shares('{ben.id}', 'education', 3)",
         lambda: ledger.sell_shares(ben.id, "education", 3)),
        (f"ledger.add_debt('{ana.id}', '{ana.id}', 100)",
         lambda: ledger.add_debt(ana.id, ana.id, 100)),
        (f"ledger.cash_out_holdings('{ben.id}', 1000)",
         lambda: ledger.cash_out_holdings(ben.id, 1000)),
        ("ledger.repay_debt('debt_99')",
         lambda: ledger.repay_debt("debt_99")),
    ]
    for text, call in attempts:
        print(f">>> {text}")
        try:
            call()
        except LedgerError as exc:
            print(f"    {type(exc).__name__}: {exc}")

    section_header("Players (unchanged)")
    show_table(ledger)

    return ledger


def step_11_leaving_player(ledger: Ledger):
    """Remove a player who still owes money."""
    step_header(11, "A Player Leaves Owing Money",
        "Debts outlive their parties; a missing party shows as 'unknown'.")

    _, ben, _ = ledger.list_players()
    print(f">>> ledger.remove_player('{ben.id}')")
    ledger.remove_player(ben.id)
    show_debts(ledger)

    return ledger


# ============================================================================
# PHASE 5: NEW GAME (Step 12)
# ============================================================================

def step_12_reset(ledger: Ledger):
    """Reset to the default roster."""
    step_header(12, "New Game",
        "reset_to_defaults() re-seats the roster with fresh ids. Debts stay.")

    print(">>> ledger.reset_to_defaults()")
    ledger.reset_to_defaults()

    section_header("Players")
    show_table(ledger)
    section_header("Debts")
    show_debts(ledger)

    return ledger


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       GAME LEDGER - INTERACTIVE TUTORIAL")
    print("=" * 70)
    print("""
    Welcome! This tutorial walks through one evening at the game table.

    PHASES:
      1-3:   Setup      - Default table, seats, dealing shares
      4-6:   Shares     - Value, selling, proportional cash-out
      7-9:   Debts      - Bank loans, IOUs, repayment
      10-11: Edge Cases - Rejections, players leaving owing money
      12:    New Game   - Reset
    """)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    wait_for_enter()

    # Phase 1: Setup
    ledger = step_01_default_table()
    wait_for_enter()

    ledger = step_02_seats(ledger)
    wait_for_enter()

    ledger = step_03_deal_shares(ledger)
    wait_for_enter()

    # Phase 2: Shares
    ledger = step_04_value(ledger)
    wait_for_enter()

    ledger = step_05_sell(ledger)
    wait_for_enter()

    ledger = step_06_cash_out(ledger)
    wait_for_enter()

    # Phase 3: Debts
    ledger, loan = step_07_bank_loan(ledger)
    wait_for_enter()

    ledger, iou = step_08_iou(ledger)
    wait_for_enter()

    ledger = step_09_repay(ledger, loan, iou)
    wait_for_enter()

    # Phase 4: Edge Cases
    ledger = step_10_rejections(ledger)
    wait_for_enter()

    ledger = step_11_leaving_player(ledger)
    wait_for_enter()

    # Phase 5: New Game
    step_12_reset(ledger)

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print("""
    You've learned:

    SHARES
      - One price per instrument, whole shares per player
      - Selling and cashing out convert value into cash

    DEBTS
      - Debts point at a player or the bank
      - Repayment only ever lowers the remaining amount

    GUARANTEES
      - Rejected operations leave no trace
      - Debts survive players leaving or a reset

    Next steps:
      - See gameledger/holdings.py for the cash-out rounding rule
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()
