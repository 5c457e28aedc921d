"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the game ledger.

The tests are organized by invariant:
1. test_atomicity.py - Rejected operations leave no trace
2. test_conservation.py - Sells and cash-outs never create or destroy value
3. test_debt_monotonicity.py - Debt balances only go down, never below zero
4. test_dangling_references.py - Debts survive removal of their parties
5. test_serialization.py - Concurrent callers are applied one at a time

These tests use hypothesis for property-based testing.
"""
