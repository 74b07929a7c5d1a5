"""
Expense Tracker - Source Package

A small single-screen expense recorder. Expenses (amount, free-form
tags, date) are kept in memory and written to a CSV file in local
application storage on every change.

DESIGN PRINCIPLES:
1. The UI owns no logic - it calls the orchestrator
2. Bad input is rejected loudly, before any state changes
3. A damaged file costs the damaged lines, never the whole file
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
