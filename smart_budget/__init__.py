"""
Smart Budget - Source Package

A personal finance tracker for logging expenses, money owed to the user
(receivables) and money the user owes (payables) while keeping a running
cash balance.

DESIGN PRINCIPLES:
1. The balance is the single source of truth for cash on hand
2. Every balance change is explained by an entry in the history log
3. The reconciliation core is pure; persistence is a side effect
4. Invalid input is reported, never silently corrected
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Smart Budget Team"
