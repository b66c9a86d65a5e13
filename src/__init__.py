"""
Debt Ledger - Source Package

Records who owes whom from one typed line at a time and rebuilds
per-person balances, interest and overdue status on demand.

DESIGN PRINCIPLES:
1. Understand the sentence or say so; never guess
2. Fail early, fail visibly
3. No silent corrections
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Debt Ledger Team"
