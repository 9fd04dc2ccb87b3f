"""
Ledger Kernel

Daily sales ledger for a smoothie stand with:
- Derived sales, cash-in-hand and running balance
- Day close that locks the ledger and carries the balance forward
- PIN-gated reopening of closed or past days
- Monthly stock valuation
"""

__version__ = "0.1.0"
