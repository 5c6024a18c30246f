"""
Ledger - Source Package

Personal-finance ledger core: income/outcome transactions tied to
categories, a running balance, and bulk import from CSV files.

DESIGN PRINCIPLES:
1. Validate before persisting
2. Every balance comes from one calculator
3. Categories are created lazily, on first reference by title
4. Storage layer is swappable
5. Every step is auditable
"""

__version__ = "1.0.0"
__author__ = "Ledger Team"
