"""
FinWise - Source Package

A personal finance tracker: log income and expenses, set savings goals,
view dashboards and reports, export statements, and ask a rule-based
assistant about your own numbers.

DESIGN PRINCIPLES:
1. One store owns the records, every mutation persists
2. Aggregates are derived, never stored
3. Validate before mutating, fail visibly
4. Corrupt local data degrades to empty, never crashes
5. Storage and receipt extraction are swappable
"""

__version__ = "1.0.0"
__author__ = "FinWise Team"
