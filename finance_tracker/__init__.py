"""
Finance Tracker - Core Package

Local storage and aggregation layer for a personal finance tracker.
Screens call into the stores for raw data, pass it through the
analysis functions, and render the result.

DESIGN PRINCIPLES:
1. Stores own their data; nobody else writes it
2. Expected failures return a result, they never raise
3. Persisted state is rewritten whole, never half-written
4. Aggregations are pure functions over plain lists
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
