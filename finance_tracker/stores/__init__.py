"""
Stores Package

Each store owns one slice of persisted state. Nothing else writes it.
"""

from finance_tracker.stores.transactions import TransactionStore
from finance_tracker.stores.users import UserStore
from finance_tracker.stores.preferences import PreferenceStore

__all__ = [
    "PreferenceStore",
    "TransactionStore",
    "UserStore",
]
