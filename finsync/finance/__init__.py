"""Mini README: Finance domain model for Finsync.

This package holds the transaction record type, the observable local state
store that mirrors the remote collection, and pure metric helpers that
produce the dashboard figures. Nothing here performs I/O.
"""

from .metrics import (
    category_breakdown,
    monthly_trends,
    summarise,
    total_balance,
    total_expense,
    total_income,
)
from .records import Transaction, TransactionType, coerce_amount, parse_date
from .state import AddBatch, LocalStateStore, RemoveOne, SetDerivedSalary, UpdateOne

__all__ = [
    "AddBatch",
    "LocalStateStore",
    "RemoveOne",
    "SetDerivedSalary",
    "Transaction",
    "TransactionType",
    "UpdateOne",
    "category_breakdown",
    "coerce_amount",
    "monthly_trends",
    "parse_date",
    "summarise",
    "total_balance",
    "total_expense",
    "total_income",
]
