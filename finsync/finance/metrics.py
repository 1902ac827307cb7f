"""Mini README: Pure aggregate computations over local transactions.

Structure:
    * total_income / total_expense / total_balance - headline figures.
    * summarise - the three headline figures in one JSON-ready mapping.
    * category_breakdown - per-category totals for the breakdown chart.
    * monthly_trends - per-month income and expense for the trends chart.

Every function takes any iterable of ``Transaction`` and recomputes from
scratch; nothing is cached.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from .records import Transaction, TransactionType


def _sum_of_type(records: Iterable[Transaction], transaction_type: TransactionType) -> float:
    return sum(
        record.amount for record in records if record.transaction_type is transaction_type
    )


def total_income(records: Iterable[Transaction]) -> float:
    return _sum_of_type(records, TransactionType.INCOME)


def total_expense(records: Iterable[Transaction]) -> float:
    return _sum_of_type(records, TransactionType.EXPENSE)


def total_balance(records: Iterable[Transaction]) -> float:
    """Income minus expense."""

    materialised = list(records)
    return total_income(materialised) - total_expense(materialised)


def summarise(records: Iterable[Transaction]) -> Dict[str, float]:
    """Return income, expense and balance for dashboard headers."""

    materialised = list(records)
    income = total_income(materialised)
    expense = total_expense(materialised)
    return {
        "total_income": income,
        "total_expense": expense,
        "total_balance": income - expense,
    }


def category_breakdown(
    records: Iterable[Transaction],
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> List[Dict[str, object]]:
    """Total amounts per category, largest first then alphabetical."""

    totals: Dict[str, float] = defaultdict(float)
    for record in records:
        if record.transaction_type is transaction_type:
            totals[record.category] += record.amount
    return [
        {"category": category, "amount": amount}
        for category, amount in sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    ]


def monthly_trends(records: Iterable[Transaction]) -> List[Dict[str, object]]:
    """Income and expense per ``YYYY-MM`` month in chronological order.

    Records without a date cannot be placed on the timeline and are skipped.
    """

    months: Dict[str, Dict[str, float]] = defaultdict(lambda: {"income": 0.0, "expense": 0.0})
    for record in records:
        if record.occurred_on is None:
            continue
        key = record.occurred_on.strftime("%Y-%m")
        months[key][record.transaction_type.value] += record.amount
    return [{"month": month, **months[month]} for month in sorted(months)]
