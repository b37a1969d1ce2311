"""
Plain transaction records consumed by the analytics functions.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

INCOME = "income"
EXPENSE = "expense"

RECORD_FIELDS = ("id", "type", "amount", "category", "date", "created_at")


@dataclass(frozen=True)
class TransactionRecord:
    type: str
    amount: Decimal
    date: date
    category: str = ""
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def from_values(cls, row: dict) -> "TransactionRecord":
        """Build a record from a ``QuerySet.values(*RECORD_FIELDS)`` row."""
        return cls(
            id=row.get("id"),
            type=row["type"],
            amount=row["amount"],
            category=row.get("category") or "",
            date=row["date"],
            created_at=row.get("created_at"),
        )


def accumulation_key(record: TransactionRecord):
    """Ascending (date, created_at, id) order used for every float sum."""
    created = record.created_at.timestamp() if record.created_at else 0.0
    return (record.date, created, record.id or 0)


def in_accumulation_order(records):
    return sorted(records, key=accumulation_key)


def month_start(day: date) -> date:
    return day.replace(day=1)
