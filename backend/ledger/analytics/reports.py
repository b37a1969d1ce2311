"""
Month-bucketed report aggregation.

Everything here is a pure function of ``(records, today, plan_type)``:
the same snapshot and reference date always produce the same report.
"""

from datetime import date
from typing import Dict, Iterable, List

from billing.plans import REPORT_MONTHS, PlanType, normalize_plan

from .records import EXPENSE, INCOME, TransactionRecord, in_accumulation_order, month_start

MONTH_ABBREVIATIONS = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)

UNCATEGORIZED = "Outros"
TOP_CATEGORIES = 6
TOP_MONTHS = 3


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_window(today: date, months: int) -> List[date]:
    """
    First days of the trailing ``months`` calendar months, oldest first,
    ending with the month containing ``today``.
    """
    return [shift_month(today, -offset) for offset in range(months - 1, -1, -1)]


def month_label(day: date) -> str:
    """Short Portuguese label, e.g. ``jan/24``."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]}/{day.year % 100:02d}"


def monthly_totals(records: Iterable[TransactionRecord], today: date, months: int) -> List[Dict]:
    """
    Income, expense and profit per month for the trailing window.

    Every month of the window is present even without transactions.

    Args:
        records: User transactions, any order
        today: Reference date
        months: Window length

    Returns:
        list[dict]: One bucket per month, oldest first
    """
    window = month_window(today, months)
    buckets = {
        start: {"month": month_label(start), "month_start": start.isoformat(), "income": 0.0, "expense": 0.0}
        for start in window
    }

    for record in in_accumulation_order(records):
        bucket = buckets.get(month_start(record.date))
        if bucket is None:
            continue
        if record.type == INCOME:
            bucket["income"] += float(record.amount)
        elif record.type == EXPENSE:
            bucket["expense"] += float(record.amount)

    result = []
    for start in window:
        bucket = buckets[start]
        bucket["profit"] = bucket["income"] - bucket["expense"]
        result.append(bucket)
    return result


def expense_breakdown(records: Iterable[TransactionRecord], today: date, limit: int = TOP_CATEGORIES) -> List[Dict]:
    """
    Current-month expenses per category, largest first.

    Empty categories are grouped under ``Outros``; equal amounts keep the
    order in which the category first appeared.
    """
    current = month_start(today)
    totals: Dict[str, float] = {}

    for record in in_accumulation_order(records):
        if record.type != EXPENSE or month_start(record.date) != current:
            continue
        category = record.category or UNCATEGORIZED
        totals[category] = totals.get(category, 0.0) + float(record.amount)

    ranked = sorted(totals.items(), key=lambda item: -item[1])
    return [{"category": name, "value": value} for name, value in ranked[:limit]]


def top_months_by_profit(monthly: List[Dict], count: int = TOP_MONTHS) -> List[Dict]:
    """Best months by profit; ties stay in chronological order."""
    return sorted(monthly, key=lambda bucket: -bucket["profit"])[:count]


def build_report(records: Iterable[TransactionRecord], today: date, plan_type) -> Dict:
    """
    Full report for a plan.

    Free plans get the 6-month series and the category breakdown. Pro
    plans additionally get the 12-month series and the top months.
    """
    plan = normalize_plan(plan_type)
    records = list(records)

    report = {
        "plan_type": plan.value,
        "today": today.isoformat(),
        "monthly": monthly_totals(records, today, REPORT_MONTHS[PlanType.FREE]),
        "monthly_pro": [],
        "categories": expense_breakdown(records, today),
        "top_months": [],
    }

    if plan == PlanType.PRO:
        monthly_pro = monthly_totals(records, today, REPORT_MONTHS[PlanType.PRO])
        report["monthly_pro"] = monthly_pro
        report["top_months"] = [dict(bucket) for bucket in top_months_by_profit(monthly_pro)]

    return report
