"""
Shared normalization primitives for the analytics modules.

Every place that sums an amount or projects a recurring expense onto a month
goes through the helpers below, so the general and project-scoped analytics
always agree on the numbers.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

Record = Mapping[str, Any]

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "MAD": "DH",
}

CATEGORIES: List[str] = [
    "housing",
    "transportation",
    "food",
    "utilities",
    "healthcare",
    "entertainment",
    "shopping",
    "education",
    "savings",
    "other",
]

CATEGORY_LABELS: Dict[str, str] = {
    "housing": "Housing",
    "transportation": "Transportation",
    "food": "Food & Dining",
    "utilities": "Utilities",
    "healthcare": "Healthcare",
    "entertainment": "Entertainment",
    "shopping": "Shopping",
    "education": "Education",
    "savings": "Savings",
    "other": "Other",
}

# Kept as fixed approximations; callers render against these exact figures.
MONTHLY_MULTIPLIERS: Dict[str, float] = {
    "daily": 30,
    "weekly": 4.33,
    "monthly": 1,
    "yearly": 1 / 12,
    "one-time": 0,
}

UNASSIGNED_PROJECT = "unassigned"

TREND_MONTHS = 6

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def to_number(value: Any) -> float:
    """
    Coerce an amount to a finite float.

    Numbers pass through, strings are parsed by their leading numeric prefix
    ("12.50" -> 12.5, "12abc" -> 12.0) and anything else, including NaN and
    infinities, becomes 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        try:
            number = float(match.group(0))
        except (ValueError, OverflowError):
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0


def to_date(value: Any) -> Optional[date]:
    """Parse a date, datetime or ISO-8601 string. Returns None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def monthly_multiplier(frequency: Any) -> float:
    return MONTHLY_MULTIPLIERS.get(frequency, 0) if isinstance(frequency, str) else 0


def to_monthly(amount: Any, frequency: Any) -> float:
    """Project a recurring amount onto its monthly equivalent."""
    return to_number(amount) * monthly_multiplier(frequency)


def is_active(expense: Record) -> bool:
    return expense.get("is_active") is True


def sum_amounts(records: Iterable[Record]) -> float:
    return sum((to_number(r.get("amount")) for r in records), 0.0)


def sum_monthly(expenses: Iterable[Record]) -> float:
    """Sum of active expenses normalized to a month."""
    return sum(
        (to_monthly(e.get("amount"), e.get("frequency")) for e in expenses if is_active(e)),
        0.0,
    )


def filter_currency(records: Iterable[Record], currency: str) -> List[Record]:
    return [r for r in records if r.get("currency") == currency]


def filter_project(records: Iterable[Record], project_id: Optional[str]) -> List[Record]:
    """
    Restrict records to a project. A falsy project_id keeps everything and
    the "unassigned" sentinel keeps records without a project.
    """
    records = list(records)
    if not project_id:
        return records
    if project_id == UNASSIGNED_PROJECT:
        return [r for r in records if not r.get("project_id")]
    return [r for r in records if r.get("project_id") == project_id]


def by_category(records: Iterable[Record], category: str) -> List[Record]:
    return [r for r in records if r.get("category") == category]


def resolve_today(now: Any = None) -> date:
    resolved = to_date(now) if now is not None else None
    return resolved or date.today()


def trend_months(now: Any = None, count: int = TREND_MONTHS) -> List[date]:
    """First day of each of the trailing `count` months, oldest first, ending at now's month."""
    today = resolve_today(now)
    months = []
    for offset in range(count - 1, -1, -1):
        index = today.year * 12 + (today.month - 1) - offset
        months.append(date(index // 12, index % 12 + 1, 1))
    return months


def month_label(month: date) -> str:
    return month.strftime("%b %Y")


def same_month(value: Any, month: date) -> bool:
    parsed = to_date(value)
    return parsed is not None and parsed.year == month.year and parsed.month == month.month


def open_ended_until(now: Any = None) -> date:
    """Stand-in end date for records without one: Dec 31 of next year."""
    return date(resolve_today(now).year + 1, 12, 31)


def active_in_month(record: Record, month: date, open_end: date) -> bool:
    """True when the record's [start_date, end_date] window contains `month`."""
    start = to_date(record.get("start_date"))
    if start is None:
        return False
    end = to_date(record.get("end_date")) if record.get("end_date") else open_end
    if end is None:
        return False
    return start <= month <= end


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency, "$")


def format_amount(value: Any, currency: str = "USD", symbol: bool = True) -> str:
    """Format an amount as e.g. '$1,234.50'. With symbol=False the ISO code is used ('USD 1,234.50')."""
    amount = f"{to_number(value):,.2f}"
    if symbol:
        return f"{currency_symbol(currency)}{amount}"
    return f"{currency} {amount}"
