"""
Progress - record normalizer.

Responsibility:
- Coerce raw collaborator payloads (dicts or typed records) into typed records.
- Normalize expense amounts to a monthly figure.
- Bucket contributions by calendar month (UTC) and by actor.

Design notes:
- Nothing here raises on missing/partial input: bad numerics become 0.0,
  unparseable timestamps are skipped.
- Month keys are "YYYY-MM" strings so they sort lexically in calendar order.
"""

from __future__ import annotations

import calendar
import re
from collections import OrderedDict
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from backend.app.domain.contracts import (
    ContributionRecord,
    ExpenseRecord,
    GoalRecord,
    PartnershipRecord,
    coerce_amount,
    coerce_timestamp,
)

WEEKS_PER_MONTH = 4.33
MONTHS_PER_YEAR = 12

ContributionLike = Union[ContributionRecord, Mapping[str, Any]]
ExpenseLike = Union[ExpenseRecord, Mapping[str, Any]]
GoalLike = Union[GoalRecord, Mapping[str, Any]]
PartnershipLike = Union[PartnershipRecord, Mapping[str, Any]]

MONTH_KEY_RE = re.compile(r"([0-9]{4})-([0-9]{2})")

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


# ----------------------------
# Adapters
# ----------------------------

def as_contributions(items: Optional[Iterable[ContributionLike]]) -> List[ContributionRecord]:
    return [c if isinstance(c, ContributionRecord) else ContributionRecord(**dict(c)) for c in items or []]


def as_expenses(items: Optional[Iterable[ExpenseLike]]) -> List[ExpenseRecord]:
    return [e if isinstance(e, ExpenseRecord) else ExpenseRecord(**dict(e)) for e in items or []]


def as_goals(items: Optional[Iterable[GoalLike]]) -> List[GoalRecord]:
    return [g if isinstance(g, GoalRecord) else GoalRecord(**dict(g)) for g in items or []]


def as_partnerships(items: Optional[Iterable[PartnershipLike]]) -> List[PartnershipRecord]:
    return [p if isinstance(p, PartnershipRecord) else PartnershipRecord(**dict(p)) for p in items or []]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_now(now: Optional[Union[datetime, date, str]]) -> datetime:
    return coerce_timestamp(now) or utcnow()


# ----------------------------
# Month keys / calendar math
# ----------------------------

def month_key(value: Any) -> Optional[str]:
    ts = coerce_timestamp(value)
    if ts is None:
        return None
    return f"{ts.year:04d}-{ts.month:02d}"


def parse_month(key: str) -> Optional[tuple[int, int]]:
    # strict "YYYY-MM"; "2024-3" would never match a month_key() bucket
    match = MONTH_KEY_RE.fullmatch(str(key))
    if match is None:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


def month_name(month_number: int) -> str:
    if 1 <= month_number <= 12:
        return MONTH_NAMES[month_number - 1]
    return "Unknown"


def months_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Calendar-month difference, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(value: datetime, n: int) -> datetime:
    """Shift by n calendar months, clamping the day to the target month's length."""
    idx = value.year * 12 + (value.month - 1) + n
    year, month = divmod(idx, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def shift_month_key(key: str, n: int) -> str:
    parsed = parse_month(key)
    if parsed is None:
        return key
    idx = parsed[0] * 12 + (parsed[1] - 1) + n
    year, month = divmod(idx, 12)
    return f"{year:04d}-{month + 1:02d}"


def is_consecutive_month(newer: str, older: str) -> bool:
    return shift_month_key(older, 1) == newer


def previous_month_keys(anchor: Union[datetime, date], count: int) -> List[str]:
    """Month keys ending at anchor's month, newest first."""
    start = f"{anchor.year:04d}-{anchor.month:02d}"
    return [shift_month_key(start, -i) for i in range(max(0, count))]


# ----------------------------
# Expenses
# ----------------------------

def normalize_expense_amount(expense: ExpenseLike) -> float:
    rec = expense if isinstance(expense, ExpenseRecord) else ExpenseRecord(**dict(expense))
    if rec.frequency == "weekly":
        return rec.amount * WEEKS_PER_MONTH
    if rec.frequency == "yearly":
        return rec.amount / MONTHS_PER_YEAR
    return rec.amount


def monthly_expense_total(expenses: Optional[Iterable[ExpenseLike]]) -> float:
    return sum(
        (normalize_expense_amount(e) for e in as_expenses(expenses) if e.status == "active"),
        0.0,
    )


# ----------------------------
# Contributions
# ----------------------------

def contributions_for_month(
    contributions: Optional[Iterable[ContributionLike]],
    month: str,
) -> List[ContributionRecord]:
    return [c for c in as_contributions(contributions) if month_key(c.created_at) == month]


def group_contributions_by_month(
    contributions: Optional[Iterable[ContributionLike]],
) -> "OrderedDict[str, List[ContributionRecord]]":
    """Month key -> contributions, keys sorted oldest -> newest. Undated records are skipped."""
    grouped: Dict[str, List[ContributionRecord]] = {}
    for c in as_contributions(contributions):
        key = month_key(c.created_at)
        if not key:
            continue
        grouped.setdefault(key, []).append(c)
    return OrderedDict((k, grouped[k]) for k in sorted(grouped))


def partition_by_actor(
    contributions: Optional[Iterable[ContributionLike]],
    actor_ids: Sequence[str],
) -> Dict[str, List[ContributionRecord]]:
    out: Dict[str, List[ContributionRecord]] = {str(a): [] for a in actor_ids}
    for c in as_contributions(contributions):
        if c.user_id in out:
            out[c.user_id].append(c)
    return out


def sum_amounts(contributions: Iterable[ContributionRecord]) -> float:
    return sum((c.amount for c in contributions), 0.0)


def sum_for_actor(contributions: Iterable[ContributionRecord], actor_id: Optional[str]) -> float:
    if actor_id is None:
        return 0.0
    return sum_amounts(c for c in contributions if c.user_id == str(actor_id))


def latest_contribution(
    contributions: Iterable[ContributionRecord],
) -> Optional[ContributionRecord]:
    dated = [c for c in contributions if c.created_at is not None]
    if not dated:
        return None
    return max(dated, key=lambda c: c.created_at)
