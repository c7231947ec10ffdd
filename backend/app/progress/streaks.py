from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Literal, Optional, Union

from backend.app.progress.records import (
    ContributionLike,
    as_contributions,
    group_contributions_by_month,
    is_consecutive_month,
    latest_contribution,
    previous_month_keys,
    resolve_now,
)


@dataclass(frozen=True)
class StreakData:
    current_streak: int
    longest_streak: int
    total_contributions: int
    last_contribution_date: Optional[str] = None
    streak_type: Literal["monthly"] = "monthly"


def current_streak(month_keys_newest_first: List[str], anchor: Union[datetime, date]) -> int:
    """Unbroken run of months ending at the anchor month; any gap ends it."""
    present = set(month_keys_newest_first)
    streak = 0
    for expected in previous_month_keys(anchor, len(present)):
        if expected not in present:
            break
        streak += 1
    return streak


def longest_streak(month_keys_newest_first: List[str]) -> int:
    if not month_keys_newest_first:
        return 0
    best = run = 1
    for newer, older in zip(month_keys_newest_first, month_keys_newest_first[1:]):
        if is_consecutive_month(newer, older):
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def compute_contribution_streak(
    contributions: Optional[Iterable[ContributionLike]],
    now: Optional[Union[datetime, date, str]] = None,
) -> StreakData:
    records = as_contributions(contributions)
    if not records:
        return StreakData(current_streak=0, longest_streak=0, total_contributions=0)

    keys = list(reversed(group_contributions_by_month(records).keys()))
    last = latest_contribution(records)

    return StreakData(
        current_streak=current_streak(keys, resolve_now(now)),
        longest_streak=longest_streak(keys),
        total_contributions=len(records),
        last_contribution_date=last.created_at.isoformat() if last else None,
    )
