from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional
import statistics

from backend.app.progress.monthly import MonthlyProgress

GROWTH_WINDOW = 3
MIN_MONTHS_FOR_GROWTH = GROWTH_WINDOW * 2


@dataclass(frozen=True)
class MonthlyTrends:
    average_monthly_contribution: float
    contribution_growth_rate: float
    consistency_score: float
    best_month: str
    worst_month: str
    total_months_tracked: int
    months_on_track: int
    months_behind: int
    months_ahead: int


def sort_newest_first(records: Optional[Iterable[MonthlyProgress]]) -> List[MonthlyProgress]:
    # stable: equal month keys keep caller order
    return sorted(records or [], key=lambda r: r.month, reverse=True)


def _mean_actual(records: List[MonthlyProgress]) -> float:
    return statistics.fmean(r.total_actual for r in records) if records else 0.0


def contribution_growth_rate(newest_first: List[MonthlyProgress]) -> float:
    """Recent-3 mean vs prior-3 mean, in percent. Needs six months of history."""
    if len(newest_first) < MIN_MONTHS_FOR_GROWTH:
        return 0.0
    recent = _mean_actual(newest_first[:GROWTH_WINDOW])
    previous = _mean_actual(newest_first[GROWTH_WINDOW:MIN_MONTHS_FOR_GROWTH])
    if previous <= 0:
        return 0.0
    return ((recent - previous) / previous) * 100


def compute_monthly_trends(records: Optional[Iterable[MonthlyProgress]]) -> MonthlyTrends:
    ordered = sort_newest_first(records)
    if not ordered:
        return MonthlyTrends(
            average_monthly_contribution=0.0,
            contribution_growth_rate=0.0,
            consistency_score=0.0,
            best_month="",
            worst_month="",
            total_months_tracked=0,
            months_on_track=0,
            months_behind=0,
            months_ahead=0,
        )

    months_on_track = sum(1 for r in ordered if r.status in ("on-track", "completed"))
    months_behind = sum(1 for r in ordered if r.status == "behind")
    months_ahead = sum(1 for r in ordered if r.status == "ahead")

    # ties keep the first encountered, i.e. the most recent month
    best = ordered[0]
    worst = ordered[0]
    for r in ordered[1:]:
        if r.total_actual > best.total_actual:
            best = r
        if r.total_actual < worst.total_actual:
            worst = r

    return MonthlyTrends(
        average_monthly_contribution=_mean_actual(ordered),
        contribution_growth_rate=contribution_growth_rate(ordered),
        consistency_score=(months_on_track / len(ordered)) * 100,
        best_month=best.month_name,
        worst_month=worst.month_name,
        total_months_tracked=len(ordered),
        months_on_track=months_on_track,
        months_behind=months_behind,
        months_ahead=months_ahead,
    )
