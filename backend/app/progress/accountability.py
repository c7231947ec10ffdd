from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Literal, Optional

from backend.app.progress.monthly import MonthlyProgress
from backend.app.progress.records import (
    ContributionLike,
    add_months,
    as_contributions,
    latest_contribution,
)

ReliabilityRating = Literal["excellent", "good", "fair", "poor"]

UNKNOWN_DATE = "Unknown"

# (threshold, rating), evaluated top-down, inclusive lower bound
RELIABILITY_BANDS = (
    (90.0, "excellent"),
    (75.0, "good"),
    (50.0, "fair"),
)


@dataclass(frozen=True)
class PartnerAccountability:
    partner_id: str
    partner_name: Optional[str]
    monthly_contributions: List[float]
    consistency_score: float
    last_contribution_date: str
    average_contribution: float
    reliability_rating: ReliabilityRating
    next_expected_contribution: str


def reliability_rating(consistency_score: float) -> ReliabilityRating:
    for threshold, rating in RELIABILITY_BANDS:
        if consistency_score >= threshold:
            return rating  # type: ignore[return-value]
    return "poor"


def next_expected_contribution(last_contribution: Optional[datetime]) -> str:
    if last_contribution is None:
        return UNKNOWN_DATE
    return add_months(last_contribution, 1).date().isoformat()


def compute_partner_accountability(
    partner_id: str,
    partner_name: Optional[str],
    records: Optional[Iterable[MonthlyProgress]],
    contributions: Optional[Iterable[ContributionLike]],
) -> PartnerAccountability:
    """
    Reliability of one partner across the given month snapshots.

    The month series only carries one number per month, so the last
    contribution timestamp comes from the raw records.
    """
    series = list(records or [])
    monthly = [r.partner_contribution for r in series]
    total_months = len(series)

    average = sum(monthly) / total_months if total_months else 0.0
    consistent_months = sum(1 for c in monthly if c > 0)
    consistency = (consistent_months / total_months) * 100 if total_months else 0.0

    pid = str(partner_id)
    last = latest_contribution(c for c in as_contributions(contributions) if c.user_id == pid)
    last_at = last.created_at if last else None

    return PartnerAccountability(
        partner_id=pid,
        partner_name=partner_name,
        monthly_contributions=monthly,
        consistency_score=consistency,
        last_contribution_date=last_at.isoformat() if last_at else "",
        average_contribution=average,
        reliability_rating=reliability_rating(consistency),
        next_expected_contribution=next_expected_contribution(last_at),
    )
