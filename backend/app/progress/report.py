from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Union

from backend.app.progress.accountability import compute_partner_accountability
from backend.app.progress.formatting import DEFAULT_CURRENCY, format_currency
from backend.app.progress.insights import generate_progress_insights
from backend.app.progress.monthly import build_progress_series
from backend.app.progress.records import (
    ContributionLike,
    ExpenseLike,
    GoalLike,
    as_contributions,
    resolve_now,
)
from backend.app.progress.trends import compute_monthly_trends

COMPUTATION_VERSION = "progress_engine_v1"


def build_progress_report(
    user_id: str,
    partner_id: str,
    partner_name: Optional[str],
    contributions: Optional[Iterable[ContributionLike]],
    goals: Optional[Iterable[GoalLike]],
    expenses: Optional[Iterable[ExpenseLike]],
    safety_pot_amount: float = 0.0,
    months: int = 12,
    currency: str = DEFAULT_CURRENCY,
    now: Optional[Union[datetime, date, str]] = None,
) -> Dict[str, Any]:
    """
    Full accountability report for a partnership.

    monthly series (newest first) -> trends + partner accountability -> insights.
    """
    at = resolve_now(now)
    contribs = as_contributions(contributions)

    # 1) Month snapshots
    series = build_progress_series(
        contribs, goals, expenses, safety_pot_amount, user_id, partner_id, months=months, now=at
    )

    # 2) Aggregates
    trends = compute_monthly_trends(series)
    accountability = compute_partner_accountability(partner_id, partner_name, series, contribs)

    # 3) Insights
    insights = generate_progress_insights(series, trends, accountability)

    current = series[0] if series else None

    return {
        "as_of": at.isoformat(),
        "current_month": asdict(current) if current else None,
        "monthly_progress": [asdict(r) for r in series],
        "trends": asdict(trends),
        "partner_accountability": asdict(accountability),
        "insights": asdict(insights),
        "summary": {
            "total_months_tracked": trends.total_months_tracked,
            "average_monthly_contribution": trends.average_monthly_contribution,
            "average_monthly_contribution_display": format_currency(
                trends.average_monthly_contribution, currency
            ),
            "consistency_score": trends.consistency_score,
            "financial_health": insights.financial_health,
        },
        "meta": {"computation_version": COMPUTATION_VERSION, "months": months, "currency": currency},
    }
