from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Literal, Optional, Tuple

from backend.app.progress.accountability import PartnerAccountability
from backend.app.progress.monthly import MonthlyProgress
from backend.app.progress.trends import GROWTH_WINDOW, MonthlyTrends, sort_newest_first

FinancialHealth = Literal["excellent", "good", "fair", "needs-attention"]


@dataclass(frozen=True)
class ProgressInsights:
    financial_health: FinancialHealth
    recommendations: List[str] = field(default_factory=list)
    next_month_projection: float = 0.0
    risk_factors: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)


Rule = Tuple[Callable[[MonthlyTrends, PartnerAccountability], bool], str]

RECOMMENDATION_RULES: List[Rule] = [
    (
        lambda t, p: t.consistency_score < 80,
        "Set up monthly reminders to improve contribution consistency",
    ),
    (
        lambda t, p: t.contribution_growth_rate < 0,
        "Review your budget to identify areas for increased savings",
    ),
    (
        lambda t, p: p.reliability_rating == "poor",
        "Have a conversation with your partner about contribution expectations",
    ),
]

RISK_RULES: List[Rule] = [
    (
        lambda t, p: t.months_behind > t.months_on_track,
        "Consistently falling behind monthly targets",
    ),
    (
        lambda t, p: p.consistency_score < 70,
        "Partner contribution inconsistency may affect joint goals",
    ),
]

OPPORTUNITY_RULES: List[Rule] = [
    (
        lambda t, p: t.contribution_growth_rate > 0,
        "Your savings rate is improving - consider increasing goal targets",
    ),
    (
        lambda t, p: t.consistency_score > 85,
        "Excellent consistency - you could take on more ambitious financial goals",
    ),
]


def classify_financial_health(consistency_score: float, growth_rate: float) -> FinancialHealth:
    if consistency_score >= 90 and growth_rate >= 0:
        return "excellent"
    if consistency_score >= 75 and growth_rate >= -5:
        return "good"
    if consistency_score >= 50:
        return "fair"
    return "needs-attention"


def _apply(rules: List[Rule], trends: MonthlyTrends, partner: PartnerAccountability) -> List[str]:
    return [message for predicate, message in rules if predicate(trends, partner)]


def next_month_projection(records: Optional[Iterable[MonthlyProgress]], growth_rate: float) -> float:
    recent = sort_newest_first(records)[:GROWTH_WINDOW]
    if not recent:
        return 0.0
    recent_average = sum(r.total_actual for r in recent) / len(recent)
    return recent_average * (1 + growth_rate / 100)


def generate_progress_insights(
    records: Optional[Iterable[MonthlyProgress]],
    trends: MonthlyTrends,
    partner: PartnerAccountability,
) -> ProgressInsights:
    return ProgressInsights(
        financial_health=classify_financial_health(trends.consistency_score, trends.contribution_growth_rate),
        recommendations=_apply(RECOMMENDATION_RULES, trends, partner),
        next_month_projection=next_month_projection(records, trends.contribution_growth_rate),
        risk_factors=_apply(RISK_RULES, trends, partner),
        opportunities=_apply(OPPORTUNITY_RULES, trends, partner),
    )
