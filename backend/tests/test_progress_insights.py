import pytest

from backend.app.progress.accountability import PartnerAccountability
from backend.app.progress.expected import ExpectedBreakdown
from backend.app.progress.insights import classify_financial_health, generate_progress_insights
from backend.app.progress.monthly import MonthlyProgress
from backend.app.progress.records import month_name, parse_month
from backend.app.progress.trends import MonthlyTrends


def _trends(consistency: float, growth: float, on_track: int = 0, behind: int = 0) -> MonthlyTrends:
    return MonthlyTrends(
        average_monthly_contribution=0.0,
        contribution_growth_rate=growth,
        consistency_score=consistency,
        best_month="",
        worst_month="",
        total_months_tracked=on_track + behind,
        months_on_track=on_track,
        months_behind=behind,
        months_ahead=0,
    )


def _partner(consistency: float, rating: str) -> PartnerAccountability:
    return PartnerAccountability(
        partner_id="p1",
        partner_name="Sam",
        monthly_contributions=[],
        consistency_score=consistency,
        last_contribution_date="",
        average_contribution=0.0,
        reliability_rating=rating,
        next_expected_contribution="Unknown",
    )


def _month(key: str, actual: float) -> MonthlyProgress:
    year, number = parse_month(key)
    return MonthlyProgress(
        month=key,
        year=year,
        month_number=number,
        month_name=month_name(number),
        total_expected=0.0,
        total_actual=actual,
        user_contribution=actual,
        partner_contribution=0.0,
        over_under_amount=actual,
        over_under_percentage=0.0,
        status="completed",
        goals_progress=[],
        expenses_covered=0.0,
        safety_pot_contribution=0.0,
        expected_breakdown=ExpectedBreakdown(0.0, 0.0, 0.0, 0.0),
    )


@pytest.mark.parametrize(
    "consistency,growth,health",
    [
        (90.0, 0.0, "excellent"),
        (95.0, -1.0, "good"),
        (75.0, -5.0, "good"),
        (80.0, -6.0, "fair"),
        (50.0, 20.0, "fair"),
        (49.9, 50.0, "needs-attention"),
    ],
)
def test_financial_health_ladder(consistency, growth, health):
    assert classify_financial_health(consistency, growth) == health


def test_struggling_couple_gets_every_warning():
    insights = generate_progress_insights([], _trends(60.0, -10.0, on_track=3, behind=5), _partner(40.0, "poor"))

    assert insights.financial_health == "fair"
    assert insights.recommendations == [
        "Set up monthly reminders to improve contribution consistency",
        "Review your budget to identify areas for increased savings",
        "Have a conversation with your partner about contribution expectations",
    ]
    assert insights.risk_factors == [
        "Consistently falling behind monthly targets",
        "Partner contribution inconsistency may affect joint goals",
    ]
    assert insights.opportunities == []
    assert insights.next_month_projection == 0.0


def test_thriving_couple_gets_only_opportunities():
    insights = generate_progress_insights([], _trends(95.0, 10.0, on_track=10), _partner(100.0, "excellent"))

    assert insights.financial_health == "excellent"
    assert insights.recommendations == []
    assert insights.risk_factors == []
    assert insights.opportunities == [
        "Your savings rate is improving - consider increasing goal targets",
        "Excellent consistency - you could take on more ambitious financial goals",
    ]


def test_rules_are_independent():
    # consistency 82: no reminder (>= 80) and no consistency opportunity (<= 85)
    insights = generate_progress_insights([], _trends(82.0, 0.0, on_track=4, behind=1), _partner(65.0, "fair"))
    assert insights.recommendations == []
    assert insights.risk_factors == ["Partner contribution inconsistency may affect joint goals"]
    assert insights.opportunities == []


def test_next_month_projection_uses_three_most_recent_months():
    records = [
        _month("2023-12", 10_000),
        _month("2024-01", 300),
        _month("2024-03", 100),
        _month("2024-02", 200),
    ]
    insights = generate_progress_insights(records, _trends(100.0, 10.0), _partner(100.0, "excellent"))
    assert insights.next_month_projection == pytest.approx(220.0)
