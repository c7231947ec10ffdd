from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from backend.app.progress.expected import ExpectedBreakdown, compute_expected_breakdown
from backend.app.progress.records import (
    ContributionLike,
    ExpenseLike,
    GoalLike,
    as_contributions,
    as_expenses,
    as_goals,
    coerce_amount,
    contributions_for_month,
    monthly_expense_total,
    month_name,
    parse_month,
    previous_month_keys,
    resolve_now,
    sum_amounts,
    sum_for_actor,
)

ProgressStatus = Literal["completed", "on-track", "behind", "ahead"]

ON_TRACK_TOLERANCE_PCT = -10.0
GOAL_ON_TRACK_PCT = 90.0
GOAL_AHEAD_PCT = 75.0
SAFETY_POT_BUFFER_MONTHS = 6


@dataclass(frozen=True)
class GoalProgress:
    goal_id: Optional[str]
    goal_name: Optional[str]
    target_amount: float
    current_amount: float
    monthly_target: float
    actual_contribution: float
    progress: float
    status: ProgressStatus


@dataclass(frozen=True)
class MonthlyProgress:
    """
    One calendar month of expected-vs-actual contributions.

    Invariants:
    - total_actual == user_contribution + partner_contribution
    - over_under_percentage == 0 when total_expected == 0
    - expenses_covered == min(total_actual, monthly expense total)
    """

    month: str
    year: int
    month_number: int
    month_name: str
    total_expected: float
    total_actual: float
    user_contribution: float
    partner_contribution: float
    over_under_amount: float
    over_under_percentage: float
    status: ProgressStatus
    goals_progress: List[GoalProgress]
    expenses_covered: float
    safety_pot_contribution: float
    expected_breakdown: ExpectedBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def classify_month_status(over_under_percentage: float, actual: float, expected: float) -> ProgressStatus:
    # "ahead" is never produced at the month level; anything at/above expected is "completed".
    if actual >= expected:
        return "completed"
    if over_under_percentage >= ON_TRACK_TOLERANCE_PCT:
        return "on-track"
    return "behind"


def classify_goal_status(progress: float, actual: float, target: float) -> ProgressStatus:
    if actual >= target:
        return "completed"
    if progress >= GOAL_ON_TRACK_PCT:
        return "on-track"
    if progress >= GOAL_AHEAD_PCT:
        return "ahead"
    return "behind"


def build_goals_progress(
    goals: Optional[Iterable[GoalLike]],
    month_contributions: Optional[Iterable[ContributionLike]],
) -> List[GoalProgress]:
    contribs = as_contributions(month_contributions)
    out: List[GoalProgress] = []
    for g in as_goals(goals):
        if g.status != "active":
            continue
        monthly_target = coerce_amount(g.monthly_target)
        actual = sum_amounts(c for c in contribs if g.id is not None and c.goal_id == g.id)
        progress = (actual / monthly_target) * 100 if monthly_target > 0 else 0.0
        out.append(
            GoalProgress(
                goal_id=g.id,
                goal_name=g.name,
                target_amount=g.target_amount,
                current_amount=g.current_amount,
                monthly_target=monthly_target,
                actual_contribution=actual,
                progress=progress,
                status=classify_goal_status(progress, actual, monthly_target),
            )
        )
    return out


def safety_pot_contribution(total_actual: float, total_expected: float, current_safety_pot: float) -> float:
    if total_actual <= total_expected:
        return 0.0
    excess = total_actual - total_expected
    needed = max(0.0, total_expected * SAFETY_POT_BUFFER_MONTHS - coerce_amount(current_safety_pot))
    return min(excess, needed)


def build_monthly_progress(
    month: str,
    contributions: Optional[Iterable[ContributionLike]],
    goals: Optional[Iterable[GoalLike]],
    expenses: Optional[Iterable[ExpenseLike]],
    safety_pot_amount: float,
    user_id: Optional[str],
    partner_id: Optional[str],
    now: Optional[Union[datetime, date, str]] = None,
) -> MonthlyProgress:
    """
    Deterministic month snapshot.

    `now` anchors the months-to-deadline math for goal installments; pass it
    explicitly to get reproducible output.
    """
    parsed = parse_month(month)
    year, month_number = parsed if parsed else (0, 0)

    goal_records = as_goals(goals)
    expense_records = as_expenses(expenses)
    month_contribs = contributions_for_month(contributions, month)

    expected = compute_expected_breakdown(expense_records, goal_records, safety_pot_amount, now)
    total_expected = expected.total

    user_contribution = sum_for_actor(month_contribs, user_id)
    partner_contribution = sum_for_actor(month_contribs, partner_id)
    total_actual = user_contribution + partner_contribution

    over_under_amount = total_actual - total_expected
    over_under_percentage = (over_under_amount / total_expected) * 100 if total_expected > 0 else 0.0

    return MonthlyProgress(
        month=month,
        year=year,
        month_number=month_number,
        month_name=month_name(month_number),
        total_expected=total_expected,
        total_actual=total_actual,
        user_contribution=user_contribution,
        partner_contribution=partner_contribution,
        over_under_amount=over_under_amount,
        over_under_percentage=over_under_percentage,
        status=classify_month_status(over_under_percentage, total_actual, total_expected),
        goals_progress=build_goals_progress(goal_records, month_contribs),
        expenses_covered=min(total_actual, monthly_expense_total(expense_records)),
        safety_pot_contribution=safety_pot_contribution(total_actual, total_expected, safety_pot_amount),
        expected_breakdown=expected,
    )


def build_progress_series(
    contributions: Optional[Iterable[ContributionLike]],
    goals: Optional[Iterable[GoalLike]],
    expenses: Optional[Iterable[ExpenseLike]],
    safety_pot_amount: float,
    user_id: Optional[str],
    partner_id: Optional[str],
    months: int = 12,
    now: Optional[Union[datetime, date, str]] = None,
) -> List[MonthlyProgress]:
    """Trailing window of month snapshots ending at the current month, newest first."""
    at = resolve_now(now)
    contribs = as_contributions(contributions)
    goal_records = as_goals(goals)
    expense_records = as_expenses(expenses)
    return [
        build_monthly_progress(
            key,
            contribs,
            goal_records,
            expense_records,
            safety_pot_amount,
            user_id,
            partner_id,
            now=at,
        )
        for key in previous_month_keys(at, months)
    ]
