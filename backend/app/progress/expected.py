from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from backend.app.progress.records import (
    ExpenseLike,
    GoalLike,
    as_goals,
    coerce_amount,
    monthly_expense_total,
    months_between,
    resolve_now,
)

DEFAULT_GOAL_HORIZON_MONTHS = 12
SAFETY_POT_TARGET_MONTHS = 6
SAFETY_POT_TOP_UP_MONTHS = 12


@dataclass(frozen=True)
class ExpectedBreakdown:
    expenses: float
    goals: float
    safety_pot: float
    total: float


def goal_months_to_target(target_date: Optional[date], now: datetime) -> int:
    if target_date is None:
        return DEFAULT_GOAL_HORIZON_MONTHS
    return max(1, months_between(now, target_date))


def goal_monthly_installment(goals: Optional[Iterable[GoalLike]], now: datetime) -> float:
    total = 0.0
    for g in as_goals(goals):
        if g.status != "active":
            continue
        remaining = g.target_amount - g.current_amount
        total += remaining / goal_months_to_target(g.target_date, now)
    return total


def safety_pot_top_up(monthly_expenses: float, current_safety_pot: float) -> float:
    target = monthly_expenses * SAFETY_POT_TARGET_MONTHS
    current = coerce_amount(current_safety_pot)
    if current < target:
        return (target - current) / SAFETY_POT_TOP_UP_MONTHS
    return 0.0


def compute_expected_breakdown(
    expenses: Optional[Iterable[ExpenseLike]],
    goals: Optional[Iterable[GoalLike]],
    safety_pot_amount: float = 0.0,
    now: Optional[Union[datetime, date, str]] = None,
) -> ExpectedBreakdown:
    """
    Monthly obligation = normalized active expenses
                       + sum(remaining / months-to-deadline) over active goals
                       + safety pot top-up (6x expenses target, spread over 12 months).
    """
    at = resolve_now(now)
    exp = monthly_expense_total(expenses)
    goal_part = goal_monthly_installment(goals, at)
    pot = safety_pot_top_up(exp, safety_pot_amount)
    total = max(0.0, exp + goal_part + pot)
    return ExpectedBreakdown(expenses=exp, goals=goal_part, safety_pot=pot, total=total)


def compute_expected_monthly_amount(
    expenses: Optional[Iterable[ExpenseLike]],
    goals: Optional[Iterable[GoalLike]],
    safety_pot_amount: float = 0.0,
    now: Optional[Union[datetime, date, str]] = None,
) -> float:
    return compute_expected_breakdown(expenses, goals, safety_pot_amount, now).total
