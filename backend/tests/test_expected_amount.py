from datetime import date, datetime, timezone

import pytest

from backend.app.progress.expected import (
    compute_expected_breakdown,
    compute_expected_monthly_amount,
    safety_pot_top_up,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def test_expected_amount_end_to_end_scenario():
    expenses = [{"amount": 1000, "frequency": "monthly", "status": "active"}]
    goals = [
        {
            "target_amount": 1200,
            "current_amount": 0,
            "target_date": date(2024, 9, 15),
            "status": "active",
        }
    ]

    breakdown = compute_expected_breakdown(expenses, goals, safety_pot_amount=0, now=NOW)

    assert breakdown.expenses == 1000.0
    assert breakdown.goals == pytest.approx(200.0)
    assert breakdown.safety_pot == pytest.approx(500.0)
    assert breakdown.total == pytest.approx(1700.0)


def test_goal_without_target_date_uses_twelve_month_horizon():
    goals = [{"target_amount": 2400, "current_amount": 1200, "status": "active"}]
    assert compute_expected_monthly_amount([], goals, 0, now=NOW) == pytest.approx(100.0)


def test_goal_deadline_in_the_past_or_this_month_counts_as_one_month():
    past = [{"target_amount": 500, "current_amount": 100, "target_date": "2023-01-01", "status": "active"}]
    this_month = [{"target_amount": 500, "current_amount": 100, "target_date": "2024-03-30", "status": "active"}]
    assert compute_expected_monthly_amount([], past, 0, now=NOW) == pytest.approx(400.0)
    assert compute_expected_monthly_amount([], this_month, 0, now=NOW) == pytest.approx(400.0)


def test_inactive_goals_are_excluded():
    goals = [
        {"target_amount": 1200, "current_amount": 0, "status": "completed"},
        {"target_amount": 1200, "current_amount": 0, "status": "paused"},
    ]
    assert compute_expected_monthly_amount([], goals, 0, now=NOW) == 0.0


def test_safety_pot_top_up_stops_once_target_is_reached():
    assert safety_pot_top_up(1000, 0) == pytest.approx(500.0)
    assert safety_pot_top_up(1000, 3000) == pytest.approx(250.0)
    assert safety_pot_top_up(1000, 6000) == 0.0
    assert safety_pot_top_up(1000, 9000) == 0.0
    assert safety_pot_top_up(0, 0) == 0.0


def test_missing_fields_default_to_zero_and_result_is_never_negative():
    assert compute_expected_monthly_amount(None, None, None, now=NOW) == 0.0
    assert compute_expected_monthly_amount([{}], [{}], 0, now=NOW) == 0.0

    # overfunded goal would contribute a negative installment
    goals = [{"target_amount": 100, "current_amount": 5000, "status": "active"}]
    assert compute_expected_monthly_amount([], goals, 0, now=NOW) == 0.0


def test_non_finite_inputs_do_not_leak_into_the_total():
    assert compute_expected_monthly_amount([{"amount": "inf"}], [], 0, now=NOW) == pytest.approx(0.0)

    goals = [{"target_amount": float("inf"), "current_amount": 0, "status": "active"}]
    breakdown = compute_expected_breakdown([{"amount": 100}], goals, "nan", now=NOW)
    assert breakdown.goals == 0.0
    assert breakdown.safety_pot == pytest.approx(50.0)
    assert breakdown.total == pytest.approx(150.0)
