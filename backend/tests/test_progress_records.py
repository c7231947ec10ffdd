from datetime import datetime, timezone

import pytest

from backend.app.progress.records import (
    add_months,
    contributions_for_month,
    group_contributions_by_month,
    is_consecutive_month,
    month_key,
    monthly_expense_total,
    months_between,
    normalize_expense_amount,
    parse_month,
    partition_by_actor,
    previous_month_keys,
)


def test_expense_frequency_normalization():
    assert normalize_expense_amount({"amount": 100, "frequency": "weekly"}) == pytest.approx(433.0)
    assert normalize_expense_amount({"amount": 1200, "frequency": "yearly"}) == pytest.approx(100.0)
    assert normalize_expense_amount({"amount": 250, "frequency": "monthly"}) == 250.0
    # unknown frequencies are taken at face value
    assert normalize_expense_amount({"amount": 80, "frequency": "fortnightly"}) == 80.0


def test_only_active_expenses_are_counted():
    expenses = [
        {"amount": 1000, "frequency": "monthly", "status": "active"},
        {"amount": 500, "frequency": "monthly", "status": "paused"},
        {"amount": 1200, "frequency": "yearly", "status": "ACTIVE"},
    ]
    assert monthly_expense_total(expenses) == pytest.approx(1100.0)


def test_empty_and_malformed_records_yield_zero():
    assert monthly_expense_total([]) == 0.0
    assert monthly_expense_total(None) == 0.0
    assert monthly_expense_total([{"amount": None}, {"amount": "abc", "frequency": "weekly"}]) == 0.0
    assert contributions_for_month([], "2024-03") == []
    assert group_contributions_by_month(None) == {}


def test_month_key_truncates_to_utc_month():
    assert month_key("2024-03-31T23:30:00-02:00") == "2024-04"
    assert month_key("2024-03-05T10:00:00Z") == "2024-03"
    assert month_key(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01"
    assert month_key("not a date") is None
    assert month_key(None) is None


def test_contributions_grouped_and_partitioned():
    contributions = [
        {"user_id": "u1", "amount": 10, "created_at": "2024-02-01T00:00:00Z"},
        {"user_id": "u2", "amount": 20, "created_at": "2024-01-15T00:00:00Z"},
        {"user_id": "u1", "amount": 30, "created_at": "2024-02-20T00:00:00Z"},
        {"user_id": "u1", "amount": 40},
    ]

    grouped = group_contributions_by_month(contributions)
    assert list(grouped.keys()) == ["2024-01", "2024-02"]
    assert [c.amount for c in grouped["2024-02"]] == [10.0, 30.0]

    by_actor = partition_by_actor(contributions, ["u1", "u2", "u3"])
    assert len(by_actor["u1"]) == 3
    assert len(by_actor["u2"]) == 1
    assert by_actor["u3"] == []

    february = contributions_for_month(contributions, "2024-02")
    assert sum(c.amount for c in february) == 40.0


def test_calendar_helpers():
    assert months_between(datetime(2024, 3, 31), datetime(2024, 9, 1)) == 6
    assert months_between(datetime(2024, 3, 1), datetime(2023, 12, 1)) == -3
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2023, 12, 15), 1) == datetime(2024, 1, 15)
    assert previous_month_keys(datetime(2024, 2, 10), 3) == ["2024-02", "2024-01", "2023-12"]
    assert is_consecutive_month("2024-01", "2023-12")
    assert not is_consecutive_month("2024-03", "2024-01")


def test_non_finite_amounts_yield_zero():
    expenses = [
        {"amount": "inf"},
        {"amount": float("nan"), "frequency": "weekly"},
        {"amount": "-Infinity", "frequency": "yearly"},
        {"amount": 100},
    ]
    assert monthly_expense_total(expenses) == 100.0

    contributions = [
        {"user_id": "u1", "amount": "nan", "created_at": "2024-02-01T00:00:00Z"},
        {"user_id": "u1", "amount": float("inf"), "created_at": "2024-02-02T00:00:00Z"},
        {"user_id": "u1", "amount": 25, "created_at": "2024-02-03T00:00:00Z"},
    ]
    assert sum(c.amount for c in contributions_for_month(contributions, "2024-02")) == 25.0


@pytest.mark.parametrize("key", ["2024-3", "2024- 3", "2024-+1", "2024-03 ", "24-03", "2024-13", "2024-00", "", None])
def test_parse_month_rejects_non_canonical_keys(key):
    assert parse_month(key) is None


def test_parse_month_accepts_canonical_keys():
    assert parse_month("2024-03") == (2024, 3)
    assert parse_month("1999-12") == (1999, 12)
