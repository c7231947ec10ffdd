from datetime import datetime, timezone

from backend.app.progress.streaks import compute_contribution_streak

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _contribs(*months: str):
    return [{"user_id": "u1", "amount": 10, "created_at": f"{m}-05T10:00:00Z"} for m in months]


def test_unbroken_run_up_to_current_month():
    streak = compute_contribution_streak(_contribs("2024-01", "2024-02", "2024-03"), now=NOW)
    assert streak.current_streak == 3
    assert streak.longest_streak == 3
    assert streak.total_contributions == 3
    assert streak.last_contribution_date == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc).isoformat()
    assert streak.streak_type == "monthly"


def test_gap_breaks_current_streak():
    streak = compute_contribution_streak(_contribs("2024-01", "2024-03"), now=NOW)
    assert streak.current_streak == 1
    assert streak.longest_streak == 1


def test_no_contribution_this_month_means_no_current_streak():
    streak = compute_contribution_streak(_contribs("2024-01", "2024-02"), now=NOW)
    assert streak.current_streak == 0
    assert streak.longest_streak == 2


def test_longest_streak_is_scanned_independently():
    history = _contribs("2023-05", "2023-06", "2023-07", "2023-08", "2023-09", "2024-02", "2024-03")
    streak = compute_contribution_streak(history, now=NOW)
    assert streak.current_streak == 2
    assert streak.longest_streak == 5


def test_streak_spans_year_boundary_and_counts_multiple_per_month_once():
    history = _contribs("2023-11", "2023-12", "2024-01", "2024-01", "2024-02", "2024-03")
    streak = compute_contribution_streak(history, now=NOW)
    assert streak.current_streak == 5
    assert streak.longest_streak == 5
    assert streak.total_contributions == 6


def test_no_contributions():
    streak = compute_contribution_streak([], now=NOW)
    assert streak.current_streak == 0
    assert streak.longest_streak == 0
    assert streak.total_contributions == 0
    assert streak.last_contribution_date is None
