from .accountability import PartnerAccountability, compute_partner_accountability
from .achievements import (
    ACHIEVEMENTS,
    Achievement,
    evaluate_achievements,
    newly_unlocked,
    summarize_achievements,
)
from .expected import compute_expected_monthly_amount
from .formatting import format_currency
from .insights import ProgressInsights, generate_progress_insights
from .monthly import GoalProgress, MonthlyProgress, build_monthly_progress, build_progress_series
from .report import build_progress_report
from .streaks import StreakData, compute_contribution_streak
from .trends import MonthlyTrends, compute_monthly_trends

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "GoalProgress",
    "MonthlyProgress",
    "MonthlyTrends",
    "PartnerAccountability",
    "ProgressInsights",
    "StreakData",
    "build_monthly_progress",
    "build_progress_report",
    "build_progress_series",
    "compute_contribution_streak",
    "compute_expected_monthly_amount",
    "compute_monthly_trends",
    "compute_partner_accountability",
    "evaluate_achievements",
    "format_currency",
    "generate_progress_insights",
    "newly_unlocked",
    "summarize_achievements",
]
