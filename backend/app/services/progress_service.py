from __future__ import annotations

from dataclasses import asdict
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from backend.app.api import config
from backend.app.domain.contracts import (
    AchievementsRequest,
    ContributionRecord,
    MonthlyProgressRequest,
    ProgressReportRequest,
    StreakRequest,
)
from backend.app.progress.achievements import (
    evaluate_achievements,
    newly_unlocked,
    summarize_achievements,
)
from backend.app.progress.monthly import build_monthly_progress
from backend.app.progress.records import parse_month, resolve_now
from backend.app.progress.report import build_progress_report
from backend.app.progress.streaks import compute_contribution_streak

logger = logging.getLogger(__name__)


def _require_month(month: str) -> str:
    key = (month or "").strip()
    if parse_month(key) is None:
        raise HTTPException(status_code=422, detail="month must be formatted as YYYY-MM")
    return key


def _resolve_months(months: Optional[int]) -> int:
    if months is None:
        return config.lookback_months()
    if not 1 <= months <= config.MAX_LOOKBACK_MONTHS:
        raise HTTPException(
            status_code=422,
            detail=f"months must be between 1 and {config.MAX_LOOKBACK_MONTHS}",
        )
    return months


def _warn_undated(contributions: List[ContributionRecord], context: str) -> None:
    undated = sum(1 for c in contributions if c.created_at is None)
    if undated:
        logger.warning("Skipping %s undated contribution(s) in %s", undated, context)


def compute_monthly_progress(req: MonthlyProgressRequest) -> Dict[str, Any]:
    month = _require_month(req.month)
    _warn_undated(req.contributions, "monthly progress")
    if req.user.id == req.partner.id:
        logger.warning("Monthly progress requested with identical user and partner id=%s", req.user.id)
    record = build_monthly_progress(
        month,
        req.contributions,
        req.goals,
        req.expenses,
        req.safety_pot_amount,
        req.user.id,
        req.partner.id,
        now=resolve_now(req.as_of),
    )
    return asdict(record)


def compute_progress_report(req: ProgressReportRequest) -> Dict[str, Any]:
    months = _resolve_months(req.months)
    _warn_undated(req.contributions, "progress report")
    return build_progress_report(
        user_id=req.user.id,
        partner_id=req.partner.id,
        partner_name=req.partner.name,
        contributions=req.contributions,
        goals=req.goals,
        expenses=req.expenses,
        safety_pot_amount=req.safety_pot_amount,
        months=months,
        currency=(req.currency or config.default_currency()).strip().upper(),
        now=resolve_now(req.as_of),
    )


def compute_achievements(req: AchievementsRequest) -> Dict[str, Any]:
    at = resolve_now(req.as_of)
    current = evaluate_achievements(
        req.contributions,
        req.goals,
        req.partnerships,
        safety_pot_amount=req.safety_pot_amount,
        previous=req.previous,
        now=at,
    )
    fresh = newly_unlocked(req.previous, current)
    if fresh:
        logger.info("Unlocked achievements: %s", ", ".join(a.id for a in fresh))
    summary = summarize_achievements(current)
    return {
        "as_of": at.isoformat(),
        "achievements": [asdict(a) for a in current],
        "summary": asdict(summary),
        "new_achievements": [
            {
                "id": a.id,
                "name": a.name,
                "description": a.description,
                "icon": a.icon,
                "points": a.points,
                "rarity": a.rarity,
            }
            for a in fresh
        ],
    }


def compute_streaks(req: StreakRequest) -> Dict[str, Any]:
    _warn_undated(req.contributions, "streaks")
    return asdict(compute_contribution_streak(req.contributions, now=resolve_now(req.as_of)))
