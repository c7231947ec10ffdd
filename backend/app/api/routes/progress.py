from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from backend.app.domain.contracts import MonthlyProgressRequest, ProgressReportRequest
from backend.app.services import progress_service

router = APIRouter(prefix="/api/progress", tags=["progress"])

StatusOut = Literal["completed", "on-track", "behind", "ahead"]


class GoalProgressOut(BaseModel):
    goal_id: Optional[str] = None
    goal_name: Optional[str] = None
    target_amount: float
    current_amount: float
    monthly_target: float
    actual_contribution: float
    progress: float
    status: StatusOut


class ExpectedBreakdownOut(BaseModel):
    expenses: float
    goals: float
    safety_pot: float
    total: float


class MonthlyProgressOut(BaseModel):
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
    status: StatusOut
    goals_progress: List[GoalProgressOut]
    expenses_covered: float
    safety_pot_contribution: float
    expected_breakdown: ExpectedBreakdownOut


class MonthlyTrendsOut(BaseModel):
    average_monthly_contribution: float
    contribution_growth_rate: float
    consistency_score: float
    best_month: str
    worst_month: str
    total_months_tracked: int
    months_on_track: int
    months_behind: int
    months_ahead: int


class PartnerAccountabilityOut(BaseModel):
    partner_id: str
    partner_name: Optional[str] = None
    monthly_contributions: List[float]
    consistency_score: float
    last_contribution_date: str
    average_contribution: float
    reliability_rating: Literal["excellent", "good", "fair", "poor"]
    next_expected_contribution: str


class ProgressInsightsOut(BaseModel):
    financial_health: Literal["excellent", "good", "fair", "needs-attention"]
    recommendations: List[str]
    next_month_projection: float
    risk_factors: List[str]
    opportunities: List[str]


class ProgressSummaryOut(BaseModel):
    total_months_tracked: int
    average_monthly_contribution: float
    average_monthly_contribution_display: str
    consistency_score: float
    financial_health: str


class ProgressReportOut(BaseModel):
    as_of: str
    current_month: Optional[MonthlyProgressOut] = None
    monthly_progress: List[MonthlyProgressOut]
    trends: MonthlyTrendsOut
    partner_accountability: PartnerAccountabilityOut
    insights: ProgressInsightsOut
    summary: ProgressSummaryOut
    meta: Dict[str, Any]


@router.post("/monthly", response_model=MonthlyProgressOut)
def post_monthly_progress(req: MonthlyProgressRequest):
    return progress_service.compute_monthly_progress(req)


@router.post("/report", response_model=ProgressReportOut)
def post_progress_report(req: ProgressReportRequest):
    return progress_service.compute_progress_report(req)
