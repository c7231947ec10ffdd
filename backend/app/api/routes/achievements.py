from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from backend.app.domain.contracts import AchievementsRequest, StreakRequest
from backend.app.services import progress_service

router = APIRouter(prefix="/api", tags=["achievements"])


class RequirementOut(BaseModel):
    type: str
    value: float
    current: float
    description: str


class AchievementOut(BaseModel):
    id: str
    name: str
    description: str
    category: str
    icon: str
    points: int
    rarity: str
    requirements: List[RequirementOut]
    progress: float
    unlocked: bool
    unlocked_at: Optional[str] = None


class CategoryProgressOut(BaseModel):
    total: int
    unlocked: int
    progress: float


class AchievementSummaryOut(BaseModel):
    total_achievements: int
    unlocked_achievements: int
    total_points: int
    progress_percentage: float
    next_achievement: Optional[AchievementOut] = None
    recent_unlocks: List[AchievementOut]
    categories: Dict[str, CategoryProgressOut]
    level: int
    level_progress: float
    points_for_next_level: int


class NewAchievementOut(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    points: int
    rarity: str


class AchievementsOut(BaseModel):
    as_of: str
    achievements: List[AchievementOut]
    summary: AchievementSummaryOut
    new_achievements: List[NewAchievementOut]


class StreakOut(BaseModel):
    current_streak: int
    longest_streak: int
    total_contributions: int
    last_contribution_date: Optional[str] = None
    streak_type: str


@router.post("/achievements", response_model=AchievementsOut)
def post_achievements(req: AchievementsRequest):
    return progress_service.compute_achievements(req)


@router.post("/streaks", response_model=StreakOut)
def post_streaks(req: StreakRequest):
    return progress_service.compute_streaks(req)
