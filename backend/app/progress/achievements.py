"""
Progress - achievements.

A fixed catalog of achievement definitions evaluated against a couple's raw
records. Evaluation is a pure function: the caller owns the previous unlock
state and passes it back in on every refresh.

State machine per achievement: locked -> unlocked, one-way. An achievement
unlocks when the *minimum* of its requirement ratios reaches 100 (all
requirements must be met; ratios are never averaged). Once unlocked it stays
unlocked and keeps its original `unlocked_at`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Tuple, Union

from backend.app.domain.contracts import coerce_timestamp
from backend.app.progress.records import (
    ContributionLike,
    GoalLike,
    PartnershipLike,
    as_contributions,
    as_goals,
    as_partnerships,
    coerce_amount,
    months_between,
    resolve_now,
    sum_amounts,
)
from backend.app.progress.streaks import compute_contribution_streak

RequirementType = Literal[
    "contribution_count",
    "contribution_amount",
    "goal_completion",
    "streak_length",
    "partnership_duration",
    "safety_pot_amount",
]
Category = Literal["contribution", "goal", "streak", "milestone", "partnership"]
Rarity = Literal["common", "rare", "epic", "legendary"]

POINTS_PER_LEVEL = 100
RECENT_UNLOCKS_LIMIT = 5


@dataclass(frozen=True)
class Requirement:
    type: RequirementType
    value: float
    description: str


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    category: Category
    icon: str
    points: int
    rarity: Rarity
    requirements: Tuple[Requirement, ...]


@dataclass(frozen=True)
class RequirementProgress:
    type: RequirementType
    value: float
    current: float
    description: str


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    category: Category
    icon: str
    points: int
    rarity: Rarity
    requirements: List[RequirementProgress]
    progress: float
    unlocked: bool
    unlocked_at: Optional[str] = None


@dataclass(frozen=True)
class CategoryProgress:
    total: int
    unlocked: int
    progress: float


@dataclass(frozen=True)
class AchievementSummary:
    total_achievements: int
    unlocked_achievements: int
    total_points: int
    progress_percentage: float
    next_achievement: Optional[Achievement]
    recent_unlocks: List[Achievement]
    categories: Dict[str, CategoryProgress]
    level: int
    level_progress: float
    points_for_next_level: int


def _single(req_type: RequirementType, value: float, description: str) -> Tuple[Requirement, ...]:
    return (Requirement(type=req_type, value=value, description=description),)


ACHIEVEMENTS: Tuple[AchievementDefinition, ...] = (
    # contribution
    AchievementDefinition(
        "first-contribution", "First Steps", "Make your first contribution to a shared goal",
        "contribution", "🌱", 10, "common",
        _single("contribution_count", 1, "Make 1 contribution"),
    ),
    AchievementDefinition(
        "consistent-saver", "Consistent Saver", "Contribute for 3 consecutive months",
        "contribution", "📅", 25, "common",
        _single("streak_length", 3, "3 month streak"),
    ),
    AchievementDefinition(
        "dedicated-partner", "Dedicated Partner", "Contribute for 6 consecutive months",
        "contribution", "💪", 50, "rare",
        _single("streak_length", 6, "6 month streak"),
    ),
    AchievementDefinition(
        "savings-master", "Savings Master", "Contribute for 12 consecutive months",
        "contribution", "👑", 100, "epic",
        _single("streak_length", 12, "12 month streak"),
    ),
    AchievementDefinition(
        "big-contributor", "Big Contributor", "Contribute a total of £1,000 across all goals",
        "contribution", "💰", 75, "rare",
        _single("contribution_amount", 1000, "Total contributions: £1,000"),
    ),
    AchievementDefinition(
        "mega-contributor", "Mega Contributor", "Contribute a total of £5,000 across all goals",
        "contribution", "💎", 150, "epic",
        _single("contribution_amount", 5000, "Total contributions: £5,000"),
    ),
    # goal
    AchievementDefinition(
        "first-goal", "Goal Setter", "Create your first savings goal",
        "goal", "🎯", 15, "common",
        _single("goal_completion", 1, "Create 1 goal"),
    ),
    AchievementDefinition(
        "goal-achiever", "Goal Achiever", "Complete your first savings goal",
        "goal", "🏆", 50, "rare",
        _single("goal_completion", 1, "Complete 1 goal"),
    ),
    AchievementDefinition(
        "goal-master", "Goal Master", "Complete 5 savings goals",
        "goal", "🌟", 200, "legendary",
        _single("goal_completion", 5, "Complete 5 goals"),
    ),
    # streak
    AchievementDefinition(
        "streak-starter", "Streak Starter", "Maintain a 2-month contribution streak",
        "streak", "🔥", 20, "common",
        _single("streak_length", 2, "2 month streak"),
    ),
    AchievementDefinition(
        "streak-champion", "Streak Champion", "Maintain a 6-month contribution streak",
        "streak", "🔥🔥", 75, "rare",
        _single("streak_length", 6, "6 month streak"),
    ),
    AchievementDefinition(
        "streak-legend", "Streak Legend", "Maintain a 12-month contribution streak",
        "streak", "🔥🔥🔥", 200, "legendary",
        _single("streak_length", 12, "12 month streak"),
    ),
    # partnership
    AchievementDefinition(
        "partnership-formed", "Partnership Formed", "Form your first financial partnership",
        "partnership", "🤝", 25, "common",
        _single("partnership_duration", 1, "Form 1 partnership"),
    ),
    AchievementDefinition(
        "long-term-partners", "Long-term Partners", "Maintain a partnership for 6 months",
        "partnership", "💑", 100, "epic",
        _single("partnership_duration", 6, "6 month partnership"),
    ),
    # safety pot
    AchievementDefinition(
        "safety-first", "Safety First", "Build a safety pot of £500",
        "milestone", "🛡️", 30, "common",
        _single("safety_pot_amount", 500, "Safety pot: £500"),
    ),
    AchievementDefinition(
        "safety-expert", "Safety Expert", "Build a safety pot of £2,000",
        "milestone", "🛡️🛡️", 100, "epic",
        _single("safety_pot_amount", 2000, "Safety pot: £2,000"),
    ),
)


# ----------------------------
# Counters
# ----------------------------

def partnership_duration_months(
    partnerships: Optional[Iterable[PartnershipLike]],
    now: Optional[Union[datetime, date, str]] = None,
) -> int:
    records = as_partnerships(partnerships)
    if not records or records[0].created_at is None:
        return 0
    return max(0, months_between(records[0].created_at, resolve_now(now)))


def compute_counters(
    contributions: Optional[Iterable[ContributionLike]],
    goals: Optional[Iterable[GoalLike]],
    partnerships: Optional[Iterable[PartnershipLike]],
    safety_pot_amount: float,
    now: Optional[Union[datetime, date, str]] = None,
) -> Dict[str, float]:
    contribs = as_contributions(contributions)
    goal_records = as_goals(goals)
    streak = compute_contribution_streak(contribs, now=now)
    return {
        "contribution_count": float(len(contribs)),
        "contribution_amount": sum_amounts(contribs),
        "goal_completion": float(sum(1 for g in goal_records if g.current_amount >= g.target_amount)),
        "streak_length": float(streak.current_streak),
        "partnership_duration": float(partnership_duration_months(partnerships, now)),
        "safety_pot_amount": coerce_amount(safety_pot_amount),
    }


def requirement_ratio(req: RequirementProgress) -> float:
    if req.value == 0:
        return 100.0
    return max(0.0, min((req.current / req.value) * 100, 100.0))


def requirements_progress(requirements: Iterable[RequirementProgress]) -> float:
    ratios = [requirement_ratio(r) for r in requirements]
    # AND semantics: the weakest requirement caps the achievement
    return min(ratios) if ratios else 0.0


# ----------------------------
# Evaluation
# ----------------------------

def _previous_index(previous: Optional[Iterable[Any]]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for item in previous or []:
        if isinstance(item, Mapping):
            data = dict(item)
        elif hasattr(item, "model_dump"):
            data = item.model_dump()
        else:
            data = {k: getattr(item, k, None) for k in ("id", "unlocked", "unlocked_at", "progress")}
        key = data.get("id") or data.get("achievement_id")
        if key:
            out[str(key)] = data
    return out


def _iso(value: Any) -> Optional[str]:
    ts = coerce_timestamp(value)
    return ts.isoformat() if ts else None


def evaluate_achievements(
    contributions: Optional[Iterable[ContributionLike]],
    goals: Optional[Iterable[GoalLike]],
    partnerships: Optional[Iterable[PartnershipLike]],
    safety_pot_amount: float = 0.0,
    previous: Optional[Iterable[Any]] = None,
    now: Optional[Union[datetime, date, str]] = None,
    catalog: Tuple[AchievementDefinition, ...] = ACHIEVEMENTS,
) -> List[Achievement]:
    """
    Evaluate the catalog against raw records.

    `previous` is the caller's last known state (Achievement objects, API
    models or dicts with id/unlocked/unlocked_at). Previously unlocked entries
    stay unlocked at 100% progress with their original timestamp; fresh
    unlocks are stamped with `now`.
    """
    at = resolve_now(now)
    counters = compute_counters(contributions, goals, partnerships, safety_pot_amount, now=at)
    prior = _previous_index(previous)

    out: List[Achievement] = []
    for definition in catalog:
        reqs = [
            RequirementProgress(
                type=r.type,
                value=r.value,
                current=counters.get(r.type, 0.0),
                description=r.description,
            )
            for r in definition.requirements
        ]
        progress = requirements_progress(reqs)
        before = prior.get(definition.id) or {}
        was_unlocked = bool(before.get("unlocked"))

        if was_unlocked:
            progress = 100.0
            unlocked_at = _iso(before.get("unlocked_at")) or at.isoformat()
        elif progress >= 100:
            unlocked_at = at.isoformat()
        else:
            unlocked_at = None

        out.append(
            Achievement(
                id=definition.id,
                name=definition.name,
                description=definition.description,
                category=definition.category,
                icon=definition.icon,
                points=definition.points,
                rarity=definition.rarity,
                requirements=reqs,
                progress=progress,
                unlocked=progress >= 100,
                unlocked_at=unlocked_at,
            )
        )
    return out


def newly_unlocked(previous: Optional[Iterable[Any]], current: Iterable[Achievement]) -> List[Achievement]:
    prior = _previous_index(previous)
    return [a for a in current if a.unlocked and not (prior.get(a.id) or {}).get("unlocked")]


# ----------------------------
# Levels / summary
# ----------------------------

def level_from_points(points: int) -> int:
    return max(0, int(points)) // POINTS_PER_LEVEL + 1


def points_for_next_level(level: int) -> int:
    return level * POINTS_PER_LEVEL


def level_progress(points: int) -> float:
    level = level_from_points(points)
    floor = (level - 1) * POINTS_PER_LEVEL
    return ((max(0, int(points)) - floor) / POINTS_PER_LEVEL) * 100


def summarize_achievements(achievements: Iterable[Achievement]) -> AchievementSummary:
    items = list(achievements)
    unlocked = [a for a in items if a.unlocked]
    total_points = sum(a.points for a in unlocked)

    counts: Dict[str, List[int]] = {}
    for a in items:
        bucket = counts.setdefault(a.category, [0, 0])
        bucket[0] += 1
        if a.unlocked:
            bucket[1] += 1
    categories = {
        name: CategoryProgress(total=t, unlocked=u, progress=(u / t) * 100 if t else 0.0)
        for name, (t, u) in counts.items()
    }

    # sorted() is stable: equal progress keeps catalog order
    locked = sorted((a for a in items if not a.unlocked), key=lambda a: a.progress, reverse=True)
    recent = sorted(
        (a for a in unlocked if a.unlocked_at),
        key=lambda a: coerce_timestamp(a.unlocked_at),
        reverse=True,
    )[:RECENT_UNLOCKS_LIMIT]

    level = level_from_points(total_points)
    return AchievementSummary(
        total_achievements=len(items),
        unlocked_achievements=len(unlocked),
        total_points=total_points,
        progress_percentage=(len(unlocked) / len(items)) * 100 if items else 0.0,
        next_achievement=locked[0] if locked else None,
        recent_unlocks=recent,
        categories=categories,
        level=level,
        level_progress=level_progress(total_points),
        points_for_next_level=points_for_next_level(level),
    )
