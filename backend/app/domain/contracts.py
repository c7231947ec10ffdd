from __future__ import annotations

from datetime import date, datetime, timezone
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def coerce_amount(value: Any) -> float:
    try:
        result = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    # "nan" / "inf" parse as floats but are not amounts
    return result if math.isfinite(result) else 0.0


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO string / date / datetime into an aware UTC datetime.
    Naive values are assumed to already be UTC. Unparseable -> None.
    """
    if value in (None, ""):
        return None
    if isinstance(value, str):
        try:
            # handles "...Z" too
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ExpenseRecord(_Record):
    id: Optional[str] = None
    name: Optional[str] = None
    amount: float = 0.0
    frequency: str = "monthly"
    status: str = "active"

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> Optional[str]:
        return _optional_str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency(cls, value: Any) -> str:
        return str(value or "monthly").strip().lower()

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str:
        return str(value or "active").strip().lower()


class ContributionRecord(_Record):
    id: Optional[str] = None
    user_id: Optional[str] = None
    goal_id: Optional[str] = None
    amount: float = 0.0
    created_at: Optional[datetime] = None

    @field_validator("id", "user_id", "goal_id", mode="before")
    @classmethod
    def _ids(cls, value: Any) -> Optional[str]:
        return _optional_str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)


class GoalRecord(_Record):
    id: Optional[str] = None
    name: Optional[str] = None
    target_amount: float = 0.0
    current_amount: float = 0.0
    monthly_target: float = 0.0
    target_date: Optional[date] = None
    status: str = "active"

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> Optional[str]:
        return _optional_str(value)

    @field_validator("target_amount", "current_amount", "monthly_target", mode="before")
    @classmethod
    def _amounts(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("target_date", mode="before")
    @classmethod
    def _target_date(cls, value: Any) -> Optional[date]:
        ts = coerce_timestamp(value)
        return ts.date() if ts else None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str:
        return str(value or "active").strip().lower()


class PartnershipRecord(_Record):
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    status: str = "active"

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> Optional[str]:
        return _optional_str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)


class ProfileRecord(_Record):
    id: str
    name: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> str:
        return str(value)


# ----------------------------
# API payloads
# ----------------------------

class _RecordsRequest(BaseModel):
    contributions: List[ContributionRecord] = []
    goals: List[GoalRecord] = []
    expenses: List[ExpenseRecord] = []
    safety_pot_amount: float = 0.0
    as_of: Optional[datetime] = None

    @field_validator("safety_pot_amount", mode="before")
    @classmethod
    def _pot(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("as_of", mode="before")
    @classmethod
    def _as_of(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)


class MonthlyProgressRequest(_RecordsRequest):
    month: str
    user: ProfileRecord
    partner: ProfileRecord


class ProgressReportRequest(_RecordsRequest):
    user: ProfileRecord
    partner: ProfileRecord
    months: Optional[int] = None
    currency: Optional[str] = None


class AchievementStateIn(BaseModel):
    id: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None
    progress: float = 0.0

    @field_validator("unlocked_at", mode="before")
    @classmethod
    def _unlocked_at(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)


class AchievementsRequest(BaseModel):
    contributions: List[ContributionRecord] = []
    goals: List[GoalRecord] = []
    partnerships: List[PartnershipRecord] = []
    safety_pot_amount: float = 0.0
    previous: List[AchievementStateIn] = []
    as_of: Optional[datetime] = None

    @field_validator("safety_pot_amount", mode="before")
    @classmethod
    def _pot(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("as_of", mode="before")
    @classmethod
    def _as_of(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)


class StreakRequest(BaseModel):
    contributions: List[ContributionRecord] = []
    as_of: Optional[datetime] = None

    @field_validator("as_of", mode="before")
    @classmethod
    def _as_of(cls, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)
