from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from backend.app.api.config import default_currency, lookback_months

router = APIRouter(prefix="/api", tags=["config"])


class ConfigOut(BaseModel):
    lookback_months: int
    default_currency: str


@router.get("/config", response_model=ConfigOut)
def get_config() -> ConfigOut:
    return ConfigOut(
        lookback_months=lookback_months(),
        default_currency=default_currency(),
    )
