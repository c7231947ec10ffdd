from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_MONTHS = 12
MAX_LOOKBACK_MONTHS = 60
LOCAL_DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def lookback_months() -> int:
    raw = os.getenv("PROGRESS_LOOKBACK_MONTHS")
    if not raw:
        return DEFAULT_LOOKBACK_MONTHS
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid PROGRESS_LOOKBACK_MONTHS=%s", raw)
        return DEFAULT_LOOKBACK_MONTHS
    if not 1 <= value <= MAX_LOOKBACK_MONTHS:
        logger.warning("PROGRESS_LOOKBACK_MONTHS out of range (1-%s): %s", MAX_LOOKBACK_MONTHS, value)
        return DEFAULT_LOOKBACK_MONTHS
    return value


def default_currency() -> str:
    return (os.getenv("PROGRESS_DEFAULT_CURRENCY") or "GBP").strip().upper()


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS")
    if raw is None:
        origins = list(LOCAL_DEV_ORIGINS)
    else:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if not origins:
        raise RuntimeError("CORS_ALLOW_ORIGINS must not be empty.")
    if not any(origin in origins for origin in LOCAL_DEV_ORIGINS):
        logger.warning("CORS allowlist does not include local dev origins: %s", origins)
    return origins
