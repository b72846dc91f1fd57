# Configuration and environment variable loading

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file (for local development)
load_dotenv()

logger = logging.getLogger(__name__)


def _env_number(name: str, default: float, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number), using %s", name, raw, default)
        return default


@dataclass
class Settings:
    database_url: Optional[str] = None

    # Scan intervals (seconds)
    vitals_interval_sec: float = 3.0
    alert_interval_sec: float = 10.0
    medication_interval_sec: float = 15.0

    # Medication timing (minutes)
    pre_dose_lead_min: int = 10
    due_window_min: int = 10

    session_ttl_hours: float = 24.0
    refresh_ms: int = 3000
    random_seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "Settings":
        seed = _env_number("ICU_RANDOM_SEED", None, int)
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            vitals_interval_sec=_env_number("ICU_VITALS_INTERVAL_SEC", 3.0),
            alert_interval_sec=_env_number("ICU_ALERT_INTERVAL_SEC", 10.0),
            medication_interval_sec=_env_number("ICU_MEDICATION_INTERVAL_SEC", 15.0),
            pre_dose_lead_min=_env_number("ICU_PRE_DOSE_LEAD_MIN", 10, int),
            due_window_min=_env_number("ICU_DUE_WINDOW_MIN", 10, int),
            session_ttl_hours=_env_number("ICU_SESSION_TTL_HOURS", 24.0),
            refresh_ms=_env_number("ICU_REFRESH_MS", 3000, int),
            random_seed=seed,
        )
