from __future__ import annotations

from typing import Dict

from src.icu_monitor.models.app_types import Ranges


# Only these three vitals drive the status tier.
DEFAULT_RANGES: Dict[str, Ranges] = {
    "spo2": Ranges(94, None, 90, None),
    "heart_rate": Ranges(60, 100, 50, 120),
    "systolic": Ranges(100, 140, 90, 180),
}

# Full width of the uniform perturbation applied per tick: old + (u - 0.5) * range
PERTURBATION: Dict[str, float] = {
    "heart_rate": 5,
    "spo2": 2,
    "systolic": 5,
    "diastolic": 3,
    "temperature": 0.2,
}

SPO2_MAX: int = 100

# SpO2 below this while critical raises a critical-vitals alert
SPO2_ALERT_BELOW: int = 90
