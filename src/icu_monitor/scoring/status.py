from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from src.icu_monitor.config.thresholds import DEFAULT_RANGES
from src.icu_monitor.models.app_types import (
    Ranges,
    Vitals,
    STATUS_CRITICAL,
    STATUS_WARNING,
    STATUS_STABLE,
)


def _outside(value: float, low: Optional[float], high: Optional[float]) -> bool:
    if low is not None and value < low:
        return True
    if high is not None and value > high:
        return True
    return False


def vital_level(value: float, r: Ranges) -> str:
    if _outside(value, r.critical_low, r.critical_high):
        return STATUS_CRITICAL
    if _outside(value, r.warning_low, r.warning_high):
        return STATUS_WARNING
    return STATUS_STABLE


def vital_levels(v: Vitals, ranges: Dict[str, Ranges] = DEFAULT_RANGES) -> Dict[str, str]:
    return {
        "spo2": vital_level(v.spo2, ranges["spo2"]),
        "heart_rate": vital_level(v.heart_rate, ranges["heart_rate"]),
        "systolic": vital_level(v.blood_pressure.systolic, ranges["systolic"]),
    }


def overall_level(levels: Dict[str, str]) -> str:
    if STATUS_CRITICAL in levels.values():
        return STATUS_CRITICAL
    if STATUS_WARNING in levels.values():
        return STATUS_WARNING
    return STATUS_STABLE


def classify(v: Vitals, ranges: Dict[str, Ranges] = DEFAULT_RANGES) -> str:
    """Status tier for a vitals snapshot. Any critical vital wins over any warning."""
    return overall_level(vital_levels(v, ranges))


def status_rank(status: str) -> int:
    return {STATUS_STABLE: 0, STATUS_WARNING: 1, STATUS_CRITICAL: 2}[status]


def count_by_status(patients: Iterable[Any]) -> Dict[str, int]:
    """Header statistics: total plus one count per status tier."""
    counts = {"total": 0, STATUS_STABLE: 0, STATUS_WARNING: 0, STATUS_CRITICAL: 0}
    for p in patients:
        counts["total"] += 1
        if p.status in counts:
            counts[p.status] += 1
    return counts
