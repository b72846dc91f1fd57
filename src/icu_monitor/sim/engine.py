from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from src.icu_monitor.config.thresholds import PERTURBATION, SPO2_MAX
from src.icu_monitor.models.app_types import BloodPressure, Patient, Vitals
from src.icu_monitor.scoring.status import classify

logger = logging.getLogger(__name__)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def variation(base: float, spread: float, rng) -> int:
    """base + uniform(-spread/2, spread/2), rounded to a whole number."""
    return _round_half_up(base + (rng.random() - 0.5) * spread)


def next_vitals(v: Vitals, rng, perturbation: Dict[str, float] = PERTURBATION) -> Vitals:
    """Next snapshot from the current one. Respiratory rate is carried over unchanged."""
    heart_rate = variation(v.heart_rate, perturbation["heart_rate"], rng)
    spo2 = min(SPO2_MAX, variation(v.spo2, perturbation["spo2"], rng))
    systolic = variation(v.blood_pressure.systolic, perturbation["systolic"], rng)
    diastolic = variation(v.blood_pressure.diastolic, perturbation["diastolic"], rng)
    temperature = round(float(v.temperature) + (rng.random() - 0.5) * perturbation["temperature"], 1)

    return Vitals(
        heart_rate=heart_rate,
        spo2=spo2,
        blood_pressure=BloodPressure(systolic=systolic, diastolic=diastolic),
        temperature=temperature,
        respiratory_rate=v.respiratory_rate,
    )


def apply_vitals(p: Patient, v: Vitals) -> str:
    """Overwrite the patient's vitals and re-derive status in the same step."""
    p.vitals = v
    p.status = classify(v)
    return p.status


class VitalsSimulator:
    def __init__(self, seed: Optional[int] = None, rng=None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed=seed)

    def step(self, p: Patient) -> str:
        return apply_vitals(p, next_vitals(p.vitals, self.rng))

    def tick(self, patients: Iterable[Patient]) -> List[Tuple[int, str, str]]:
        """Advance every patient one tick. Returns (patient_id, old, new) for status changes."""
        changes = []
        for p in patients:
            before = p.status
            after = self.step(p)
            if after != before:
                changes.append((p.id, before, after))
                logger.info("Patient %s (%s) status %s -> %s", p.id, p.bed_id, before, after)
        logger.debug("Vitals tick done, %d status change(s)", len(changes))
        return changes
