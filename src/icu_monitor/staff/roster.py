from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from src.icu_monitor.alerts.dosing import get_time_until_dose, is_urgent
from src.icu_monitor.models.app_types import Caregiver, Patient, SHIFTS
from src.icu_monitor.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

ROSTER_KEY = "nursesList"
EMAIL_DOMAIN = "icu.com"

DEFAULT_ROSTER = [
    Caregiver(id=1, name="Sarah Ahmed", email="nurse@icu.com",
              phone="+20 123 456 7890", shift="Morning", status="active"),
]


def _from_dict(d: Dict[str, Any]) -> Optional[Caregiver]:
    try:
        return Caregiver(
            id=int(d["id"]),
            name=str(d["name"]),
            email=str(d.get("email", "")),
            phone=str(d.get("phone", "")),
            shift=str(d.get("shift", "Morning")),
            status=str(d.get("status", "active")),
        )
    except (KeyError, TypeError, ValueError):
        return None


class CaregiverRoster:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _load(self) -> List[Caregiver]:
        raw = self.store.get_json(ROSTER_KEY, [])
        if not isinstance(raw, list):
            return []
        loaded = [_from_dict(d) for d in raw if isinstance(d, dict)]
        return [c for c in loaded if c is not None]

    def _save(self, caregivers: Iterable[Caregiver]) -> None:
        self.store.set_json(ROSTER_KEY, [asdict(c) for c in caregivers])

    def all(self) -> List[Caregiver]:
        caregivers = self._load()
        if not caregivers:
            caregivers = [Caregiver(**asdict(c)) for c in DEFAULT_ROSTER]
            self._save(caregivers)
        return caregivers

    def get(self, caregiver_id: int) -> Optional[Caregiver]:
        for c in self.all():
            if c.id == caregiver_id:
                return c
        return None

    def find_by_email(self, email: str) -> Optional[Caregiver]:
        for c in self.all():
            if c.email.lower() == (email or "").lower():
                return c
        return None

    def for_username(self, username: str) -> Optional[Caregiver]:
        return self.find_by_email(f"{username}@{EMAIL_DOMAIN}")

    def add(self, name: str, email: str, phone: str = "", shift: str = "Morning") -> Caregiver:
        _validate(name, email, shift)
        caregivers = self.all()
        new = Caregiver(
            id=max((c.id for c in caregivers), default=0) + 1,
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
            shift=shift,
            status="active",
        )
        caregivers.append(new)
        self._save(caregivers)
        logger.info("Added caregiver %s (%s)", new.name, new.shift)
        return new

    def update(self, caregiver_id: int, **fields: Any) -> Optional[Caregiver]:
        caregivers = self.all()
        for c in caregivers:
            if c.id != caregiver_id:
                continue
            name = fields.get("name", c.name)
            email = fields.get("email", c.email)
            shift = fields.get("shift", c.shift)
            _validate(name, email, shift)
            c.name, c.email, c.shift = name.strip(), email.strip(), shift
            if "phone" in fields:
                c.phone = str(fields["phone"]).strip()
            if "status" in fields:
                c.status = str(fields["status"])
            self._save(caregivers)
            return c
        return None

    def delete(self, caregiver_id: int) -> bool:
        caregivers = self.all()
        kept = [c for c in caregivers if c.id != caregiver_id]
        if len(kept) == len(caregivers):
            return False
        self._save(kept)
        logger.info("Deleted caregiver %s", caregiver_id)
        return True


def _validate(name: str, email: str, shift: str) -> None:
    if not name or not name.strip():
        raise ValueError("caregiver name is required")
    if not email or "@" not in email:
        raise ValueError(f"invalid email: {email!r}")
    if shift not in SHIFTS:
        raise ValueError(f"unknown shift: {shift!r}")


def medication_schedule(
    patients: Iterable[Patient],
    now: Optional[datetime] = None,
    lead_min: int = 10,
) -> List[Dict[str, Any]]:
    """Flattened medication list for the nurse view, ordered by next-dose text."""
    now = now or datetime.now()
    rows = []
    for p in patients:
        for med in p.medications:
            minutes = get_time_until_dose(med.next_dose, now)
            rows.append({
                "patient_id": p.id,
                "patient_name": p.name,
                "bed_id": p.bed_id,
                "medication": med.name,
                "dose": med.dose,
                "next_dose": med.next_dose,
                "status": med.status,
                "minutes_until": minutes,
                "urgent": is_urgent(minutes, lead_min),
            })
    rows.sort(key=lambda r: r["next_dose"])
    return rows
