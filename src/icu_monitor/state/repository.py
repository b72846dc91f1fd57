"""In-memory owners of the patient list and the open-alert list.

Both stores are single-writer: every mutation is expected to come from the
same logical thread (the Streamlit rerun or the scheduler loop).
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from src.icu_monitor.models.app_types import (
    Alert,
    BloodPressure,
    ImagingRecord,
    Medication,
    Patient,
    Vitals,
    MED_STATUSES,
    STATUSES,
)
from src.icu_monitor.scoring.status import classify

logger = logging.getLogger(__name__)


def default_vitals() -> Vitals:
    return Vitals(
        heart_rate=75,
        spo2=98,
        blood_pressure=BloodPressure(systolic=120, diastolic=80),
        temperature=36.8,
        respiratory_rate=16,
    )


class PatientRepository:
    def __init__(self, patients: Iterable[Patient] = ()) -> None:
        self._patients: Dict[int, Patient] = {}
        for p in patients:
            self._patients[p.id] = p
        self._next_id = max(self._patients, default=0) + 1

    def __len__(self) -> int:
        return len(self._patients)

    def all(self) -> List[Patient]:
        return list(self._patients.values())

    def get(self, patient_id: int) -> Optional[Patient]:
        return self._patients.get(patient_id)

    def by_status(self, status: str) -> List[Patient]:
        return [p for p in self._patients.values() if p.status == status]

    def add(
        self,
        name: str,
        age: int,
        bed_id: str,
        diagnosis: str = "",
        status: Optional[str] = None,
        vitals: Optional[Vitals] = None,
        medications: Optional[List[Medication]] = None,
    ) -> Patient:
        """Admit a patient. `status` may only be chosen here; afterwards it follows the vitals."""
        name = (name or "").strip()
        bed_id = (bed_id or "").strip()
        if not name:
            raise ValueError("patient name is required")
        if not bed_id:
            raise ValueError("bed id is required")
        if age is None or int(age) < 0:
            raise ValueError(f"invalid age: {age!r}")
        if status is not None and status not in STATUSES:
            raise ValueError(f"unknown status: {status!r}")

        vitals = vitals or default_vitals()
        patient = Patient(
            id=self._next_id,
            name=name,
            age=int(age),
            bed_id=bed_id,
            vitals=vitals,
            status=status or classify(vitals),
            diagnosis=diagnosis,
            medications=list(medications or []),
            admission_date=date.today().isoformat(),
        )
        self._patients[patient.id] = patient
        self._next_id += 1
        logger.info("Admitted patient %s (%s) to %s", patient.id, patient.name, patient.bed_id)
        return patient

    def update(
        self,
        patient_id: int,
        *,
        name: Optional[str] = None,
        age: Optional[int] = None,
        bed_id: Optional[str] = None,
        diagnosis: Optional[str] = None,
    ) -> Optional[Patient]:
        p = self._patients.get(patient_id)
        if p is None:
            return None
        if name is not None:
            if not name.strip():
                raise ValueError("patient name is required")
            p.name = name.strip()
        if age is not None:
            if int(age) < 0:
                raise ValueError(f"invalid age: {age!r}")
            p.age = int(age)
        if bed_id is not None:
            if not bed_id.strip():
                raise ValueError("bed id is required")
            p.bed_id = bed_id.strip()
        if diagnosis is not None:
            p.diagnosis = diagnosis
        return p

    def delete(self, patient_id: int) -> bool:
        p = self._patients.pop(patient_id, None)
        if p is None:
            return False
        logger.info("Removed patient %s (%s)", patient_id, p.name)
        return True

    def assign_caregiver(self, patient_id: int, caregiver_name: Optional[str]) -> Optional[Patient]:
        p = self._patients.get(patient_id)
        if p is None:
            return None
        p.assigned_caregiver = caregiver_name or None
        logger.info("Assigned %s to patient %s", p.assigned_caregiver, patient_id)
        return p

    def assigned_to(self, caregiver_name: str) -> List[Patient]:
        return [p for p in self._patients.values() if p.assigned_caregiver == caregiver_name]

    def add_medication(self, patient_id: int, med: Medication) -> Optional[Patient]:
        p = self._patients.get(patient_id)
        if p is None:
            return None
        if not (med.name or "").strip():
            raise ValueError("medication name is required")
        if med.status not in MED_STATUSES:
            raise ValueError(f"unknown medication status: {med.status!r}")
        p.medications.append(med)
        logger.info("Added %s %s at %s for patient %s", med.name, med.dose, med.next_dose, patient_id)
        return p

    def add_imaging(self, patient_id: int, record: ImagingRecord) -> Optional[Patient]:
        p = self._patients.get(patient_id)
        if p is None:
            return None
        if not (record.type or "").strip() or not (record.date or "").strip():
            raise ValueError("imaging type and date are required")
        p.imaging.append(record)
        logger.info("Added %s imaging for patient %s", record.type, patient_id)
        return p

    def remove_imaging(self, patient_id: int, index: int) -> bool:
        p = self._patients.get(patient_id)
        if p is None or not 0 <= index < len(p.imaging):
            return False
        del p.imaging[index]
        return True


class AlertStore:
    """
    Open alerts, newest first.
    Append/remove only: at most one open alert per (patient_id, type).
    """

    def __init__(self, alerts: Iterable[Alert] = ()) -> None:
        self._alerts: List[Alert] = []
        self._next_id = 1
        for a in alerts:
            self.raise_alert(a)

    def __len__(self) -> int:
        return len(self._alerts)

    def open(self) -> List[Alert]:
        return list(self._alerts)

    def get(self, alert_id: int) -> Optional[Alert]:
        for a in self._alerts:
            if a.id == alert_id:
                return a
        return None

    def for_patient(self, patient_id: int) -> List[Alert]:
        return [a for a in self._alerts if a.patient_id == patient_id]

    def find(
        self,
        patient_id: int,
        type: Optional[str] = None,
        medication: Optional[str] = None,
    ) -> Optional[Alert]:
        for a in self._alerts:
            if a.patient_id != patient_id:
                continue
            if type is not None and a.type != type:
                continue
            if medication is not None and a.medication != medication:
                continue
            return a
        return None

    def next_id(self) -> int:
        alert_id = self._next_id
        self._next_id += 1
        return alert_id

    def new_alert(
        self,
        type: str,
        patient: Patient,
        title: str,
        message: str,
        medication: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Alert:
        return Alert(
            id=self.next_id(),
            type=type,
            patient_id=patient.id,
            patient_name=patient.name,
            bed_id=patient.bed_id,
            title=title,
            message=message,
            timestamp=now or datetime.now(),
            medication=medication,
        )

    def raise_alert(self, alert: Alert) -> bool:
        if self.find(alert.patient_id, type=alert.type) is not None:
            return False
        if self.get(alert.id) is not None:
            return False
        self._alerts.insert(0, alert)
        if alert.id >= self._next_id:
            self._next_id = alert.id + 1
        logger.info("[%s] %s %s: %s", alert.type, alert.bed_id, alert.title, alert.message)
        return True

    def acknowledge(self, alert_id: int) -> bool:
        for i, a in enumerate(self._alerts):
            if a.id == alert_id:
                del self._alerts[i]
                logger.info("Acknowledged alert %s (%s)", alert_id, a.title)
                return True
        return False

    def remove_for_patient(self, patient_id: int) -> int:
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.patient_id != patient_id]
        return before - len(self._alerts)
