# AlertEvaluator decides which alerts and reminders a scan produces.
#
# - critical vitals: status == critical and SpO2 < 90, once per patient while
#   an open "critical" alert exists for that patient
# - medication: due/overdue doses, checked against the scheduled clock time
# - pre-dose reminder: exactly PRE_DOSE_LEAD minutes before a clock-time dose,
#   nurses only, once per dose per day
#
# Nothing here raises on bad data: an unparsable dose time is never due.

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from src.icu_monitor.alerts.dosing import get_time_until_dose
from src.icu_monitor.config.thresholds import SPO2_ALERT_BELOW
from src.icu_monitor.models.app_types import (
    Alert,
    Medication,
    Patient,
    Reminder,
    Role,
    ALERT_CRITICAL,
    ALERT_WARNING,
    STATUS_CRITICAL,
)
from src.icu_monitor.state.repository import AlertStore

logger = logging.getLogger(__name__)

PRE_DOSE_LEAD_MIN = 10
DUE_WINDOW_MIN = 10


def needs_critical_alert(p: Patient) -> bool:
    return p.status == STATUS_CRITICAL and p.vitals.spo2 < SPO2_ALERT_BELOW


def medication_alert_type(med: Medication) -> Optional[str]:
    if med.status == "overdue":
        return ALERT_CRITICAL
    if med.status == "due":
        return ALERT_WARNING
    return None


def medication_is_due(med: Medication, now: datetime, window_min: int = DUE_WINDOW_MIN) -> bool:
    """
    Deterministic due check.
    overdue -> any parseable clock time; due -> within `window_min` or already past.
    """
    if medication_alert_type(med) is None:
        return False
    minutes = get_time_until_dose(med.next_dose, now)
    if minutes is None:
        return False
    if med.status == "overdue":
        return True
    return minutes <= window_min


class AlertEvaluator:
    def __init__(
        self,
        store: AlertStore,
        pre_dose_lead_min: int = PRE_DOSE_LEAD_MIN,
        due_window_min: int = DUE_WINDOW_MIN,
    ) -> None:
        self.store = store
        self.pre_dose_lead_min = pre_dose_lead_min
        self.due_window_min = due_window_min
        self._fired: Set[Tuple[int, str, str, str]] = set()

    def check_vitals(self, p: Patient, now: Optional[datetime] = None) -> Optional[Alert]:
        if not needs_critical_alert(p):
            return None
        if self.store.find(p.id, type=ALERT_CRITICAL) is not None:
            return None

        alert = self.store.new_alert(
            ALERT_CRITICAL,
            p,
            title="Critical Vitals Alert",
            message=f"SpO2 at {p.vitals.spo2}%. Immediate attention required.",
            now=now,
        )
        return alert if self.store.raise_alert(alert) else None

    def check_medications(self, p: Patient, now: Optional[datetime] = None) -> List[Alert]:
        now = now or datetime.now()
        raised = []
        for med in p.medications:
            if not medication_is_due(med, now, self.due_window_min):
                continue
            if self.store.find(p.id, medication=med.name) is not None:
                continue

            alert_type = medication_alert_type(med)
            overdue = med.status == "overdue"
            alert = self.store.new_alert(
                alert_type,
                p,
                title="Medication Overdue" if overdue else "Medication Due Soon",
                message=f"{med.name} {med.dose} is {med.status}.",
                medication=med.name,
                now=now,
            )
            if self.store.raise_alert(alert):
                raised.append(alert)
        return raised

    def scan(self, patients: Iterable[Patient], now: Optional[datetime] = None) -> List[Alert]:
        """One pass of the new-alert scan over every patient."""
        now = now or datetime.now()
        raised = []
        for p in patients:
            alert = self.check_vitals(p, now)
            if alert is not None:
                raised.append(alert)
            raised.extend(self.check_medications(p, now))
        if raised:
            logger.info("Alert scan raised %d alert(s)", len(raised))
        return raised

    def pre_dose_reminders(
        self,
        patients: Iterable[Patient],
        role: Optional[Role],
        now: Optional[datetime] = None,
    ) -> List[Reminder]:
        if role is not Role.NURSE:
            return []

        now = now or datetime.now()
        day = now.date().isoformat()
        self._fired = {k for k in self._fired if k[3] == day}
        reminders = []
        for p in patients:
            for med in p.medications:
                minutes = get_time_until_dose(med.next_dose, now)
                if minutes != self.pre_dose_lead_min:
                    continue

                key = (p.id, med.name, med.next_dose, day)
                if key in self._fired:
                    continue
                self._fired.add(key)

                reminders.append(
                    Reminder(
                        patient_id=p.id,
                        patient_name=p.name,
                        bed_id=p.bed_id,
                        medication=med.name,
                        dose=med.dose,
                        scheduled=med.next_dose,
                        minutes_until=minutes,
                        created=now,
                    )
                )
                logger.info("Pre-dose reminder: %s %s for %s (%s) at %s",
                            med.name, med.dose, p.name, p.bed_id, med.next_dose)
        return reminders
