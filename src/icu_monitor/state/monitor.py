"""IcuMonitor wires repositories, simulator, evaluator, roster and session.

Presentation code talks to this object only: it reads patients/alerts/reminders
and sends back user actions (acknowledge, assign caregiver, patient and
caregiver edits, medications, imaging).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from src.icu_monitor.alerts.alerts import AlertEvaluator
from src.icu_monitor.auth.session import SESSION_KEY, SessionProvider
from src.icu_monitor.config.settings import Settings
from src.icu_monitor.models.app_types import (
    Alert,
    Caregiver,
    ImagingRecord,
    Medication,
    Patient,
    Reminder,
    Role,
)
from src.icu_monitor.scoring.status import count_by_status
from src.icu_monitor.sim.engine import VitalsSimulator
from src.icu_monitor.sim.scheduler import Scheduler
from src.icu_monitor.staff.roster import CaregiverRoster, medication_schedule
from src.icu_monitor.state.repository import AlertStore, PatientRepository
from src.icu_monitor.state.seed import seed_alerts, seed_patients
from src.icu_monitor.storage.kv import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

MAX_REMINDERS = 20

# A pre-dose countdown reads exactly the lead time for one wall-clock minute.
COUNTDOWN_WINDOW_SEC = 60.0


class IcuMonitor:
    def __init__(
        self,
        patients: PatientRepository,
        alerts: AlertStore,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        simulator: Optional[VitalsSimulator] = None,
        now: Callable[[], datetime] = datetime.now,
        session_key: str = SESSION_KEY,
    ) -> None:
        self.settings = settings or Settings()
        self.patients = patients
        self.alerts = alerts
        self.store = store
        self.now = now
        self.simulator = simulator or VitalsSimulator(seed=self.settings.random_seed)
        self.evaluator = AlertEvaluator(
            alerts,
            pre_dose_lead_min=self.settings.pre_dose_lead_min,
            due_window_min=self.settings.due_window_min,
        )
        self.roster = CaregiverRoster(store)
        self.sessions = SessionProvider(
            store, ttl_hours=self.settings.session_ttl_hours, now=now, key=session_key,
        )
        self.reminders: List[Reminder] = []

    # --- periodic work ---------------------------------------------------

    def tick_vitals(self) -> None:
        self.simulator.tick(self.patients.all())

    def scan_alerts(self) -> List[Alert]:
        return self.evaluator.scan(self.patients.all(), self.now())

    def current_role(self) -> Optional[Role]:
        session = self.sessions.current()
        return session.role if session else None

    def scan_medications(self) -> List[Reminder]:
        fired = self.evaluator.pre_dose_reminders(self.patients.all(), self.current_role(), self.now())
        if fired:
            self.reminders = (fired + self.reminders)[:MAX_REMINDERS]
        return fired

    def install_jobs(self, scheduler: Scheduler) -> Scheduler:
        s = self.settings
        if s.medication_interval_sec >= COUNTDOWN_WINDOW_SEC / 2:
            logger.warning(
                "Medication scan every %ss may miss pre-dose reminders; use well under %ss",
                s.medication_interval_sec, COUNTDOWN_WINDOW_SEC / 2,
            )
        scheduler.every(s.vitals_interval_sec, self.tick_vitals, name="vitals")
        scheduler.every(s.alert_interval_sec, self.scan_alerts, name="alerts")
        scheduler.every(s.medication_interval_sec, self.scan_medications,
                        name="medications", run_immediately=True)
        return scheduler

    # --- user actions ----------------------------------------------------

    def acknowledge(self, alert_id: int) -> bool:
        return self.alerts.acknowledge(alert_id)

    def dismiss_reminder(self, index: int) -> bool:
        if not 0 <= index < len(self.reminders):
            return False
        del self.reminders[index]
        return True

    def assign_caregiver(self, patient_id: int, caregiver_name: Optional[str]) -> Optional[Patient]:
        return self.patients.assign_caregiver(patient_id, caregiver_name)

    def add_patient(self, name: str, age: int, bed_id: str, diagnosis: str = "",
                    status: Optional[str] = None) -> Patient:
        return self.patients.add(name, age, bed_id, diagnosis=diagnosis, status=status)

    def update_patient(self, patient_id: int, **fields) -> Optional[Patient]:
        return self.patients.update(patient_id, **fields)

    def add_medication(self, patient_id: int, name: str, dose: str, next_dose: str,
                       status: str = "scheduled") -> Optional[Patient]:
        med = Medication(name=(name or "").strip(), dose=(dose or "").strip(),
                         next_dose=(next_dose or "").strip(), status=status)
        return self.patients.add_medication(patient_id, med)

    def add_imaging(self, patient_id: int, type: str, date: str, findings: str = "") -> Optional[Patient]:
        record = ImagingRecord(type=(type or "").strip(), date=(date or "").strip(), findings=findings)
        return self.patients.add_imaging(patient_id, record)

    def remove_imaging(self, patient_id: int, index: int) -> bool:
        return self.patients.remove_imaging(patient_id, index)

    def update_caregiver(self, caregiver_id: int, **fields) -> Optional[Caregiver]:
        """Edits the roster entry. A rename carries over to the patients assigned under the old name."""
        old = self.roster.get(caregiver_id)
        updated = self.roster.update(caregiver_id, **fields)
        if old is not None and updated is not None and updated.name != old.name:
            for p in self.patients.assigned_to(old.name):
                self.patients.assign_caregiver(p.id, updated.name)
        return updated

    def delete_patient(self, patient_id: int) -> bool:
        if not self.patients.delete(patient_id):
            return False
        dropped = self.alerts.remove_for_patient(patient_id)
        if dropped:
            logger.info("Dropped %d open alert(s) for removed patient %s", dropped, patient_id)
        return True

    # --- queries ---------------------------------------------------------

    def stats(self) -> Dict[str, int]:
        return count_by_status(self.patients.all())

    def nurse_patients(self, username: str) -> List[Patient]:
        nurse = self.roster.for_username(username)
        name = nurse.name if nurse else "Nurse"
        return self.patients.assigned_to(name)

    def nurse_schedule(self, username: str) -> List[dict]:
        return medication_schedule(
            self.nurse_patients(username),
            self.now(),
            lead_min=self.settings.pre_dose_lead_min,
        )


def build_monitor(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    now: Callable[[], datetime] = datetime.now,
    session_key: str = SESSION_KEY,
) -> IcuMonitor:
    """Monitor preloaded with the mock ward."""
    settings = settings or Settings()
    return IcuMonitor(
        patients=PatientRepository(seed_patients()),
        alerts=AlertStore(reversed(seed_alerts(now()))),
        store=store if store is not None else MemoryStore(),
        settings=settings,
        now=now,
        session_key=session_key,
    )
