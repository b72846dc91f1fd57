from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from src.icu_monitor.models.app_types import (
    Alert,
    BloodPressure,
    Medication,
    Patient,
    Vitals,
)


def _patient(pid, name, age, bed, status, vitals, meds, admitted, diagnosis) -> Patient:
    hr, spo2, (sys_, dia), temp, rr = vitals
    return Patient(
        id=pid,
        name=name,
        age=age,
        bed_id=bed,
        status=status,
        vitals=Vitals(
            heart_rate=hr,
            spo2=spo2,
            blood_pressure=BloodPressure(systolic=sys_, diastolic=dia),
            temperature=temp,
            respiratory_rate=rr,
        ),
        medications=[Medication(*m) for m in meds],
        admission_date=admitted,
        diagnosis=diagnosis,
    )


def seed_patients() -> List[Patient]:
    """Twelve mock ICU beds. Fresh objects on every call."""
    return [
        _patient(1, "Ahmed Hassan", 58, "ICU-101", "critical",
                 (125, 88, (160, 95), 38.5, 28),
                 [("Norepinephrine", "0.1 mcg/kg/min", "14:30", "active"),
                  ("Propofol", "50 mg/hr", "15:00", "active"),
                  ("Ceftriaxone", "2g IV", "16:00", "pending")],
                 "2025-12-03", "Septic Shock"),
        _patient(2, "Fatima Ali", 42, "ICU-102", "stable",
                 (78, 98, (120, 75), 36.8, 16),
                 [("Aspirin", "100mg", "18:00", "scheduled"),
                  ("Atorvastatin", "40mg", "20:00", "scheduled")],
                 "2025-12-01", "Post-MI Monitoring"),
        _patient(3, "Mohamed Saeed", 65, "ICU-103", "warning",
                 (105, 92, (145, 88), 37.8, 22),
                 [("Furosemide", "40mg IV", "14:45", "due"),
                  ("Metoprolol", "25mg", "16:00", "scheduled")],
                 "2025-12-02", "Acute Heart Failure"),
        _patient(4, "Sara Ibrahim", 35, "ICU-104", "stable",
                 (72, 99, (115, 70), 36.5, 14),
                 [("Insulin", "4 units/hr", "Continuous", "active"),
                  ("Vancomycin", "1g IV", "20:00", "scheduled")],
                 "2025-11-30", "DKA - Recovering"),
        _patient(5, "Khaled Mahmoud", 71, "ICU-105", "stable",
                 (68, 96, (128, 78), 36.9, 15),
                 [("Heparin", "1000 units/hr", "Continuous", "active"),
                  ("Pantoprazole", "40mg IV", "08:00", "scheduled")],
                 "2025-12-04", "Post-Operative Monitoring"),
        _patient(6, "Layla Hassan", 29, "ICU-106", "warning",
                 (110, 94, (135, 85), 37.5, 20),
                 [("Magnesium Sulfate", "2g IV", "15:30", "due"),
                  ("Labetalol", "20mg IV", "16:00", "scheduled")],
                 "2025-12-04", "Severe Preeclampsia"),
        _patient(7, "Omar Youssef", 55, "ICU-107", "stable",
                 (75, 97, (122, 76), 36.7, 16),
                 [("Piperacillin", "4.5g IV", "18:00", "scheduled"),
                  ("Acetaminophen", "650mg", "17:00", "scheduled")],
                 "2025-12-03", "Pneumonia"),
        _patient(8, "Nour Ahmed", 48, "ICU-108", "stable",
                 (80, 98, (118, 72), 36.6, 15),
                 [("Enoxaparin", "40mg SC", "08:00", "scheduled"),
                  ("Ondansetron", "4mg IV", "PRN", "prn")],
                 "2025-12-02", "Post-Stroke Monitoring"),
        _patient(9, "Youssef Kamal", 62, "ICU-109", "warning",
                 (98, 91, (150, 92), 38.2, 24),
                 [("Meropenem", "1g IV", "14:20", "overdue"),
                  ("Hydrocortisone", "100mg IV", "16:00", "scheduled")],
                 "2025-12-04", "COPD Exacerbation"),
        _patient(10, "Mona Salah", 39, "ICU-110", "stable",
                 (70, 99, (110, 68), 36.4, 14),
                 [("Fentanyl", "50 mcg/hr", "Continuous", "active"),
                  ("Midazolam", "2 mg/hr", "Continuous", "active")],
                 "2025-12-01", "Post-Surgical - Sedated"),
        _patient(11, "Hassan Farid", 77, "ICU-111", "stable",
                 (65, 95, (125, 75), 36.8, 16),
                 [("Digoxin", "0.125mg", "08:00", "scheduled"),
                  ("Warfarin", "5mg", "18:00", "scheduled")],
                 "2025-11-29", "Atrial Fibrillation"),
        _patient(12, "Amira Nabil", 52, "ICU-112", "stable",
                 (76, 97, (120, 74), 36.9, 15),
                 [("Levothyroxine", "100mcg", "08:00", "scheduled"),
                  ("Metformin", "500mg", "12:00", "scheduled")],
                 "2025-12-03", "Diabetic Monitoring"),
    ]


def seed_alerts(now: Optional[datetime] = None) -> List[Alert]:
    """Alerts already open when the dashboard starts, newest first."""
    now = now or datetime.now()
    return [
        Alert(3, "warning", 3, "Mohamed Saeed", "ICU-103", "Medication Due Soon",
              "Furosemide 40mg IV due in 5 minutes.", now, medication="Furosemide"),
        Alert(4, "warning", 6, "Layla Hassan", "ICU-106", "Medication Due Soon",
              "Magnesium Sulfate 2g IV due in 3 minutes.", now, medication="Magnesium Sulfate"),
        Alert(1, "critical", 1, "Ahmed Hassan", "ICU-101", "Critical Vitals Alert",
              "SpO2 dropped to 88%. Immediate attention required.", now - timedelta(minutes=2)),
        Alert(2, "warning", 9, "Youssef Kamal", "ICU-109", "Medication Overdue",
              "Meropenem dose is 10 minutes overdue.", now - timedelta(minutes=10),
              medication="Meropenem"),
    ]
