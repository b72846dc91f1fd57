import pytest

import src.icu_monitor.ui.charts as m
import src.icu_monitor.ui.helpers as helpers
from src.icu_monitor.scoring.status import count_by_status
from src.icu_monitor.state.seed import seed_patients


def test_vitals_frame():
    patients = seed_patients()
    patients[0].assigned_caregiver = "Sarah Ahmed"
    df = m.vitals_frame(patients)

    assert list(df.columns) == ["Bed", "Patient", "Status", "HR", "SpO2", "BP", "Temp", "RR", "Nurse"]
    assert len(df) == 12
    first = df.iloc[0]
    assert (first["Bed"], first["SpO2"], first["BP"], first["Nurse"]) == ("ICU-101", 88, "160/95", "Sarah Ahmed")
    assert df.iloc[1]["Nurse"] == ""


def test_vitals_frame_empty_keeps_columns():
    df = m.vitals_frame([])
    assert df.empty
    assert "SpO2" in df.columns


def test_status_frame_order():
    df = m.status_frame(count_by_status(seed_patients()))
    assert list(df["Status"]) == ["stable", "warning", "critical"]
    assert list(df["Patients"]) == [8, 3, 1]


def test_schedule_frame():
    assert m.schedule_frame([]).empty
    rows = [{
        "patient_id": 1, "patient_name": "Ahmed Hassan", "bed_id": "ICU-101",
        "medication": "Propofol", "dose": "50 mg/hr", "next_dose": "15:00",
        "status": "active", "minutes_until": 40, "urgent": False,
    }]
    df = m.schedule_frame(rows)
    assert list(df.columns) == ["Next", "Medication", "Dose", "Patient", "Bed", "Status", "Due soon"]


@pytest.mark.parametrize("name, expected", [
    ("Ahmed Hassan", "AH"), ("Sara", "S"), ("Mona Al Salah", "MS"), ("", "?"),
])
def test_initials(name, expected):
    assert helpers.initials(name) == expected


@pytest.mark.parametrize("seconds, expected", [
    (30, "Just now"), (120, "2 min ago"), (7200, "2 h ago"),
])
def test_time_ago(seconds, expected):
    assert helpers.time_ago(seconds) == expected
