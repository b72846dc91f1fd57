from datetime import datetime

import pytest

import src.icu_monitor.alerts.alerts as m
from src.icu_monitor.models.app_types import BloodPressure, Medication, Patient, Role, Vitals
from src.icu_monitor.state.repository import AlertStore

NOW = datetime(2025, 12, 4, 14, 20, 0)


def make_patient(pid=1, spo2=98, hr=78, bp_sys=120, status="stable", meds=()):
    return Patient(
        id=pid,
        name=f"Patient {pid}",
        age=60,
        bed_id=f"ICU-{100 + pid}",
        vitals=Vitals(hr, spo2, BloodPressure(bp_sys, 80), 37.0, 16),
        status=status,
        medications=list(meds),
    )


@pytest.fixture
def store():
    return AlertStore()


@pytest.fixture
def evaluator(store):
    return m.AlertEvaluator(store)


def assert_unique_patient_type(store):
    keys = [(a.patient_id, a.type) for a in store.open()]
    assert len(keys) == len(set(keys))


# 1) Critical vitals
def test_critical_low_spo2_raises_once(evaluator, store):
    p = make_patient(spo2=88, status="critical")
    first = evaluator.scan([p], NOW)
    second = evaluator.scan([p], NOW)

    assert len(first) == 1
    assert first[0].type == "critical"
    assert first[0].message == "SpO2 at 88%. Immediate attention required."
    assert second == []
    assert len(store) == 1


def test_critical_status_without_low_spo2_does_not_raise(evaluator, store):
    p = make_patient(spo2=95, hr=130, status="critical")
    assert evaluator.scan([p], NOW) == []


def test_low_spo2_but_not_critical_status_does_not_raise(evaluator):
    # status is whatever the last classification said
    p = make_patient(spo2=88, status="warning")
    assert evaluator.scan([p], NOW) == []


def test_acknowledged_critical_alert_can_be_raised_again(evaluator, store):
    p = make_patient(spo2=87, status="critical")
    alert = evaluator.scan([p], NOW)[0]
    assert store.acknowledge(alert.id)
    again = evaluator.scan([p], NOW)
    assert len(again) == 1
    assert again[0].id != alert.id


def test_critical_alerts_are_per_patient(evaluator, store):
    ps = [make_patient(pid=i, spo2=85, status="critical") for i in (1, 2, 3)]
    raised = evaluator.scan(ps, NOW)
    assert sorted(a.patient_id for a in raised) == [1, 2, 3]
    assert_unique_patient_type(store)


# 2) Medication alerts
def test_overdue_medication_raises_critical(evaluator):
    p = make_patient(meds=[Medication("Meropenem", "1g IV", "14:10", "overdue")])
    raised = evaluator.scan([p], NOW)
    assert len(raised) == 1
    assert raised[0].type == "critical"
    assert raised[0].title == "Medication Overdue"
    assert raised[0].medication == "Meropenem"
    assert raised[0].message == "Meropenem 1g IV is overdue."


@pytest.mark.parametrize("next_dose, expected", [
    ("14:25", 1),   # 5 min away
    ("14:30", 1),   # exactly at the window
    ("14:31", 0),   # 11 min away
    ("14:00", 1),   # already past
])
def test_due_medication_uses_due_window(evaluator, next_dose, expected):
    p = make_patient(meds=[Medication("Furosemide", "40mg IV", next_dose, "due")])
    raised = evaluator.scan([p], NOW)
    assert len(raised) == expected
    if raised:
        assert raised[0].type == "warning"
        assert raised[0].title == "Medication Due Soon"


@pytest.mark.parametrize("status", ["active", "scheduled", "pending", "prn"])
def test_non_due_statuses_never_alert(evaluator, status):
    p = make_patient(meds=[Medication("Aspirin", "100mg", "14:20", status)])
    assert evaluator.scan([p], NOW) == []


@pytest.mark.parametrize("next_dose", ["Continuous", "PRN", "tomorrow", ""])
def test_malformed_dose_time_is_never_due(evaluator, next_dose):
    p = make_patient(meds=[Medication("Heparin", "1000 units/hr", next_dose, "overdue")])
    assert evaluator.scan([p], NOW) == []


def test_medication_alert_not_repeated_while_open(evaluator, store):
    p = make_patient(meds=[Medication("Meropenem", "1g IV", "14:10", "overdue")])
    evaluator.scan([p], NOW)
    evaluator.scan([p], NOW)
    assert len(store) == 1


def test_medication_alert_is_deterministic(evaluator):
    # no coin flip: the first scan always raises
    for pid in range(1, 21):
        p = make_patient(pid=pid, meds=[Medication("Furosemide", "40mg IV", "14:25", "due")])
        assert len(evaluator.scan([p], NOW)) == 1


def test_two_due_medications_keep_patient_type_unique(evaluator, store):
    p = make_patient(meds=[
        Medication("Furosemide", "40mg IV", "14:25", "due"),
        Medication("Magnesium Sulfate", "2g IV", "14:28", "due"),
    ])
    evaluator.scan([p], NOW)
    assert len(store) == 1
    assert_unique_patient_type(store)
    assert store.open()[0].medication == "Furosemide"


def test_one_critical_alert_per_patient_across_conditions(evaluator, store):
    p = make_patient(spo2=85, status="critical",
                     meds=[Medication("Meropenem", "1g IV", "14:10", "overdue")])
    evaluator.scan([p], NOW)
    evaluator.scan([p], NOW)
    assert len(store) == 1
    assert_unique_patient_type(store)


# 3) Pre-dose reminders
@pytest.mark.parametrize("next_dose, fires", [
    ("14:29", False),   # 9 min
    ("14:30", True),    # 10 min
    ("14:31", False),   # 11 min
])
def test_pre_dose_fires_only_at_exactly_ten_minutes(evaluator, next_dose, fires):
    p = make_patient(meds=[Medication("Propofol", "50 mg/hr", next_dose, "active")])
    reminders = evaluator.pre_dose_reminders([p], Role.NURSE, NOW)
    assert bool(reminders) is fires
    if fires:
        assert reminders[0].minutes_until == 10
        assert reminders[0].scheduled == next_dose


@pytest.mark.parametrize("role", [Role.DOCTOR, Role.ADMINISTRATOR, None])
def test_pre_dose_is_nurse_only(evaluator, role):
    p = make_patient(meds=[Medication("Propofol", "50 mg/hr", "14:30", "active")])
    assert evaluator.pre_dose_reminders([p], role, NOW) == []


def test_pre_dose_fires_once_per_dose(evaluator):
    p = make_patient(meds=[Medication("Propofol", "50 mg/hr", "14:30", "active")])
    # both scans land in the minute where the countdown reads 10
    first = evaluator.pre_dose_reminders([p], Role.NURSE, NOW.replace(minute=19, second=30))
    second = evaluator.pre_dose_reminders([p], Role.NURSE, NOW)
    assert len(first) == 1
    assert second == []


def test_pre_dose_fires_again_next_day(evaluator):
    p = make_patient(meds=[Medication("Propofol", "50 mg/hr", "14:30", "active")])
    evaluator.pre_dose_reminders([p], Role.NURSE, NOW)
    tomorrow = NOW.replace(day=5)
    assert len(evaluator.pre_dose_reminders([p], Role.NURSE, tomorrow)) == 1


@pytest.mark.parametrize("next_dose", ["Continuous", "PRN", "??"])
def test_pre_dose_ignores_sentinels(evaluator, next_dose):
    p = make_patient(meds=[Medication("Insulin", "4 units/hr", next_dose, "active")])
    assert evaluator.pre_dose_reminders([p], Role.NURSE, NOW) == []


def test_custom_lead_time(store):
    evaluator = m.AlertEvaluator(store, pre_dose_lead_min=5)
    p = make_patient(meds=[Medication("Propofol", "50 mg/hr", "14:25", "active")])
    assert len(evaluator.pre_dose_reminders([p], Role.NURSE, NOW)) == 1
