import json
from datetime import datetime, timedelta

import pytest

import src.icu_monitor.auth.session as session_mod
import src.icu_monitor.staff.roster as roster_mod
from src.icu_monitor.models.app_types import Medication, Role
from src.icu_monitor.state.seed import seed_patients
from src.icu_monitor.storage.kv import MemoryStore, PostgresStore

NOW = datetime(2025, 12, 4, 14, 20, 0)


class Clock:
    def __init__(self, t):
        self.t = t

    def __call__(self):
        return self.t


@pytest.fixture
def store():
    return MemoryStore()


# 1) Key-value store
def test_memory_store_roundtrip_and_remove(store):
    store.set_json("k", {"a": 1})
    assert store.get_json("k") == {"a": 1}
    store.remove("k")
    assert store.get("k") is None
    store.remove("k")  # removing a missing key is fine


def test_malformed_json_returns_default(store):
    store.set("k", "{not json")
    assert store.get_json("k", []) == []


def test_postgres_store_requires_url():
    with pytest.raises(RuntimeError):
        PostgresStore(None)


# 2) Session provider
def test_session_start_and_current(store):
    sessions = session_mod.SessionProvider(store, now=Clock(NOW))
    sessions.start("nurse", "Nurse")
    current = sessions.current()
    assert current.username == "nurse"
    assert current.role is Role.NURSE
    assert json.loads(store.get("icuSession"))["loginTime"] == NOW.isoformat()


def test_missing_session_is_none(store):
    assert session_mod.SessionProvider(store).current() is None


def test_session_expires_after_ttl(store):
    clock = Clock(NOW)
    sessions = session_mod.SessionProvider(store, ttl_hours=24, now=clock)
    sessions.start("doctor", Role.DOCTOR)

    clock.t = NOW + timedelta(hours=23, minutes=59)
    assert sessions.current() is not None

    clock.t = NOW + timedelta(hours=24)
    assert sessions.current() is None
    assert store.get("icuSession") is None


@pytest.mark.parametrize("blob", [
    "not json",
    json.dumps([1, 2]),
    json.dumps({"username": "x", "role": "Janitor", "loginTime": NOW.isoformat()}),
    json.dumps({"username": "x", "role": "Nurse", "loginTime": "yesterday"}),
    json.dumps({"role": "Nurse", "loginTime": NOW.isoformat()}),
])
def test_malformed_session_is_none(store, blob):
    store.set("icuSession", blob)
    assert session_mod.SessionProvider(store, now=Clock(NOW)).current() is None


def test_start_rejects_unknown_role(store):
    with pytest.raises(ValueError):
        session_mod.SessionProvider(store).start("x", "Janitor")


def test_end_session(store):
    sessions = session_mod.SessionProvider(store)
    sessions.start("admin", Role.ADMINISTRATOR)
    sessions.end()
    assert sessions.current() is None


def test_every_role_has_a_view():
    assert set(session_mod.ROLE_VIEWS) == set(Role)
    assert session_mod.view_for(Role.NURSE) == session_mod.VIEW_NURSE
    assert session_mod.shows_alerts(Role.DOCTOR)
    assert not session_mod.shows_alerts(Role.ADMINISTRATOR)


# 3) Caregiver roster
def test_empty_roster_is_seeded(store):
    roster = roster_mod.CaregiverRoster(store)
    nurses = roster.all()
    assert [n.name for n in nurses] == ["Sarah Ahmed"]
    assert json.loads(store.get("nursesList"))[0]["email"] == "nurse@icu.com"


def test_add_update_delete(store):
    roster = roster_mod.CaregiverRoster(store)
    added = roster.add("Mariam Adel", "mariam@icu.com", "+20 100", "Night")
    assert added.id == 2
    assert roster.get(2).shift == "Night"

    roster.update(2, shift="Afternoon", phone="+20 200")
    assert (roster.get(2).shift, roster.get(2).phone) == ("Afternoon", "+20 200")

    assert roster.delete(2) is True
    assert roster.delete(2) is False
    assert roster.get(2) is None


@pytest.mark.parametrize("name, email, shift", [
    ("", "a@icu.com", "Morning"),
    ("A", "no-at-sign", "Morning"),
    ("A", "a@icu.com", "Weekend"),
])
def test_add_rejects_bad_input(store, name, email, shift):
    with pytest.raises(ValueError):
        roster_mod.CaregiverRoster(store).add(name, email, shift=shift)


def test_for_username_matches_email(store):
    roster = roster_mod.CaregiverRoster(store)
    assert roster.for_username("nurse").name == "Sarah Ahmed"
    assert roster.for_username("doctor") is None


def test_corrupt_roster_entries_are_skipped(store):
    store.set_json("nursesList", [{"id": "x"}, {"id": 3, "name": "Hana", "email": "hana@icu.com"}])
    assert [c.name for c in roster_mod.CaregiverRoster(store).all()] == ["Hana"]


def test_medication_schedule_sorted_and_flagged():
    patients = seed_patients()[:3]
    patients[1].medications.append(Medication("Heparin", "5000 units", "14:25", "scheduled"))
    rows = roster_mod.medication_schedule(patients, NOW, lead_min=10)

    next_doses = [r["next_dose"] for r in rows]
    assert next_doses == sorted(next_doses)
    urgent = [r["medication"] for r in rows if r["urgent"]]
    # Heparin is 5 min away, Norepinephrine exactly 10
    assert urgent == ["Heparin", "Norepinephrine"]
    assert rows[0]["minutes_until"] == 5
