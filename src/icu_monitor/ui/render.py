from __future__ import annotations
from datetime import datetime
from typing import List, Optional

import streamlit as st

from src.icu_monitor.auth.session import shows_alerts
from src.icu_monitor.models.app_types import MED_STATUSES, Patient, Role, SHIFTS
from src.icu_monitor.scoring.status import vital_levels, status_rank
from src.icu_monitor.state.monitor import IcuMonitor
from src.icu_monitor.ui.charts import render_status_chart, render_vitals_table, schedule_frame
from src.icu_monitor.ui.helpers import val_class, head_class, initials, time_ago

DEMO_USERS = {Role.DOCTOR: "doctor", Role.NURSE: "nurse", Role.ADMINISTRATOR: "admin"}


def session_sidebar(monitor: IcuMonitor) -> Optional[Role]:
    """Demo session picker. There is no credential check; None means signed out."""
    current = monitor.sessions.current()
    roles = list(Role)

    with st.sidebar:
        st.markdown("## Session")
        if current is None:
            role = st.selectbox("Sign in as", roles, index=None, placeholder="Choose a role",
                                format_func=lambda r: r.value, key="signin_role")
            if role is None:
                st.caption("Signed out")
                return None
            current = monitor.sessions.start(DEMO_USERS[role], role)
        else:
            role = st.selectbox("Role", roles, index=roles.index(current.role),
                                format_func=lambda r: r.value)
            if role is not current.role:
                current = monitor.sessions.start(DEMO_USERS[role], role)

        st.caption(f"Signed in as {current.username}")
        if st.button("Sign out", use_container_width=True):
            monitor.sessions.end()
            st.session_state.pop("signin_role", None)
            st.rerun()
    return current.role


def navbar(monitor: IcuMonitor) -> None:
    left, right = st.columns([3, 2])
    with left:
        st.markdown("### ICU Monitor")
        st.caption(f"Last update: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    stats = monitor.stats()
    with right:
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Total", stats["total"])
        c2.metric("Stable", stats["stable"])
        c3.metric("Warning", stats["warning"])
        c4.metric("Critical", stats["critical"])


def _card_html(p: Patient) -> str:
    v = p.vitals
    lv = vital_levels(v)
    return f"""
    <div class="icu-card">
      <div class="icu-head {head_class(p.status)}">
        <div class="icu-left">
          <div class="icu-avatar">{initials(p.name)}</div>
          <div>
            <div class="icu-name">{p.name}</div>
            <div class="icu-sub">{p.bed_id} · {p.age} y · {p.diagnosis}</div>
          </div>
        </div>
        <div class="icu-sub">{p.status.upper()}</div>
      </div>
      <div class="icu-body">
        <div class="icu-v"><div class="lab">HR</div>
          <div class="val {val_class(lv['heart_rate'])}">{v.heart_rate} bpm</div></div>
        <div class="icu-v"><div class="lab">SpO2</div>
          <div class="val {val_class(lv['spo2'])}">{v.spo2} %</div></div>
        <div class="icu-v"><div class="lab">BP</div>
          <div class="val {val_class(lv['systolic'])}">{v.blood_pressure.systolic}/{v.blood_pressure.diastolic}</div></div>
        <div class="icu-v"><div class="lab">Temp</div>
          <div class="val">{float(v.temperature):.1f} °C</div></div>
      </div>
    </div>
    """


def render_grid(patients: List[Patient]) -> None:
    ordered = sorted(patients, key=lambda p: -status_rank(p.status))
    cols = st.columns(4)
    for i, p in enumerate(ordered):
        with cols[i % 4]:
            st.markdown(_card_html(p), unsafe_allow_html=True)


def render_alerts(monitor: IcuMonitor) -> None:
    st.markdown("**Active Alerts**")
    alerts = monitor.alerts.open()
    if not alerts:
        st.caption("No active alerts.")
        return

    now = datetime.now()
    for a in alerts:
        box = st.error if a.type == "critical" else st.warning
        text_col, btn_col = st.columns([5, 1])
        with text_col:
            box(f"**{a.title}** · {a.patient_name} ({a.bed_id})\n\n{a.message}\n\n"
                f"_{time_ago((now - a.timestamp).total_seconds())}_")
        with btn_col:
            if st.button("Acknowledge", key=f"ack_{a.id}"):
                monitor.acknowledge(a.id)
                st.rerun()


def render_reminders(monitor: IcuMonitor) -> None:
    for i, r in enumerate(list(monitor.reminders)):
        text_col, btn_col = st.columns([5, 1])
        with text_col:
            st.warning(f"**Medication due in {r.minutes_until} minutes!** {r.patient_name} ({r.bed_id})\n\n"
                       f"{r.medication} - {r.dose} · scheduled {r.scheduled}")
        with btn_col:
            if st.button("Dismiss", key=f"rem_{i}_{r.patient_id}_{r.medication}"):
                monitor.dismiss_reminder(i)
                st.rerun()


def render_nurse_view(monitor: IcuMonitor, username: str) -> None:
    nurse = monitor.roster.for_username(username)
    name = nurse.name if nurse else "Nurse"
    st.markdown(f"#### {name}'s Dashboard - Medication Schedule")

    render_reminders(monitor)

    patients = monitor.nurse_patients(username)
    if not patients:
        st.info("No patients assigned yet. Ask an administrator to assign patients to you.")
        return

    st.caption(f"You are managing {len(patients)} patient{'s' if len(patients) > 1 else ''}")
    df = schedule_frame(monitor.nurse_schedule(username))
    if df.empty:
        st.caption("No medications scheduled")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)
    render_grid(patients)


def _edit_nurse(monitor: IcuMonitor, c) -> None:
    with st.expander(f"Edit {c.name}"):
        with st.form(f"edit_nurse_{c.id}"):
            name = st.text_input("Full Name", value=c.name, key=f"nurse_name_{c.id}")
            email = st.text_input("Email", value=c.email, key=f"nurse_email_{c.id}")
            phone = st.text_input("Phone", value=c.phone, key=f"nurse_phone_{c.id}")
            shift = st.selectbox("Shift", SHIFTS, index=SHIFTS.index(c.shift) if c.shift in SHIFTS else 0,
                                 key=f"nurse_shift_{c.id}")
            status = st.selectbox("Status", ["active", "inactive"],
                                  index=1 if c.status == "inactive" else 0, key=f"nurse_status_{c.id}")
            if st.form_submit_button("Save"):
                try:
                    monitor.update_caregiver(c.id, name=name, email=email, phone=phone,
                                             shift=shift, status=status)
                except ValueError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()


def render_roster_admin(monitor: IcuMonitor) -> None:
    st.markdown("#### Nurse Management")
    for c in monitor.roster.all():
        info_col, btn_col = st.columns([5, 1])
        with info_col:
            st.markdown(f"**{c.name}** · {c.email} · {c.phone} · {c.shift} · _{c.status}_")
        with btn_col:
            if st.button("Delete", key=f"del_nurse_{c.id}"):
                monitor.roster.delete(c.id)
                st.rerun()
        _edit_nurse(monitor, c)

    with st.form("add_nurse", clear_on_submit=True):
        name = st.text_input("Full Name")
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        shift = st.selectbox("Shift", SHIFTS)
        if st.form_submit_button("Add Nurse"):
            try:
                monitor.roster.add(name, email, phone, shift)
            except ValueError as exc:
                st.error(str(exc))


def _patient_detail(monitor: IcuMonitor, p: Patient) -> None:
    with st.expander(f"Details · {p.name}"):
        with st.form(f"edit_patient_{p.id}"):
            name = st.text_input("Patient Name", value=p.name, key=f"pt_name_{p.id}")
            age = st.number_input("Age", min_value=0, max_value=130, value=int(p.age), key=f"pt_age_{p.id}")
            bed = st.text_input("Bed ID", value=p.bed_id, key=f"pt_bed_{p.id}")
            diagnosis = st.text_input("Diagnosis", value=p.diagnosis, key=f"pt_dx_{p.id}")
            if st.form_submit_button("Save"):
                try:
                    monitor.update_patient(p.id, name=name, age=int(age), bed_id=bed, diagnosis=diagnosis)
                except ValueError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()

        st.markdown("**Medications**")
        for med in p.medications:
            st.caption(f"{med.name} · {med.dose} · {med.next_dose} · {med.status}")
        with st.form(f"add_med_{p.id}", clear_on_submit=True):
            med_name = st.text_input("Medication", key=f"med_name_{p.id}")
            dose = st.text_input("Dose", key=f"med_dose_{p.id}")
            next_dose = st.text_input("Next dose (HH:MM, Continuous or PRN)", key=f"med_next_{p.id}")
            med_status = st.selectbox("Status", MED_STATUSES, index=MED_STATUSES.index("scheduled"),
                                      key=f"med_status_{p.id}")
            if st.form_submit_button("Add Medication"):
                try:
                    monitor.add_medication(p.id, med_name, dose, next_dose, med_status)
                except ValueError as exc:
                    st.error(str(exc))

        st.markdown("**Medical Imaging**")
        if p.imaging:
            labels = [f"{r.type} · {r.date} · {r.findings}" for r in p.imaging]
            picked = st.selectbox("Record", range(len(labels)), format_func=lambda i: labels[i],
                                  key=f"img_pick_{p.id}")
            if st.button("Delete record", key=f"img_del_{p.id}"):
                monitor.remove_imaging(p.id, picked)
                st.rerun()
        else:
            st.caption("No imaging records")
        with st.form(f"add_img_{p.id}", clear_on_submit=True):
            img_type = st.selectbox("Type", ["X-Ray", "CT", "MRI", "Ultrasound", "Echo"], key=f"img_type_{p.id}")
            img_date = st.date_input("Date", key=f"img_date_{p.id}")
            findings = st.text_area("Findings", key=f"img_findings_{p.id}")
            if st.form_submit_button("Add Imaging"):
                try:
                    monitor.add_imaging(p.id, img_type, img_date.isoformat(), findings)
                except ValueError as exc:
                    st.error(str(exc))


def render_patient_admin(monitor: IcuMonitor) -> None:
    st.markdown("#### Patient Management")
    nurses = [c.name for c in monitor.roster.all()]
    for p in monitor.patients.all():
        info_col, assign_col, btn_col = st.columns([4, 2, 1])
        with info_col:
            st.markdown(f"**{p.name}** · {p.bed_id} · {p.diagnosis} · _{p.status}_")
        with assign_col:
            options = [""] + nurses
            current = p.assigned_caregiver if p.assigned_caregiver in nurses else ""
            chosen = st.selectbox("Nurse", options, index=options.index(current),
                                  key=f"assign_{p.id}", label_visibility="collapsed")
            if chosen != current:
                monitor.assign_caregiver(p.id, chosen or None)
        with btn_col:
            if st.button("Delete", key=f"del_patient_{p.id}"):
                monitor.delete_patient(p.id)
                st.rerun()
        _patient_detail(monitor, p)

    with st.form("add_patient", clear_on_submit=True):
        name = st.text_input("Patient Name")
        age = st.number_input("Age", min_value=0, max_value=130, value=50)
        bed = st.text_input("Bed ID")
        diagnosis = st.text_input("Diagnosis")
        if st.form_submit_button("Add Patient"):
            try:
                monitor.add_patient(name, int(age), bed, diagnosis)
            except ValueError as exc:
                st.error(str(exc))


def render_dashboard(monitor: IcuMonitor, role: Role) -> None:
    patients = monitor.patients.all()
    if shows_alerts(role):
        grid_col, alert_col = st.columns([3, 1])
    else:
        grid_col, alert_col = st.container(), None

    with grid_col:
        render_grid(patients)
        st.markdown("**Vitals**")
        render_vitals_table(patients)
        render_status_chart(monitor.stats())

    if alert_col is not None:
        with alert_col:
            render_alerts(monitor)
