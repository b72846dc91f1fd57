from __future__ import annotations

from typing import Dict, Iterable, List

import altair as alt
import pandas as pd
import streamlit as st

from src.icu_monitor.models.app_types import Patient, STATUSES

STATUS_COLORS = {"critical": "#ff0000", "warning": "#ffb400", "stable": "#0ea5e9"}


def vitals_frame(patients: Iterable[Patient]) -> pd.DataFrame:
    rows = []
    for p in patients:
        v = p.vitals
        rows.append({
            "Bed": p.bed_id,
            "Patient": p.name,
            "Status": p.status,
            "HR": int(v.heart_rate),
            "SpO2": int(v.spo2),
            "BP": f"{v.blood_pressure.systolic}/{v.blood_pressure.diastolic}",
            "Temp": round(float(v.temperature), 1),
            "RR": int(v.respiratory_rate),
            "Nurse": p.assigned_caregiver or "",
        })
    return pd.DataFrame(rows, columns=["Bed", "Patient", "Status", "HR", "SpO2", "BP", "Temp", "RR", "Nurse"])


def status_frame(stats: Dict[str, int]) -> pd.DataFrame:
    return pd.DataFrame({
        "Status": list(STATUSES),
        "Patients": [int(stats.get(s, 0)) for s in STATUSES],
    })


def schedule_frame(rows: List[dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df[["next_dose", "medication", "dose", "patient_name", "bed_id", "status", "urgent"]].rename(
        columns={"next_dose": "Next", "medication": "Medication", "dose": "Dose",
                 "patient_name": "Patient", "bed_id": "Bed", "status": "Status", "urgent": "Due soon"}
    )


def render_status_chart(stats: Dict[str, int]) -> None:
    df = status_frame(stats)
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("Status:N", sort=list(STATUSES), title=None),
            y=alt.Y("Patients:Q", title="Patients", axis=alt.Axis(tickMinStep=1)),
            color=alt.Color(
                "Status:N",
                scale=alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values())),
                legend=None,
            ),
            tooltip=["Status:N", "Patients:Q"],
        )
        .properties(height=180)
    )
    st.altair_chart(chart, use_container_width=True)


def render_vitals_table(patients: Iterable[Patient]) -> None:
    df = vitals_frame(patients)
    if df.empty:
        st.info("No patients admitted.")
        return
    st.dataframe(df, use_container_width=True, hide_index=True)
