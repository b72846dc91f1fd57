"""ICU Monitor Streamlit app.

This file is the Streamlit *entrypoint*.

What this app does
------------------
- Shows twelve mock ICU beds with live (simulated) vitals and a status tier.
- Nudges vitals every few seconds and re-derives each patient's status.
- Scans for critical-vitals and medication alerts; alerts stay open until acknowledged.
- Nurses get a medication schedule and a reminder 10 minutes before each dose.
- Administrators manage the nurse roster and assign nurses to patients.

How it runs
-----------
    `python -m streamlit run app.py`

Each autorefresh rerun drives the scheduler, which runs whichever of the
vitals / alert / medication jobs are due.
"""

import logging
import os
import sys

import streamlit as st
from streamlit_autorefresh import st_autorefresh

# Ensure the project root (folder containing `src/`) is on sys.path.
PROJECT_ROOT = os.path.dirname(__file__)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from src.icu_monitor.auth.session import view_for, VIEW_ADMIN, VIEW_DOCTOR, VIEW_NURSE
from src.icu_monitor.state.init import ensure_init
from src.icu_monitor.ui import render as ui_render
from src.icu_monitor.ui import styles as ui_styles

logging.basicConfig(
    level=os.getenv("ICU_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    st.set_page_config(page_title="ICU Monitor", layout="wide", initial_sidebar_state="expanded")

    ui_styles.inject()

    monitor = ensure_init()
    st_autorefresh(interval=monitor.settings.refresh_ms, key="refresh")

    role = ui_render.session_sidebar(monitor)
    st.session_state.scheduler.run_pending()

    ui_render.navbar(monitor)
    if role is None:
        st.info("Signed out. Choose a role in the sidebar to open a dashboard.")
        return

    view = view_for(role)
    if view == VIEW_NURSE:
        ui_render.render_nurse_view(monitor, ui_render.DEMO_USERS[role])
    elif view == VIEW_ADMIN:
        ui_render.render_dashboard(monitor, role)
        left, right = st.columns(2)
        with left:
            ui_render.render_patient_admin(monitor)
        with right:
            ui_render.render_roster_admin(monitor)
    elif view == VIEW_DOCTOR:
        ui_render.render_dashboard(monitor, role)


if __name__ == "__main__":
    main()
