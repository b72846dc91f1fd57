from __future__ import annotations

import logging
import uuid

import streamlit as st

from src.icu_monitor.auth.session import session_key_for
from src.icu_monitor.config.settings import Settings
from src.icu_monitor.sim.scheduler import Scheduler
from src.icu_monitor.state.monitor import IcuMonitor, build_monitor
from src.icu_monitor.storage.kv import open_store

logger = logging.getLogger(__name__)


def ensure_init() -> IcuMonitor:
    """Initialize Streamlit session state for the monitor and its scheduler.

    Creates `st.session_state.monitor` with the seeded ward if missing, opens
    the key-value store (PostgreSQL when DATABASE_URL is set) and installs the
    periodic vitals, alert and medication jobs. The session blob is keyed per
    browser session so tabs sharing the PostgreSQL store keep their own role.
    """
    if "monitor" in st.session_state:
        return st.session_state.monitor

    settings = Settings.from_env()
    monitor = build_monitor(
        settings,
        store=open_store(settings),
        session_key=session_key_for(uuid.uuid4().hex),
    )
    st.session_state.monitor = monitor
    st.session_state.scheduler = monitor.install_jobs(Scheduler())
    logger.info("Monitor initialised with %d patients", len(monitor.patients))
    return monitor
