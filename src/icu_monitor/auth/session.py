from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Union

from src.icu_monitor.models.app_types import Role, Session
from src.icu_monitor.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY = "icuSession"


def session_key_for(client_id: str) -> str:
    return f"{SESSION_KEY}:{client_id}"

VIEW_DOCTOR = "doctor_dashboard"
VIEW_NURSE = "nurse_schedule"
VIEW_ADMIN = "admin_dashboard"

# Every Role must have an entry here.
ROLE_VIEWS: Dict[Role, str] = {
    Role.DOCTOR: VIEW_DOCTOR,
    Role.NURSE: VIEW_NURSE,
    Role.ADMINISTRATOR: VIEW_ADMIN,
}


def parse_role(value: Union[str, Role, None]) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def view_for(role: Role) -> str:
    return ROLE_VIEWS[role]


def shows_alerts(role: Role) -> bool:
    """Administrators get the dashboard without the alerts panel."""
    return role is not Role.ADMINISTRATOR


class SessionProvider:
    """
    Reads and writes the demo session blob.
    Missing, malformed or expired sessions all read back as None.
    Each browser session passes its own `key` so a shared store keeps one blob per tab.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_hours: float = 24.0,
        now: Callable[[], datetime] = datetime.now,
        key: str = SESSION_KEY,
    ) -> None:
        self.store = store
        self.key = key
        self.ttl = timedelta(hours=ttl_hours)
        self.now = now

    def start(self, username: str, role: Union[str, Role]) -> Session:
        parsed = parse_role(role)
        if parsed is None:
            raise ValueError(f"unknown role: {role!r}")
        if not username or not username.strip():
            raise ValueError("username is required")

        session = Session(username=username.strip(), role=parsed, login_time=self.now())
        self.store.set_json(self.key, {
            "username": session.username,
            "role": session.role.value,
            "loginTime": session.login_time.isoformat(),
        })
        logger.info("Session started for %s (%s)", session.username, session.role.value)
        return session

    def current(self) -> Optional[Session]:
        data = self.store.get_json(self.key)
        if not isinstance(data, dict):
            return None

        role = parse_role(data.get("role"))
        username = data.get("username")
        try:
            login_time = datetime.fromisoformat(str(data.get("loginTime")))
        except ValueError:
            login_time = None
        if login_time is not None and login_time.tzinfo is not None:
            login_time = login_time.astimezone().replace(tzinfo=None)
        if role is None or not username or login_time is None:
            logger.warning("Ignoring malformed session blob")
            return None

        if self.now() - login_time >= self.ttl:
            logger.info("Session for %s expired", username)
            self.end()
            return None
        return Session(username=username, role=role, login_time=login_time)

    def end(self) -> None:
        self.store.remove(self.key)
