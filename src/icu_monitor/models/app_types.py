from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


# Status tiers derived from vitals
STATUS_CRITICAL: str = "critical"
STATUS_WARNING: str = "warning"
STATUS_STABLE: str = "stable"
STATUSES = (STATUS_CRITICAL, STATUS_WARNING, STATUS_STABLE)

# Alert severities
ALERT_CRITICAL: str = "critical"
ALERT_WARNING: str = "warning"

# Medication status tags
MED_STATUSES = ("active", "scheduled", "pending", "due", "overdue", "prn")

SHIFTS = ("Morning", "Afternoon", "Night")


class Role(str, Enum):
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    ADMINISTRATOR = "Administrator"


@dataclass
class BloodPressure:
    systolic: int   # mmHg
    diastolic: int  # mmHg


@dataclass
class Vitals:
    """
    Instantaneous vitals for a patient.
    Overwritten in place by the simulator, no history is kept.
    """
    heart_rate: int        # bpm
    spo2: int              # %
    blood_pressure: BloodPressure
    temperature: float     # °C
    respiratory_rate: int  # /min


@dataclass
class Medication:
    name: str
    dose: str
    next_dose: str  # "HH:MM", "h:MM PM", or "Continuous"/"PRN"
    status: str = "scheduled"


@dataclass
class ImagingRecord:
    type: str
    date: str
    findings: str = ""


@dataclass
class Patient:
    id: int
    name: str
    age: int
    bed_id: str
    vitals: Vitals
    status: str
    diagnosis: str = ""
    medications: List[Medication] = field(default_factory=list)
    admission_date: Optional[str] = None
    assigned_caregiver: Optional[str] = None  # caregiver name, not an ownership link
    imaging: List[ImagingRecord] = field(default_factory=list)


@dataclass
class Alert:
    id: int
    type: str  # "critical" | "warning"
    patient_id: int
    patient_name: str
    bed_id: str
    title: str
    message: str
    timestamp: datetime
    medication: Optional[str] = None


@dataclass
class Reminder:
    """Pre-dose reminder, shown to nurses a fixed lead time before a dose."""
    patient_id: int
    patient_name: str
    bed_id: str
    medication: str
    dose: str
    scheduled: str
    minutes_until: int
    created: datetime


@dataclass
class Caregiver:
    id: int
    name: str
    email: str
    phone: str = ""
    shift: str = "Morning"
    status: str = "active"


@dataclass
class Session:
    username: str
    role: Role
    login_time: datetime


@dataclass
class Ranges:
    """
    Status bands for one vital.
    Values strictly outside the warning band are "warning", strictly outside
    the critical band are "critical". None means the side is unbounded.
    """
    warning_low: Optional[float]
    warning_high: Optional[float]
    critical_low: Optional[float]
    critical_high: Optional[float]
