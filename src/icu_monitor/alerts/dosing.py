# Medication timing helpers.
# get_time_until_dose(): whole minutes from `now` to today's scheduled clock time.
#   Accepts "14:30", "9:05" and "2:30 PM". Anything else ("Continuous", "PRN",
#   garbage) returns None, which callers treat as "never due".

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Optional, Tuple

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")


def parse_clock_time(text: object) -> Optional[Tuple[int, int]]:
    if not isinstance(text, str):
        return None
    m = _CLOCK_RE.match(text)
    if not m:
        return None

    hours, minutes = int(m.group(1)), int(m.group(2))
    meridiem = m.group(3)
    if meridiem:
        if not 1 <= hours <= 12:
            return None
        hours = hours % 12
        if meridiem.lower() == "pm":
            hours += 12
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def get_time_until_dose(next_dose: object, now: Optional[datetime] = None) -> Optional[int]:
    """
    Minutes until the dose, floored, against today's date.
    Negative when the clock time has already passed today.
    """
    parsed = parse_clock_time(next_dose)
    if parsed is None:
        return None

    now = now or datetime.now()
    dose_time = now.replace(hour=parsed[0], minute=parsed[1], second=0, microsecond=0)
    diff_sec = (dose_time - now).total_seconds()
    return math.floor(diff_sec / 60)


def is_urgent(minutes_until: Optional[int], lead_min: int = 10) -> bool:
    """Due within the lead window (and not already past)."""
    return minutes_until is not None and 0 <= minutes_until <= lead_min
