"""Ticker + callbacks with an injectable clock.

Under Streamlit every autorefresh rerun calls `run_pending()`; outside of it
`run_forever()` plays the part of the browser's interval timers.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Job:
    name: str
    interval: float
    callback: Callable[[], object]
    next_run: float
    runs: int = 0


class Scheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.jobs: List[Job] = []

    def every(
        self,
        seconds: float,
        callback: Callable[[], object],
        name: Optional[str] = None,
        run_immediately: bool = False,
    ) -> Job:
        if seconds <= 0:
            raise ValueError(f"interval must be positive, got {seconds}")
        now = self.clock()
        job = Job(
            name=name or getattr(callback, "__name__", "job"),
            interval=float(seconds),
            callback=callback,
            next_run=now if run_immediately else now + seconds,
        )
        self.jobs.append(job)
        return job

    def cancel(self, job: Job) -> None:
        if job in self.jobs:
            self.jobs.remove(job)

    def run_pending(self) -> int:
        """Run each due job once. A job that fell far behind runs once, not once per missed tick."""
        now = self.clock()
        ran = 0
        for job in list(self.jobs):
            if now < job.next_run:
                continue
            try:
                job.callback()
            except Exception:
                logger.exception("Scheduled job %r failed", job.name)
            job.runs += 1
            ran += 1

            job.next_run += job.interval
            if job.next_run <= now:
                job.next_run = now + job.interval
        return ran

    def seconds_until_next(self) -> Optional[float]:
        if not self.jobs:
            return None
        return max(0.0, min(j.next_run for j in self.jobs) - self.clock())

    def run_forever(
        self,
        sleep: Callable[[float], None] = time.sleep,
        stop: Optional[Callable[[], bool]] = None,
    ) -> None:
        logger.info("Scheduler started with %d job(s)", len(self.jobs))
        while not (stop and stop()):
            self.run_pending()
            wait = self.seconds_until_next()
            sleep(1.0 if wait is None else wait)
