"""APScheduler adapter - one-shot delayed tasks on a background scheduler."""

import logging
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Cancel handle for a job added to the scheduler."""

    def __init__(self, job: Job):
        self.job = job

    def cancel(self) -> None:
        try:
            self.job.remove()
        except JobLookupError:
            # Already ran
            return


class APSchedulerTimer:
    """
    Scheduler adapter backed by APScheduler.

    Implements Scheduler protocol. Each task runs once from the
    scheduler's thread pool; late tasks still run.
    """

    def __init__(self, scheduler: BackgroundScheduler | None = None):
        self.scheduler = scheduler or BackgroundScheduler()

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.debug("Scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.debug("Scheduler stopped")

    def schedule_after(self, delay: float, task: Callable[[], None]) -> ScheduledTask:
        """Run task once, delay seconds from now."""
        run_date = datetime.now() + timedelta(seconds=delay)
        job = self.scheduler.add_job(
            task,
            DateTrigger(run_date=run_date),
            misfire_grace_time=None,
        )
        return ScheduledTask(job)
