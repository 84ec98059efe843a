from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from vacation.clients import ClientRegistry, HrClient, PayrollClient
from vacation.config import Settings, get_settings
from vacation.database import session_scope
from vacation.services import BalanceService, LeaveService
from vacation.utils.logging import LOGGER


class SchedulerManager:
    """Wrapper around APScheduler to manage the daily leave housekeeping job."""

    def __init__(
        self,
        clients: Optional[ClientRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.clients = clients or ClientRegistry()
        self.scheduler = BackgroundScheduler(
            timezone=self.settings.scheduler.timezone
        )

    def start(self) -> None:
        LOGGER.info("Starting scheduler")
        if not self.scheduler.running:
            self._register_jobs()
            self.scheduler.start()

    def shutdown(self) -> None:
        if self.scheduler.running:
            LOGGER.info("Shutting down scheduler")
            self.scheduler.shutdown(wait=False)

    def _register_jobs(self) -> None:
        cron = CronTrigger.from_crontab(
            self.settings.scheduler.daily_job_cron,
            timezone=self.settings.scheduler.timezone,
        )
        self.scheduler.add_job(
            self.run_daily_job,
            trigger=cron,
            id="daily-leave-housekeeping",
            replace_existing=True,
        )

    def run_daily_job(self, now: Optional[datetime] = None) -> None:
        """
        Consume finished leave; on January 1st also open the new year's balances.

        Each step runs in its own session. A failing step is logged and does
        not stop the next one or the scheduler.
        """
        today = (now or datetime.now(ZoneInfo(self.settings.scheduler.timezone))).date()
        LOGGER.info("Daily leave job kicked off for %s", today)

        try:
            with session_scope() as session:
                LeaveService(
                    session,
                    hr_client=self.clients.find(HrClient),
                    payroll_client=self.clients.find(PayrollClient),
                ).consume_due(today)
        except Exception:
            LOGGER.exception("Leave consumption failed")

        if today.month == 1 and today.day == 1:
            hr_client = self.clients.find(HrClient)
            if hr_client is None:
                LOGGER.warning("HR client not enabled, skipping yearly accrual")
                return
            try:
                with session_scope() as session:
                    BalanceService(session, hr_client=hr_client).accrue_year(today.year)
            except Exception:
                LOGGER.exception(f"Yearly accrual for {today.year} failed")
