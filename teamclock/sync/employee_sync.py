#!/usr/bin/env python3
"""
Employee directory reconciliation
- Reads every Clockify user and every stored employee
- Creates employees for users that have no row yet (matched on email)
- Refreshes existing rows only when forced
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

import schedule

from teamclock.database.employee_store import EmployeeStore
from teamclock.integrations.clockify_client import ClockifyClient
from teamclock.models import DailyLog, Employee, EmployeeType, ExternalUser, TimeEntry
from teamclock.utils.time_helpers import now_in, week_range

logger = logging.getLogger(__name__)


class EmployeeSync:
    """Brings the employees table in line with the Clockify directory"""

    def __init__(self, directory: ClockifyClient, employees: EmployeeStore,
                 timezone: str = 'UTC', scheduler: Optional[schedule.Scheduler] = None):
        self.directory = directory
        self.employees = employees
        self.timezone = timezone
        self.scheduler = scheduler or schedule.Scheduler()
        self._periodic_job: Optional[schedule.Job] = None

    def sync_employee_data(self, force_sync: bool = False) -> Dict[str, int]:
        """
        Run one reconciliation pass.

        Existing employees are left alone unless `force_sync` is set. A
        failure for one user is logged and counted; only failures while
        listing users or employees abort the pass.
        """
        logger.info(f"Starting employee sync (force={force_sync})...")

        users = self.directory.list_users()
        logger.info(f"Found {len(users)} users in Clockify")

        existing_employees = self.employees.list()
        logger.info(f"Found {len(existing_employees)} employees in Supabase")

        existing_emails = {employee.email for employee in existing_employees}
        stats = {'created': 0, 'updated': 0, 'failed': 0}

        for user in users:
            try:
                existing = None
                if user.email in existing_emails:
                    existing = self.employees.find_by_email(user.email, existing_employees)

                if existing and not force_sync:
                    logger.debug(f"Skipping {user.email} - already exists and no force sync")
                    continue

                employee = self._build_employee(user, existing)

                if existing:
                    self.employees.update(existing.id, employee.to_row())
                    stats['updated'] += 1
                    logger.info(f"Updated employee: {user.email}")
                else:
                    self.employees.create(employee)
                    stats['created'] += 1
                    logger.info(f"Created employee: {user.email}")

            except Exception as e:
                logger.error(f"Failed to process user {user.email}: {e}", exc_info=True)
                stats['failed'] += 1

        logger.info(
            f"Employee sync completed: {stats['created']} created, "
            f"{stats['updated']} updated, {stats['failed']} failed"
        )
        return stats

    def _build_employee(self, user: ExternalUser, existing: Optional[Employee]) -> Employee:
        """Employee payload for a user; hand-entered fields come from the existing row"""
        start, end = week_range(now_in(self.timezone), self.timezone)
        time_entries = self.directory.time_entries(user.id, start, end)
        groups = self.directory.list_groups()

        group = self.directory.group_for(user.id, groups)

        return Employee(
            name=user.name,
            email=user.email,
            is_active=user.is_active,
            group=group.name if group else None,
            employee_type=existing.employee_type if existing else EmployeeType.FULLTIME,
            clockify_id=user.id,
            weekly_logs=self._weekly_logs(time_entries),
            custom_details=existing.custom_details if existing else None,
        )

    @staticmethod
    def _weekly_logs(entries: List[TimeEntry]) -> List[DailyLog]:
        logs = []
        for entry in entries:
            if entry.start_time is None:
                continue
            logs.append(DailyLog(
                date=entry.start_time,
                login_time=entry.start_time,
                logout_time=entry.end_time or datetime.now(entry.start_time.tzinfo),
            ))
        return logs

    # ------------------------------------------------------------------
    # Periodic sync

    @property
    def is_periodic_running(self) -> bool:
        return self._periodic_job is not None

    def start_periodic_sync(self, interval_minutes: int = 30) -> Optional[schedule.Job]:
        """
        Run an unforced pass now, then a forced pass every `interval_minutes`.

        The job is registered on `self.scheduler`; something has to call
        `self.scheduler.run_pending()` for it to fire.
        """
        if self._periodic_job is not None:
            logger.warning("Periodic sync is already running. Stop it first to restart.")
            return None

        logger.info(f"Starting periodic sync every {interval_minutes} minutes")

        # Initial sync without force
        self.sync_employee_data(force_sync=False)

        self._periodic_job = self.scheduler.every(interval_minutes).minutes.do(self._periodic_tick)
        return self._periodic_job

    def stop_periodic_sync(self):
        if self._periodic_job is None:
            logger.warning("No periodic sync was running")
            return

        self.scheduler.cancel_job(self._periodic_job)
        self._periodic_job = None
        logger.info("Periodic sync stopped")

    def _periodic_tick(self):
        try:
            self.sync_employee_data(force_sync=True)
        except Exception as e:
            logger.error(f"Error in periodic sync: {e}", exc_info=True)
