"""Copy Clockify time entries into the time_entries table"""
import logging
import time
from typing import Callable, Dict

from teamclock.database.employee_store import EmployeeStore
from teamclock.database.time_entry_store import TimeEntryStore
from teamclock.integrations.clockify_client import ClockifyClient
from teamclock.models import Employee
from teamclock.utils.time_helpers import now_in, week_range

logger = logging.getLogger(__name__)


class TimeEntrySync:
    def __init__(self, directory: ClockifyClient, employees: EmployeeStore,
                 time_entries: TimeEntryStore, timezone: str = 'UTC',
                 delay_seconds: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.directory = directory
        self.employees = employees
        self.time_entries = time_entries
        self.timezone = timezone
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def sync_employee(self, employee: Employee) -> int:
        """Upsert the employee's current week of entries; returns how many"""
        logger.info(f"Syncing time entries for employee {employee.id}")

        start, end = week_range(now_in(self.timezone), self.timezone)
        entries = self.directory.time_entries(employee.clockify_id, start, end)

        for entry in entries:
            entry.employee_id = employee.id
            self.time_entries.upsert(entry)

        logger.info(f"Successfully synced {len(entries)} time entries for {employee.email}")
        return len(entries)

    def sync_all(self) -> Dict[str, int]:
        """Sync every stored employee linked to a Clockify user, one at a time"""
        employees = [employee for employee in self.employees.list() if employee.clockify_id]
        stats = {'synced': 0, 'entries': 0, 'failed': 0}

        for idx, employee in enumerate(employees):
            if idx and self.delay_seconds:
                self.sleep(self.delay_seconds)
            try:
                stats['entries'] += self.sync_employee(employee)
                stats['synced'] += 1
            except Exception as e:
                logger.error(f"Error syncing time entries for {employee.email}: {e}", exc_info=True)
                stats['failed'] += 1

        logger.info(
            f"Time entry sync completed: {stats['synced']} employees, "
            f"{stats['entries']} entries, {stats['failed']} failed"
        )
        return stats
