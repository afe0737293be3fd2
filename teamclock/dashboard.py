# teamclock/dashboard.py
"""
Read side behind the dashboard views: employee list with running-timer
status, weekly/monthly time entries and per-employee summaries.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from teamclock.database.cache import TTLCache
from teamclock.database.employee_details import EmployeeDetailsStore
from teamclock.database.employee_store import EmployeeStore
from teamclock.database.kv_store import EMPLOYEES_CACHE_KEY, TIME_ENTRIES_CACHE_KEY
from teamclock.database.time_entry_store import TimeEntryStore
from teamclock.models import CustomDetails, Employee
from teamclock.utils.biorhythm import calculate_biorhythm, get_biorhythm_phase
from teamclock.utils.time_helpers import (
    expected_monthly_hours,
    format_minutes,
    now_in,
    total_minutes,
)

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, employees: EmployeeStore, time_entries: TimeEntryStore,
                 details: EmployeeDetailsStore, cache: TTLCache, delay_seconds: float = 1.0,
                 hours_per_day: int = 8, max_workers: int = 8,
                 sleep: Callable[[float], None] = time.sleep):
        self.employees = employees
        self.time_entries = time_entries
        self.details = details
        self.cache = cache
        self.delay_seconds = delay_seconds
        self.hours_per_day = hours_per_day
        self.max_workers = max_workers
        self.sleep = sleep

    def load_employees(self, refresh: bool = False) -> List[Dict]:
        """
        Stored employees with hand-entered details merged in.

        `is_working` reflects whether a timer was running when the list was
        built; poll `is_working()` for a fresher answer.
        """
        if not refresh:
            cached = self.cache.get(EMPLOYEES_CACHE_KEY)
            if cached is not None:
                return cached

        employees = self.employees.list()
        stored_details = self.details.get_all()

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            working = list(pool.map(self._safe_is_working, employees))

        result = []
        for employee, is_working in zip(employees, working):
            data = employee.to_dict()
            data['is_working'] = is_working
            details = self._merge_details(employee, stored_details.get(employee.id))
            data['custom_details'] = details.to_dict() if details else None
            result.append(data)

        self.cache.set(EMPLOYEES_CACHE_KEY, result)
        logger.info(f"Loaded {len(result)} employees")
        return result

    def is_working(self, employee_id: str) -> bool:
        return self.time_entries.active_for(employee_id) is not None

    def load_time_entries(self, employee_ids: Iterable[str], refresh: bool = False,
                          now: Optional[datetime] = None) -> Dict[str, Dict[str, List[Dict]]]:
        """
        Weekly and monthly entries for each employee.

        The two ranges for one employee are fetched concurrently; employees
        are fetched one after another with a fixed delay in between.
        """
        employee_ids = list(employee_ids)

        if not refresh:
            cached = self.cache.get(TIME_ENTRIES_CACHE_KEY)
            if cached is not None and all(emp_id in cached for emp_id in employee_ids):
                return {emp_id: cached[emp_id] for emp_id in employee_ids}

        entries = {}
        with ThreadPoolExecutor(max_workers=2) as pool:
            for idx, employee_id in enumerate(employee_ids):
                if idx and self.delay_seconds:
                    # Spread requests out to stay under the API rate limit
                    self.sleep(self.delay_seconds)

                weekly = pool.submit(self.time_entries.weekly_for, employee_id, now)
                monthly = pool.submit(self.time_entries.monthly_for, employee_id, now)
                try:
                    entries[employee_id] = {
                        'weekly': [entry.to_dict() for entry in weekly.result()],
                        'monthly': [entry.to_dict() for entry in monthly.result()],
                    }
                except Exception as e:
                    logger.error(f"Error fetching entries for {employee_id}: {e}")
                    entries[employee_id] = {'weekly': [], 'monthly': []}

        # Keep entries cached for employees outside this request
        merged = self.cache.get(TIME_ENTRIES_CACHE_KEY) or {}
        merged.update(entries)
        self.cache.set(TIME_ENTRIES_CACHE_KEY, merged)
        return entries

    def summary(self, employee_id: str, now: Optional[datetime] = None) -> Dict:
        """Hours worked this week and month against the monthly target"""
        now = now or now_in(self.time_entries.timezone)
        employee = self.employees.get(employee_id)
        weekly = self.time_entries.weekly_for(employee_id, now)
        monthly = self.time_entries.monthly_for(employee_id, now)

        weekly_minutes = total_minutes(weekly)
        monthly_minutes = total_minutes(monthly)
        expected_hours = expected_monthly_hours(now.date(), self.hours_per_day)

        summary = {
            'employee': employee.to_dict(),
            'weekly_minutes': weekly_minutes,
            'weekly_total': format_minutes(weekly_minutes),
            'monthly_minutes': monthly_minutes,
            'monthly_total': format_minutes(monthly_minutes),
            'expected_monthly_hours': expected_hours,
            'monthly_progress': round(monthly_minutes / 60 / expected_hours * 100, 1) if expected_hours else 0.0,
            'biorhythm': None,
        }

        details = self._merge_details(employee, self.details.get(employee_id))
        if details and details.date_of_birth and details.time_of_birth:
            summary['biorhythm'] = self._biorhythm(employee_id, details, now)
        return summary

    @staticmethod
    def _biorhythm(employee_id: str, details: CustomDetails, now: datetime) -> Optional[Dict]:
        try:
            cycles = calculate_biorhythm(details.date_of_birth, details.time_of_birth, now)
        except ValueError as e:
            logger.warning(f"Unusable birth data for {employee_id}: {e}")
            return None
        return {
            name: {'value': round(value, 1), 'phase': get_biorhythm_phase(value)}
            for name, value in cycles.items()
        }

    def get_details(self, employee_id: str) -> Optional[CustomDetails]:
        stored = self.details.get(employee_id)
        if stored is not None:
            return stored
        return self.employees.get(employee_id).custom_details

    def save_details(self, employee_id: str, details: Dict) -> CustomDetails:
        saved = self.details.save(employee_id, details)
        self.cache.invalidate(EMPLOYEES_CACHE_KEY)
        return saved

    def refresh(self):
        """Drop cached employee and time entry payloads"""
        self.cache.invalidate(EMPLOYEES_CACHE_KEY)
        self.cache.invalidate(TIME_ENTRIES_CACHE_KEY)

    def _safe_is_working(self, employee: Employee) -> bool:
        try:
            return self.is_working(employee.id)
        except Exception as e:
            logger.error(f"Could not check running timer for {employee.email}: {e}")
            return False

    @staticmethod
    def _merge_details(employee: Employee, stored: Optional[CustomDetails]) -> Optional[CustomDetails]:
        """Locally stored details win over the ones on the row"""
        if stored is None:
            return employee.custom_details
        if employee.custom_details is None:
            return stored
        merged = employee.custom_details.to_dict()
        merged.update({key: value for key, value in stored.to_dict().items() if value is not None})
        return CustomDetails.from_dict(merged)
