"""Builds each adapter once and wires them together"""
import logging
from dataclasses import dataclass

from teamclock.config import Config
from teamclock.dashboard import DashboardService
from teamclock.database import (
    EmployeeDetailsStore,
    EmployeeStore,
    KeyValueStore,
    TimeEntryStore,
    TTLCache,
)
from teamclock.errors import ConfigurationError
from teamclock.integrations import ClockifyClient, SupabaseClient
from teamclock.sync import EmployeeSync, TimeEntrySync

logger = logging.getLogger(__name__)


@dataclass
class Services:
    directory: ClockifyClient
    employees: EmployeeStore
    time_entries: TimeEntryStore
    kv_store: KeyValueStore
    employee_sync: EmployeeSync
    time_entry_sync: TimeEntrySync
    dashboard: DashboardService


def build_services(config: Config, kv_store: KeyValueStore = None) -> Services:
    """Construct every adapter from settings; fails fast on missing credentials"""
    missing = [
        name for name in ('CLOCKIFY_API_KEY', 'SUPABASE_URL', 'SUPABASE_SERVICE_ROLE_KEY')
        if not getattr(config, name, None)
    ]
    if missing:
        raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")

    directory = ClockifyClient(
        config.CLOCKIFY_API_KEY,
        base_url=config.CLOCKIFY_BASE_URL,
        workspace_id=config.CLOCKIFY_WORKSPACE_ID,
        timeout=config.REQUEST_TIMEOUT,
    )
    # Adapters run with the service role; the anon key is never used here
    backend = SupabaseClient(
        config.SUPABASE_URL,
        config.SUPABASE_SERVICE_ROLE_KEY,
        timeout=config.REQUEST_TIMEOUT,
    )
    employees = EmployeeStore(backend)
    time_entries = TimeEntryStore(backend, timezone=config.TIMEZONE)

    if kv_store is None:
        kv_store = KeyValueStore(host=config.REDIS_HOST, port=config.REDIS_PORT, db=config.REDIS_DB)

    dashboard = DashboardService(
        employees,
        time_entries,
        EmployeeDetailsStore(kv_store),
        TTLCache(kv_store, config.CACHE_TTL_SECONDS),
        delay_seconds=config.RATE_LIMIT_DELAY,
        hours_per_day=config.HOURS_PER_WORKDAY,
    )

    return Services(
        directory=directory,
        employees=employees,
        time_entries=time_entries,
        kv_store=kv_store,
        employee_sync=EmployeeSync(directory, employees, timezone=config.TIMEZONE),
        time_entry_sync=TimeEntrySync(
            directory, employees, time_entries,
            timezone=config.TIMEZONE, delay_seconds=config.RATE_LIMIT_DELAY,
        ),
        dashboard=dashboard,
    )
