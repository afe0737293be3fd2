"""Create/read/upsert access to the time_entries table"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from teamclock.errors import NotFound
from teamclock.integrations.supabase_rest import SupabaseClient
from teamclock.models import TimeEntry
from teamclock.utils.time_helpers import month_range, now_in, week_range

logger = logging.getLogger(__name__)

TABLE = 'time_entries'
MUTABLE_FIELDS = ('description', 'end_time', 'duration', 'billable')


class TimeEntryStore:
    def __init__(self, client: SupabaseClient, timezone: str = 'UTC'):
        self.client = client
        self.timezone = timezone

    def upsert(self, entry: TimeEntry) -> TimeEntry:
        """
        Insert or update the row for `entry.external_id`.

        The lookup and the write are separate requests, so two concurrent
        upserts for the same external id can both insert.
        """
        # TODO: switch to a single POST with on_conflict=clockify_entry_id once
        # the table has a unique constraint on that column.
        existing = self.client.select(
            TABLE, [('clockify_entry_id', 'eq', entry.external_id)], limit=1
        )
        row = entry.to_row()

        if existing:
            values = {field: row[field] for field in MUTABLE_FIELDS}
            updated = self.client.update(TABLE, values, [('id', 'eq', existing[0]['id'])])
            logger.debug(f"Updated time entry {entry.external_id}")
            return TimeEntry.from_row(updated[0] if updated else dict(existing[0], **values))

        row['id'] = str(uuid.uuid4())
        created = self.client.insert(TABLE, [row])
        logger.debug(f"Inserted time entry {entry.external_id}")
        return TimeEntry.from_row(created[0] if created else row)

    def list_for_employee(self, employee_id: str, start: Optional[datetime] = None,
                          end: Optional[datetime] = None) -> List[TimeEntry]:
        """Entries started within [start, end], newest first"""
        filters = [('employee_id', 'eq', employee_id)]
        if start:
            filters.append(('start_time', 'gte', start.isoformat()))
        if end:
            filters.append(('start_time', 'lte', end.isoformat()))

        rows = self.client.select(TABLE, filters, order='start_time.desc')
        return [TimeEntry.from_row(row) for row in rows]

    def weekly_for(self, employee_id: str, now: Optional[datetime] = None) -> List[TimeEntry]:
        start, end = week_range(now or now_in(self.timezone), self.timezone)
        return self.list_for_employee(employee_id, start, end)

    def monthly_for(self, employee_id: str, now: Optional[datetime] = None) -> List[TimeEntry]:
        start, end = month_range(now or now_in(self.timezone), self.timezone)
        return self.list_for_employee(employee_id, start, end)

    def active_for(self, employee_id: str) -> Optional[TimeEntry]:
        """The employee's running entry (no end time), None if there is none"""
        try:
            row = self.client.select_single(
                TABLE, [('employee_id', 'eq', employee_id), ('end_time', 'is', None)]
            )
        except NotFound:
            return None
        return TimeEntry.from_row(row)
