"""Time entry model"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from teamclock.utils.time_helpers import duration_minutes, parse_timestamp

@dataclass
class TimeEntry:
    """A tracked span of work; no end_time means the timer is still running"""
    id: Optional[str] = None
    employee_id: str = None
    external_id: str = None  # Clockify time entry id
    description: str = ''
    start_time: datetime = None
    end_time: Optional[datetime] = None
    duration: Optional[str] = None
    billable: bool = False

    @property
    def is_running(self) -> bool:
        return self.end_time is None

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.duration)

    @classmethod
    def from_row(cls, row: Dict) -> 'TimeEntry':
        return cls(
            id=row.get('id'),
            employee_id=row.get('employee_id'),
            external_id=row.get('clockify_entry_id'),
            description=row.get('description') or '',
            start_time=parse_timestamp(row.get('start_time')),
            end_time=parse_timestamp(row.get('end_time')),
            duration=row.get('duration'),
            billable=bool(row.get('billable')),
        )

    @classmethod
    def from_clockify(cls, data: Dict) -> 'TimeEntry':
        """Entry as read from Clockify; the caller assigns employee_id"""
        interval = data.get('timeInterval') or {}
        return cls(
            external_id=data.get('id'),
            description=data.get('description') or '',
            start_time=parse_timestamp(interval.get('start')),
            end_time=parse_timestamp(interval.get('end')),
            duration=interval.get('duration'),
            billable=bool(data.get('billable')),
        )

    def to_row(self) -> dict:
        row = {
            'employee_id': self.employee_id,
            'clockify_entry_id': self.external_id,
            'description': self.description,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration': self.duration,
            'billable': self.billable,
        }
        if self.id:
            row['id'] = self.id
        return row

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        data = self.to_row()
        data['id'] = self.id
        data['is_running'] = self.is_running
        data['duration_minutes'] = self.duration_minutes
        return data
