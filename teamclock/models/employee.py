"""Employee model"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

class EmployeeType(Enum):
    INTERN = 'intern'
    FULLTIME = 'fulltime'
    CONSULTANT = 'consultant'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'EmployeeType':
        try:
            return cls(value)
        except ValueError:
            return cls.FULLTIME

@dataclass
class DailyLog:
    """One login/logout span derived from a time entry"""
    date: datetime
    login_time: datetime
    logout_time: datetime

    def to_json(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'loginTime': self.login_time.isoformat(),
            'logoutTime': self.logout_time.isoformat(),
        }

    @classmethod
    def from_json(cls, data: Any) -> Optional['DailyLog']:
        """Parse a stored log, None when it is malformed"""
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                date=datetime.fromisoformat(data['date'].replace('Z', '+00:00')),
                login_time=datetime.fromisoformat(data['loginTime'].replace('Z', '+00:00')),
                logout_time=datetime.fromisoformat(data['logoutTime'].replace('Z', '+00:00')),
            )
        except (KeyError, TypeError, AttributeError, ValueError):
            return None

@dataclass
class CustomDetails:
    """Personal details entered by hand (birth data and Human Design profile)"""
    date_of_birth: Optional[str] = None
    time_of_birth: Optional[str] = None
    human_design_type: Optional[str] = None
    profile: Optional[Any] = None
    incarnation_cross: Optional[str] = None
    location: Optional[Dict] = None

    @classmethod
    def from_row(cls, row: Dict) -> 'CustomDetails':
        return cls(
            date_of_birth=row.get('birth_date'),
            time_of_birth=row.get('birth_time'),
            human_design_type=row.get('hd_type'),
            profile=row.get('hd_profile'),
            incarnation_cross=row.get('hd_incarnation_cross'),
            location=row.get('birth_location'),
        )

    def to_row(self) -> dict:
        return {
            'birth_date': self.date_of_birth,
            'birth_time': self.time_of_birth,
            'hd_type': self.human_design_type,
            'hd_profile': self.profile,
            'hd_incarnation_cross': self.incarnation_cross,
            'birth_location': self.location,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CustomDetails':
        return cls(**{key: data.get(key) for key in cls.__dataclass_fields__})

    def to_dict(self) -> dict:
        return {key: getattr(self, key) for key in self.__dataclass_fields__}

    def is_empty(self) -> bool:
        return all(value is None for value in self.to_dict().values())

@dataclass
class Employee:
    """Employee data model (one row of the employees table)"""
    id: Optional[str] = None
    name: str = None
    email: str = None
    is_active: bool = True
    group: Optional[str] = None
    employee_type: EmployeeType = EmployeeType.FULLTIME
    clockify_id: Optional[str] = None
    weekly_logs: List[DailyLog] = field(default_factory=list)
    custom_details: Optional[CustomDetails] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict) -> 'Employee':
        logs = row.get('weekly_logs')
        weekly_logs = []
        if isinstance(logs, list):
            for raw in logs:
                log = DailyLog.from_json(raw)
                if log is None:
                    logger.debug(f"Dropping malformed weekly log for {row.get('email')}: {raw!r}")
                    continue
                weekly_logs.append(log)

        details = CustomDetails.from_row(row)
        return cls(
            id=row.get('id'),
            name=row.get('name'),
            email=row.get('email'),
            is_active=bool(row.get('is_active', True)),
            group=row.get('group') or None,
            employee_type=EmployeeType.parse(row.get('employee_type')),
            clockify_id=row.get('clockify_id'),
            weekly_logs=weekly_logs,
            custom_details=None if details.is_empty() else details,
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at'),
        )

    def to_row(self) -> dict:
        """Columns to write; id only when already assigned"""
        row = {
            'name': self.name,
            'email': self.email,
            'is_active': self.is_active,
            'group': self.group,
            'employee_type': self.employee_type.value,
            'clockify_id': self.clockify_id,
            'weekly_logs': [log.to_json() for log in self.weekly_logs],
        }
        row.update((self.custom_details or CustomDetails()).to_row())
        if self.id:
            row['id'] = self.id
        return row

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'is_active': self.is_active,
            'group': self.group,
            'employee_type': self.employee_type.value,
            'clockify_id': self.clockify_id,
            'weekly_logs': [log.to_json() for log in self.weekly_logs],
            'custom_details': self.custom_details.to_dict() if self.custom_details else None,
        }
