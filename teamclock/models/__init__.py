"""Data models package"""
from .directory import ExternalUser, UserGroup, UserStatus
from .employee import CustomDetails, DailyLog, Employee, EmployeeType
from .time_entry import TimeEntry

__all__ = [
    'ExternalUser', 'UserGroup', 'UserStatus',
    'CustomDetails', 'DailyLog', 'Employee', 'EmployeeType',
    'TimeEntry',
]
