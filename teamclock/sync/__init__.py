from .employee_sync import EmployeeSync
from .time_entry_sync import TimeEntrySync

__all__ = ['EmployeeSync', 'TimeEntrySync']
