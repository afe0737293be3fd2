"""Storage adapters: relational tables and the local key-value store"""
from .cache import TTLCache
from .employee_details import EmployeeDetailsStore
from .employee_store import EmployeeStore
from .kv_store import KeyValueStore
from .time_entry_store import TimeEntryStore

__all__ = ['TTLCache', 'EmployeeDetailsStore', 'EmployeeStore', 'KeyValueStore', 'TimeEntryStore']
