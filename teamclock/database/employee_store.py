"""Create/read/update access to the employees table"""
import logging
import uuid
from typing import Dict, List, Optional

from teamclock.errors import NotFound
from teamclock.integrations.supabase_rest import SupabaseClient
from teamclock.models import Employee

logger = logging.getLogger(__name__)

TABLE = 'employees'


class EmployeeStore:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def list(self) -> List[Employee]:
        rows = self.client.select(TABLE)
        return [Employee.from_row(row) for row in rows]

    def get(self, employee_id: str) -> Employee:
        return Employee.from_row(self.client.select_single(TABLE, [('id', 'eq', employee_id)]))

    def find_by_email(self, email: str, employees: Optional[List[Employee]] = None) -> Optional[Employee]:
        """Match on email in memory; pass `employees` to reuse an earlier list()"""
        if employees is None:
            employees = self.list()
        for employee in employees:
            if employee.email == email:
                return employee
        return None

    def create(self, employee: Employee) -> Employee:
        """Insert a new row under a freshly generated id"""
        row = employee.to_row()
        row['id'] = str(uuid.uuid4())
        created = self.client.insert(TABLE, [row])
        return Employee.from_row(created[0] if created else row)

    def update(self, employee_id: str, fields: Dict) -> Employee:
        """Partial update; NotFound when no row has this id"""
        fields = {key: value for key, value in fields.items() if key != 'id'}
        rows = self.client.update(TABLE, fields, [('id', 'eq', employee_id)])
        if not rows:
            raise NotFound(f"No employee with id {employee_id}")
        return Employee.from_row(rows[0])
