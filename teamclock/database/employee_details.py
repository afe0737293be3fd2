"""Hand-entered employee details kept in local storage"""
import json
import logging
from typing import Dict, Optional

from teamclock.database.kv_store import EMPLOYEE_DETAILS_KEY, KeyValueStore
from teamclock.models import CustomDetails

logger = logging.getLogger(__name__)


class EmployeeDetailsStore:
    """All details live under one key as a JSON object keyed by employee id"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_all(self) -> Dict[str, CustomDetails]:
        return {
            employee_id: CustomDetails.from_dict(details)
            for employee_id, details in self._load().items()
        }

    def get(self, employee_id: str) -> Optional[CustomDetails]:
        details = self._load().get(employee_id)
        if details is None:
            return None
        return CustomDetails.from_dict(details)

    def save(self, employee_id: str, details: Dict) -> CustomDetails:
        """Merge `details` into whatever is stored for the employee"""
        current = self._load()
        merged = dict(current.get(employee_id, {}))
        merged.update(
            (key, value) for key, value in details.items()
            if key in CustomDetails.__dataclass_fields__
        )
        current[employee_id] = merged
        self.store.set(EMPLOYEE_DETAILS_KEY, json.dumps(current))
        return CustomDetails.from_dict(merged)

    def clear(self, employee_id: str):
        current = self._load()
        if employee_id not in current:
            return
        del current[employee_id]
        self.store.set(EMPLOYEE_DETAILS_KEY, json.dumps(current))

    def _load(self) -> Dict[str, Dict]:
        raw = self.store.get(EMPLOYEE_DETAILS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"Stored employee details are not valid JSON: {e}")
            return {}
        return data if isinstance(data, dict) else {}
