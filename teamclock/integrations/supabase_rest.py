# teamclock/integrations/supabase_rest.py

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import requests

from teamclock.errors import ConstraintViolation, NotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)

# (column, operator, value), e.g. ('employee_id', 'eq', 'abc') or ('end_time', 'is', None)
Filter = Tuple[str, str, object]

UNIQUE_VIOLATION = '23505'
NO_ROWS = 'PGRST116'


class SupabaseClient:
    """Client for the Supabase table API (PostgREST over HTTPS)"""

    def __init__(self, url: str, api_key: str, session: Optional[requests.Session] = None,
                 timeout: int = 30):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "accept": "application/json",
        }

    def select(self, table: str, filters: Iterable[Filter] = (), order: Optional[str] = None,
               limit: Optional[int] = None, columns: str = '*') -> List[Dict]:
        """Fetch rows matching all filters"""
        params = [('select', columns)] + self._filter_params(filters)
        if order:
            params.append(('order', order))
        if limit is not None:
            params.append(('limit', str(limit)))

        response = self.session.get(
            self._url(table), headers=self.headers, params=params, timeout=self.timeout
        )
        return self._rows(table, response)

    def select_single(self, table: str, filters: Iterable[Filter] = (), columns: str = '*') -> Dict:
        """Fetch exactly one row; NotFound when nothing matches"""
        params = [('select', columns)] + self._filter_params(filters)
        headers = dict(self.headers, accept="application/vnd.pgrst.object+json")

        response = self.session.get(
            self._url(table), headers=headers, params=params, timeout=self.timeout
        )
        self._raise_for_error(table, response)
        data = response.json()
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"Expected a single {table} row, got {type(data).__name__}")
        return data

    def insert(self, table: str, rows: Sequence[Dict]) -> List[Dict]:
        response = self.session.post(
            self._url(table),
            headers=dict(self.headers, Prefer="return=representation"),
            json=list(rows),
            timeout=self.timeout,
        )
        return self._rows(table, response)

    def update(self, table: str, values: Dict, filters: Iterable[Filter]) -> List[Dict]:
        """Patch matching rows and return them (empty when nothing matched)"""
        response = self.session.patch(
            self._url(table),
            headers=dict(self.headers, Prefer="return=representation"),
            params=self._filter_params(filters),
            json=values,
            timeout=self.timeout,
        )
        return self._rows(table, response)

    def delete(self, table: str, filters: Iterable[Filter]) -> List[Dict]:
        response = self.session.delete(
            self._url(table),
            headers=dict(self.headers, Prefer="return=representation"),
            params=self._filter_params(filters),
            timeout=self.timeout,
        )
        return self._rows(table, response)

    def _url(self, table: str) -> str:
        return f"{self.base_url}/{table}"

    @staticmethod
    def _filter_params(filters: Iterable[Filter]) -> List[Tuple[str, str]]:
        params = []
        for column, operator, value in filters:
            if value is None:
                value = 'null'
            elif isinstance(value, bool):
                value = 'true' if value else 'false'
            params.append((column, f"{operator}.{value}"))
        return params

    def _rows(self, table: str, response: requests.Response) -> List[Dict]:
        self._raise_for_error(table, response)
        data = response.json()
        if not isinstance(data, list):
            raise UpstreamUnavailable(f"Invalid response format from {table} table")
        return data

    @staticmethod
    def _raise_for_error(table: str, response: requests.Response):
        if response.status_code < 400:
            return

        try:
            error = response.json()
        except ValueError:
            error = {}
        if not isinstance(error, dict):
            error = {}

        code = error.get('code')
        message = error.get('message') or response.text

        if code == UNIQUE_VIOLATION or response.status_code == 409:
            raise ConstraintViolation(f"{table}: {message}")
        if code == NO_ROWS:
            raise NotFound(f"{table}: {message}")

        logger.error(f"Supabase request on {table} failed: {response.status_code} {message}")
        response.raise_for_status()
