"""Shared fakes for the Clockify directory, the Supabase table API and Redis."""

from __future__ import annotations

import copy
import json
import os
from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytz
import requests

os.environ.setdefault("ENVIRONMENT", "testing")

from teamclock.database import (  # noqa: E402
    EmployeeDetailsStore,
    EmployeeStore,
    KeyValueStore,
    TimeEntryStore,
    TTLCache,
)
from teamclock.errors import ConstraintViolation, NotFound  # noqa: E402
from teamclock.integrations.clockify_client import ClockifyClient  # noqa: E402
from teamclock.models import ExternalUser, UserGroup, UserStatus  # noqa: E402
from teamclock.utils import time_helpers  # noqa: E402
from teamclock.utils.time_helpers import parse_timestamp  # noqa: E402

# Saturday 22:00 in America/Chicago, already Sunday in UTC
FROZEN_UTC = datetime(2026, 10, 18, 3, 0, tzinfo=pytz.UTC)


class FakeRedis:
    """Dict-backed stand-in for the handful of Redis commands we use."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def ping(self):
        return True

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0


def _comparable(value: Any):
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            return value
    return value


def _matches(row: dict, filters) -> bool:
    for column, operator, value in filters:
        actual = row.get(column)
        if operator == "eq" and actual != value:
            return False
        if operator == "is" and actual is not value:
            return False
        if operator == "gte" and not (actual is not None and _comparable(actual) >= _comparable(value)):
            return False
        if operator == "lte" and not (actual is not None and _comparable(actual) <= _comparable(value)):
            return False
    return True


class FakeTableClient:
    """In-memory stand-in for SupabaseClient with the same method surface."""

    UNIQUE = {"employees": ("id", "email"), "time_entries": ("id",)}

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = {"employees": [], "time_entries": []}
        for name, rows in (tables or {}).items():
            self.tables[name] = [dict(row) for row in rows]
        self.calls: list[tuple[str, str]] = []

    def select(self, table, filters=(), order=None, limit=None, columns="*"):
        self.calls.append(("select", table))
        rows = [copy.deepcopy(row) for row in self.tables[table] if _matches(row, filters)]
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda row: _comparable(row.get(column)), reverse=direction == "desc")
        if limit is not None:
            rows = rows[:limit]
        return rows

    def select_single(self, table, filters=(), columns="*"):
        self.calls.append(("select_single", table))
        rows = [row for row in self.tables[table] if _matches(row, filters)]
        if len(rows) != 1:
            raise NotFound(f"{table}: The result contains {len(rows)} rows")
        return copy.deepcopy(rows[0])

    def insert(self, table, rows):
        self.calls.append(("insert", table))
        for row in rows:
            for column in self.UNIQUE.get(table, ()):
                if any(existing.get(column) == row.get(column) for existing in self.tables[table]):
                    raise ConstraintViolation(f"{table}: duplicate key value violates unique constraint on {column}")
            self.tables[table].append(copy.deepcopy(row))
        return copy.deepcopy(list(rows))

    def update(self, table, values, filters):
        self.calls.append(("update", table))
        updated = []
        for row in self.tables[table]:
            if _matches(row, filters):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table, filters):
        self.calls.append(("delete", table))
        kept = [row for row in self.tables[table] if not _matches(row, filters)]
        removed = [row for row in self.tables[table] if _matches(row, filters)]
        self.tables[table] = kept
        return removed

    def writes(self, table: str) -> list[str]:
        return [method for method, name in self.calls if name == table and method in ("insert", "update")]


class FakeDirectory:
    """Stand-in for ClockifyClient backed by plain lists."""

    group_for = staticmethod(ClockifyClient.group_for)

    def __init__(self, users=None, groups=None, entries=None, active=None):
        self.users: list[ExternalUser] = list(users or [])
        self.groups: list[UserGroup] = list(groups or [])
        self.entries: dict = dict(entries or {})
        self.active: dict = dict(active or {})
        self.failing_users: set[str] = set()
        self.calls: list[tuple[str, Any]] = []

    def get_workspaces(self):
        return [{"id": "ws1", "name": "Main"}]

    def list_users(self):
        self.calls.append(("list_users", None))
        return list(self.users)

    def list_groups(self):
        self.calls.append(("list_groups", None))
        return list(self.groups)

    def time_entries(self, user_id, start, end):
        self.calls.append(("time_entries", user_id))
        if user_id in self.failing_users:
            raise requests.ConnectionError(f"connection reset while fetching {user_id}")
        return list(self.entries.get(user_id, []))

    def active_entry(self, user_id):
        return self.active.get(user_id)

    def calls_for(self, user_id):
        return [call for call in self.calls if call[1] == user_id]


def make_user(user_id="u1", name="Ana", email="ana@x.com", status="ACTIVE") -> ExternalUser:
    return ExternalUser(id=user_id, name=name, email=email, status=UserStatus(status))


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = json.dumps(payload)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def kv_store(fake_redis) -> KeyValueStore:
    return KeyValueStore(client=fake_redis)


@pytest.fixture
def table_client() -> FakeTableClient:
    return FakeTableClient()


@pytest.fixture
def employee_store(table_client) -> EmployeeStore:
    return EmployeeStore(table_client)


@pytest.fixture
def time_entry_store(table_client) -> TimeEntryStore:
    return TimeEntryStore(table_client, timezone="UTC")


@pytest.fixture
def details_store(kv_store) -> EmployeeDetailsStore:
    return EmployeeDetailsStore(kv_store)


@pytest.fixture
def clock():
    """Controllable clock: set clock.now to move time."""

    class Clock:
        now = 1_000_000.0

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def ttl_cache(kv_store, clock) -> TTLCache:
    return TTLCache(kv_store, ttl_seconds=60, clock=clock)


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the current time used by the range helpers to FROZEN_UTC."""

    class FrozenDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            if tz is None:
                return FROZEN_UTC.replace(tzinfo=None)
            return FROZEN_UTC.astimezone(tz)

    monkeypatch.setattr(time_helpers, "datetime", FrozenDatetime)
    return FROZEN_UTC
