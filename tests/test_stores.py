"""EmployeeStore and TimeEntryStore tests against the in-memory table client."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from teamclock.database import TimeEntryStore
from teamclock.errors import ConstraintViolation, NotFound
from teamclock.models import Employee, EmployeeType, TimeEntry


def make_entry(external_id="ce-1", employee_id="emp-1", start="2026-10-20T09:00:00+00:00",
               end="2026-10-20T10:30:00+00:00", duration="PT1H30M", description="Design review"):
    return TimeEntry(
        employee_id=employee_id,
        external_id=external_id,
        description=description,
        start_time=datetime.fromisoformat(start),
        end_time=datetime.fromisoformat(end) if end else None,
        duration=duration,
        billable=True,
    )


class TestEmployeeStore:
    def test_create_assigns_new_id(self, employee_store, table_client) -> None:
        created = employee_store.create(Employee(name="Ana", email="ana@x.com", id="ignored"))

        assert created.id and created.id != "ignored"
        assert table_client.tables["employees"][0]["id"] == created.id
        assert created.employee_type == EmployeeType.FULLTIME

    def test_create_duplicate_email_is_rejected(self, employee_store) -> None:
        employee_store.create(Employee(name="Ana", email="ana@x.com"))

        with pytest.raises(ConstraintViolation):
            employee_store.create(Employee(name="Ana 2", email="ana@x.com"))

    def test_update_partial_fields(self, employee_store) -> None:
        created = employee_store.create(Employee(name="Ana", email="ana@x.com", group="Ops"))

        updated = employee_store.update(created.id, {"name": "Ana Lima", "id": "hijack"})

        assert updated.id == created.id
        assert updated.name == "Ana Lima"
        assert updated.group == "Ops"

    def test_update_unknown_id(self, employee_store) -> None:
        with pytest.raises(NotFound):
            employee_store.update("missing", {"name": "Nobody"})

    def test_get_and_find_by_email(self, employee_store) -> None:
        created = employee_store.create(Employee(name="Ana", email="ana@x.com"))
        employee_store.create(Employee(name="Ben", email="ben@x.com"))

        assert employee_store.get(created.id).email == "ana@x.com"
        assert employee_store.find_by_email("ben@x.com").name == "Ben"
        assert employee_store.find_by_email("nobody@x.com") is None
        with pytest.raises(NotFound):
            employee_store.get("missing")

    def test_malformed_weekly_logs_are_dropped(self, table_client, employee_store) -> None:
        table_client.tables["employees"].append({
            "id": "emp-1", "name": "Ana", "email": "ana@x.com", "is_active": True,
            "employee_type": None,
            "weekly_logs": [
                {"date": "2026-10-19T09:00:00Z", "loginTime": "2026-10-19T09:00:00Z",
                 "logoutTime": "2026-10-19T17:00:00Z"},
                {"date": "yesterday"},
                "junk",
            ],
        })

        employee = employee_store.list()[0]

        assert len(employee.weekly_logs) == 1
        assert employee.employee_type == EmployeeType.FULLTIME
        assert employee.custom_details is None

    def test_missing_active_column_defaults_to_active(self, table_client, employee_store) -> None:
        table_client.tables["employees"].append({"id": "emp-1", "name": "Ana", "email": "ana@x.com"})
        table_client.tables["employees"].append(
            {"id": "emp-2", "name": "Ben", "email": "ben@x.com", "is_active": False}
        )

        employees = {employee.id: employee for employee in employee_store.list()}

        assert employees["emp-1"].is_active is True
        assert employees["emp-2"].is_active is False


class TestTimeEntryUpsert:
    """Upsert is keyed on the Clockify entry id."""

    def test_second_upsert_updates_single_row(self, time_entry_store, table_client) -> None:
        time_entry_store.upsert(make_entry(end=None, duration=None))
        time_entry_store.upsert(make_entry(description="Design review (done)"))

        rows = table_client.tables["time_entries"]
        assert len(rows) == 1
        assert rows[0]["description"] == "Design review (done)"
        assert rows[0]["duration"] == "PT1H30M"
        assert rows[0]["end_time"] == "2026-10-20T10:30:00+00:00"

    def test_insert_generates_row_id(self, time_entry_store, table_client) -> None:
        first = time_entry_store.upsert(make_entry("ce-1"))
        second = time_entry_store.upsert(make_entry("ce-2"))

        assert first.id != second.id
        assert first.id != "ce-1"
        assert {row["clockify_entry_id"] for row in table_client.tables["time_entries"]} == {"ce-1", "ce-2"}

    def test_update_keeps_row_id(self, time_entry_store) -> None:
        first = time_entry_store.upsert(make_entry())
        second = time_entry_store.upsert(make_entry(description="changed"))

        assert second.id == first.id
        assert second.description == "changed"


class TestTimeEntryQueries:
    def test_list_for_employee_filters_and_orders(self, time_entry_store) -> None:
        time_entry_store.upsert(make_entry("ce-1", start="2026-10-05T09:00:00+00:00"))
        time_entry_store.upsert(make_entry("ce-2", start="2026-10-20T09:00:00+00:00"))
        time_entry_store.upsert(make_entry("ce-3", start="2026-10-21T09:00:00+00:00"))
        time_entry_store.upsert(make_entry("ce-4", employee_id="emp-2"))

        entries = time_entry_store.list_for_employee(
            "emp-1",
            start=datetime(2026, 10, 18, tzinfo=timezone.utc),
            end=datetime(2026, 10, 24, 23, 59, tzinfo=timezone.utc),
        )

        assert [entry.external_id for entry in entries] == ["ce-3", "ce-2"]

    def test_weekly_and_monthly(self, time_entry_store) -> None:
        time_entry_store.upsert(make_entry("ce-1", start="2026-10-05T09:00:00+00:00"))
        time_entry_store.upsert(make_entry("ce-2", start="2026-10-20T09:00:00+00:00"))
        now = datetime(2026, 10, 21, 12, 0)

        assert [e.external_id for e in time_entry_store.weekly_for("emp-1", now)] == ["ce-2"]
        assert [e.external_id for e in time_entry_store.monthly_for("emp-1", now)] == ["ce-2", "ce-1"]

    def test_active_for_running_entry(self, time_entry_store) -> None:
        time_entry_store.upsert(make_entry("ce-1"))
        time_entry_store.upsert(make_entry("ce-2", end=None, duration=None))

        active = time_entry_store.active_for("emp-1")

        assert active is not None
        assert active.external_id == "ce-2"
        assert active.is_running

    def test_active_for_without_running_entry(self, time_entry_store) -> None:
        time_entry_store.upsert(make_entry("ce-1"))

        assert time_entry_store.active_for("emp-1") is None

    def test_active_for_propagates_other_errors(self) -> None:
        client = MagicMock()
        client.select_single.side_effect = requests.HTTPError("500 Error")

        with pytest.raises(requests.HTTPError):
            TimeEntryStore(client).active_for("emp-1")

    def test_current_week_uses_store_timezone(self, table_client, frozen_now) -> None:
        store = TimeEntryStore(table_client, timezone="America/Chicago")
        # Friday afternoon in Chicago, in the week that is still current there
        store.upsert(make_entry("ce-1", start="2026-10-16T20:00:00+00:00"))
        # Sunday noon in Chicago, next week
        store.upsert(make_entry("ce-2", start="2026-10-18T17:00:00+00:00"))

        assert [entry.external_id for entry in store.weekly_for("emp-1")] == ["ce-1"]
        assert [entry.external_id for entry in store.monthly_for("emp-1")] == ["ce-2", "ce-1"]
