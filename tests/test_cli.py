"""Command line entry point tests."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from teamclock import cli
from teamclock.config import TestingConfig
from teamclock.database import KeyValueStore
from teamclock.errors import ConfigurationError
from teamclock.services import build_services

from .conftest import FakeRedis


@pytest.fixture
def services() -> MagicMock:
    services = MagicMock()
    services.employee_sync.sync_employee_data.return_value = {"created": 1, "updated": 0, "failed": 0}
    services.time_entry_sync.sync_all.return_value = {"synced": 2, "entries": 5, "failed": 0}
    return services


@pytest.fixture
def run(services):
    def _run(*argv):
        with patch.object(cli, "configure_logging"), \
                patch.object(cli, "build_services", return_value=services):
            return cli.main(list(argv))
    return _run


class TestCommands:
    def test_sync(self, run, services, capsys) -> None:
        assert run("sync") == 0
        services.employee_sync.sync_employee_data.assert_called_once_with(force_sync=False)
        assert "Created: 1" in capsys.readouterr().out

    def test_forced_sync(self, run, services) -> None:
        assert run("sync", "--force") == 0
        services.employee_sync.sync_employee_data.assert_called_once_with(force_sync=True)

    def test_sync_error_exits_nonzero(self, run, services) -> None:
        services.employee_sync.sync_employee_data.side_effect = RuntimeError("boom")
        assert run("sync") == 1

    def test_sync_entries_with_failures(self, run, services) -> None:
        assert run("sync-entries") == 0
        services.time_entry_sync.sync_all.return_value = {"synced": 1, "entries": 2, "failed": 1}
        assert run("sync-entries") == 1

    def test_workspaces(self, run, services, capsys) -> None:
        services.directory.get_workspaces.return_value = [{"id": "ws1", "name": "Main"}]
        assert run("workspaces") == 0
        assert "ID: ws1" in capsys.readouterr().out

    def test_startup_failure(self) -> None:
        with patch.object(cli, "configure_logging"), \
                patch.object(cli, "build_services", side_effect=ConfigurationError("Missing configuration")):
            assert cli.main(["sync"]) == 1


class TestPeriodic:
    def test_interrupt_stops_cleanly(self, services) -> None:
        with patch.object(cli.time, "sleep", side_effect=KeyboardInterrupt):
            assert cli.run_periodic(services, 15) == 0

        services.employee_sync.start_periodic_sync.assert_called_once_with(15)
        services.employee_sync.scheduler.run_pending.assert_called_once()
        services.employee_sync.stop_periodic_sync.assert_called_once()

    def test_start_failure(self, services) -> None:
        services.employee_sync.start_periodic_sync.side_effect = RuntimeError("directory down")

        assert cli.run_periodic(services, 15) == 1
        services.employee_sync.scheduler.run_pending.assert_not_called()


class TestBuildServices:
    def test_missing_credentials(self) -> None:
        settings = TestingConfig()
        settings.SUPABASE_SERVICE_ROLE_KEY = None

        with pytest.raises(ConfigurationError, match="SUPABASE_SERVICE_ROLE_KEY"):
            build_services(settings)

    def test_wires_adapters(self) -> None:
        services = build_services(TestingConfig(), kv_store=KeyValueStore(client=FakeRedis()))

        assert services.employee_sync.employees is services.employees
        assert services.dashboard.time_entries is services.time_entries
        assert services.time_entry_sync.delay_seconds == 0.0
        assert services.employees.client.base_url == "http://supabase.test/rest/v1"
