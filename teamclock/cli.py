#!/usr/bin/env python3
"""
Command line entry point
- sync:          one reconciliation pass (--force refreshes existing employees)
- periodic:      unforced pass now, forced pass every --interval minutes until Ctrl+C
- sync-entries:  copy this week's Clockify time entries into Supabase
- workspaces:    list the Clockify workspaces the API key can see
- serve:         run the dashboard HTTP API
"""
import argparse
import logging
import sys
import time

from teamclock.config import config
from teamclock.logging_config import configure_logging
from teamclock.services import build_services

logger = logging.getLogger(__name__)

SCHEDULER_POLL_SECONDS = 30


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='teamclock', description='Employee directory sync')
    subparsers = parser.add_subparsers(dest='command', required=True)

    sync_parser = subparsers.add_parser('sync', help='Run one reconciliation pass')
    sync_parser.add_argument('--force', action='store_true',
                             help='Overwrite employees that already exist')

    periodic_parser = subparsers.add_parser('periodic', help='Sync on a fixed interval')
    periodic_parser.add_argument('--interval', type=int, default=config.SYNC_INTERVAL_MINUTES,
                                 help='Minutes between passes (default: %(default)s)')

    subparsers.add_parser('sync-entries', help="Sync this week's time entries")
    subparsers.add_parser('workspaces', help='List Clockify workspaces')
    subparsers.add_parser('serve', help='Run the dashboard API')
    return parser


def run_periodic(services, interval_minutes: int) -> int:
    employee_sync = services.employee_sync
    try:
        employee_sync.start_periodic_sync(interval_minutes)
    except Exception as e:
        logger.error(f"Failed to start sync service: {e}", exc_info=True)
        return 1

    logger.info("Employee sync service started successfully")
    logger.info("Press Ctrl+C to stop the sync service")

    # Keep running
    while True:
        try:
            employee_sync.scheduler.run_pending()
            time.sleep(SCHEDULER_POLL_SECONDS)
        except KeyboardInterrupt:
            logger.info("Stopping sync service...")
            employee_sync.stop_periodic_sync()
            return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)

    try:
        services = build_services(config)
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        return 1

    try:
        if args.command == 'sync':
            stats = services.employee_sync.sync_employee_data(force_sync=args.force)
            print(f"Created: {stats['created']}  Updated: {stats['updated']}  Failed: {stats['failed']}")
            return 0

        if args.command == 'periodic':
            return run_periodic(services, args.interval)

        if args.command == 'sync-entries':
            stats = services.time_entry_sync.sync_all()
            print(f"Employees: {stats['synced']}  Entries: {stats['entries']}  Failed: {stats['failed']}")
            return 0 if not stats['failed'] else 1

        if args.command == 'workspaces':
            workspaces = services.directory.get_workspaces()
            print("Available workspaces:")
            for idx, workspace in enumerate(workspaces, 1):
                print(f"{idx}. ID: {workspace.get('id')}")
                print(f"   Name: {workspace.get('name')}")
                print("---")
            return 0

        if args.command == 'serve':
            from teamclock.app import create_app
            app = create_app(config, services)
            app.run(host=config.HOST, port=config.PORT, debug=getattr(config, 'DEBUG', False))
            return 0

    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
