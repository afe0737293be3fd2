# teamclock/api/dashboard.py

import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request

from teamclock.api.auth import require_api_key
from teamclock.errors import ConstraintViolation, NotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)


def get_services():
    return current_app.extensions['teamclock']


def _flag(name: str) -> bool:
    return request.args.get(name, 'false').lower() in ('1', 'true', 'yes')


def _parse_datetime(value):
    if not value:
        return None
    return datetime.fromisoformat(value)


@dashboard_bp.errorhandler(NotFound)
def handle_not_found(error):
    return jsonify({'success': False, 'error': str(error)}), 404


@dashboard_bp.errorhandler(ConstraintViolation)
def handle_constraint_violation(error):
    return jsonify({'success': False, 'error': str(error)}), 409


@dashboard_bp.errorhandler(UpstreamUnavailable)
def handle_upstream_unavailable(error):
    logger.error(f"Upstream API error: {error}")
    return jsonify({'success': False, 'error': str(error)}), 502


@dashboard_bp.route('/employees', methods=['GET'])
@require_api_key
def list_employees():
    """Employees with running-timer status (cached)"""
    employees = get_services().dashboard.load_employees(refresh=_flag('refresh'))
    return jsonify({'success': True, 'employees': employees})


@dashboard_bp.route('/time-entries', methods=['GET'])
@require_api_key
def list_time_entries():
    """Weekly and monthly entries for several employees (cached)"""
    employee_ids = [emp_id for emp_id in request.args.get('employee_ids', '').split(',') if emp_id]
    if not employee_ids:
        return jsonify({'success': False, 'error': 'employee_ids is required'}), 400

    entries = get_services().dashboard.load_time_entries(employee_ids, refresh=_flag('refresh'))
    return jsonify({'success': True, 'entries': entries})


@dashboard_bp.route('/employees/<employee_id>/time-entries', methods=['GET'])
@require_api_key
def employee_time_entries(employee_id):
    """Entries for one employee: period=week|month, or an explicit start/end"""
    store = get_services().time_entries
    period = request.args.get('period')

    if period == 'week':
        entries = store.weekly_for(employee_id)
    elif period == 'month':
        entries = store.monthly_for(employee_id)
    elif period:
        return jsonify({'success': False, 'error': 'period must be week or month'}), 400
    else:
        try:
            start = _parse_datetime(request.args.get('start'))
            end = _parse_datetime(request.args.get('end'))
        except ValueError:
            return jsonify({'success': False, 'error': 'start and end must be ISO dates'}), 400
        entries = store.list_for_employee(employee_id, start, end)

    return jsonify({
        'success': True,
        'employee_id': employee_id,
        'entries': [entry.to_dict() for entry in entries]
    })


@dashboard_bp.route('/employees/<employee_id>/active', methods=['GET'])
@require_api_key
def employee_active_entry(employee_id):
    """Running timer, uncached; callers poll this every STATUS_POLL_SECONDS"""
    entry = get_services().time_entries.active_for(employee_id)
    return jsonify({
        'success': True,
        'is_working': entry is not None,
        'active_entry': entry.to_dict() if entry else None,
        'poll_seconds': current_app.config['STATUS_POLL_SECONDS'],
    })


@dashboard_bp.route('/employees/<employee_id>/summary', methods=['GET'])
@require_api_key
def employee_summary(employee_id):
    return jsonify({'success': True, 'summary': get_services().dashboard.summary(employee_id)})


@dashboard_bp.route('/employees/<employee_id>/details', methods=['GET'])
@require_api_key
def get_employee_details(employee_id):
    details = get_services().dashboard.get_details(employee_id)
    return jsonify({'success': True, 'details': details.to_dict() if details else None})


@dashboard_bp.route('/employees/<employee_id>/details', methods=['PUT'])
@require_api_key
def save_employee_details(employee_id):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'success': False, 'error': 'JSON object body required'}), 400

    details = get_services().dashboard.save_details(employee_id, payload)
    return jsonify({'success': True, 'details': details.to_dict()})


@dashboard_bp.route('/sync', methods=['POST'])
@require_api_key
def sync_employees():
    """Run one reconciliation pass"""
    payload = request.get_json(silent=True) or {}
    force = bool(payload.get('force', False))

    try:
        stats = get_services().employee_sync.sync_employee_data(force_sync=force)
        get_services().dashboard.refresh()

        return jsonify({
            'success': True,
            'message': 'Employee sync completed',
            'stats': stats
        })

    except Exception as e:
        logger.error(f"Error in employee sync: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@dashboard_bp.route('/sync/time-entries', methods=['POST'])
@require_api_key
def sync_time_entries():
    try:
        stats = get_services().time_entry_sync.sync_all()
        get_services().dashboard.refresh()

        return jsonify({
            'success': True,
            'message': 'Time entry sync completed',
            'stats': stats
        })

    except Exception as e:
        logger.error(f"Error in time entry sync: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@dashboard_bp.route('/cache/refresh', methods=['POST'])
@require_api_key
def refresh_cache():
    get_services().dashboard.refresh()
    return jsonify({'success': True, 'message': 'Cache cleared'})
