"""Shared API key check for the dashboard routes"""
import hmac
import logging
from functools import wraps

from flask import current_app, g, jsonify, request

logger = logging.getLogger(__name__)

API_KEY_HEADER = 'X-API-Key'


def _presented_key():
    # Header wins over the query parameter
    return request.headers.get(API_KEY_HEADER) or request.args.get('api_key')


def require_api_key(view):
    """Reject the request with 401 unless it carries the configured API key"""
    @wraps(view)
    def wrapper(*args, **kwargs):
        presented = _presented_key()
        if not presented:
            return jsonify({'error': 'API key required'}), 401

        expected = current_app.config['API_KEY']
        if not hmac.compare_digest(presented.encode(), expected.encode()):
            logger.warning(f"Rejected API key for {request.method} {request.path}")
            return jsonify({'error': 'Invalid API key'}), 401

        g.api_key = presented
        return view(*args, **kwargs)

    return wrapper
