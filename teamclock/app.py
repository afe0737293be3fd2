import logging
from datetime import datetime, timezone

import requests
from flask import Flask, jsonify

from teamclock.api import dashboard_bp
from teamclock.config import config as default_config
from teamclock.services import Services, build_services

logger = logging.getLogger(__name__)


def create_app(app_config=None, services: Services = None):
    """Create and configure the Flask application"""
    app_config = app_config or default_config

    app = Flask(__name__)
    app.config.from_object(app_config)

    if services is None:
        services = build_services(app_config)
    app.extensions['teamclock'] = services

    register_blueprints(app)
    register_error_handlers(app)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': 'teamclock',
            'local_storage': services.kv_store.available,
            'periodic_sync': services.employee_sync.is_periodic_running,
        }), 200

    return app


def register_blueprints(app):
    """Register Flask blueprints"""
    app.register_blueprint(dashboard_bp, url_prefix='/api')
    logger.info(f"Registered blueprints: {', '.join(app.blueprints)}")


def register_error_handlers(app):
    """JSON error bodies in the same shape the API routes use"""

    @app.errorhandler(requests.RequestException)
    def upstream_request_error(error):
        logger.error(f"Upstream request failed: {error}")
        return jsonify({'success': False, 'error': 'Upstream service unavailable'}), 502

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'error': 'Resource not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f'Server Error: {error}')
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    @app.errorhandler(400)
    def bad_request_error(error):
        return jsonify({'success': False, 'error': 'Bad request'}), 400
