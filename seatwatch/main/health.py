"""
Health check endpoints for monitoring server status
"""
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from seatwatch.dispatch.services import get_seatwatch
from seatwatch.extensions import db

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('/')
def health_check():
    """Basic health check endpoint"""
    try:
        # Test database connection
        db.session.execute(text('SELECT 1'))

        seatwatch = get_seatwatch()
        scheduler = current_app.extensions.get('seatwatch_scheduler')

        return jsonify({
            'status': 'healthy',
            'timestamp': time.time(),
            'database': 'connected',
            'storage': current_app.config.get('SEATWATCH_STORAGE'),
            'pending_notifications': seatwatch.queue.size(),
            'scheduler': 'running' if scheduler is not None and scheduler.running else 'stopped',
            'version': '1.0.0'
        }), 200
    except Exception as e:
        current_app.logger.error(f'Health check failed: {str(e)}')
        return jsonify({
            'status': 'unhealthy',
            'timestamp': time.time(),
            'error': str(e)
        }), 500


@health_bp.route('/ready')
def readiness_check():
    """Readiness check for load balancers"""
    try:
        db.session.execute(text('SELECT 1'))

        return jsonify({
            'status': 'ready',
            'timestamp': time.time()
        }), 200
    except Exception as e:
        return jsonify({
            'status': 'not_ready',
            'timestamp': time.time(),
            'error': str(e)
        }), 503
