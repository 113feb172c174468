# parkdash/web/dashboard.py
import logging
import re

from flask import Blueprint, current_app, jsonify, request, session

from .auth import require_auth
from ..stats.models import DashboardStats

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')

LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def _window_hours() -> int:
    """
    The ``hours`` query parameter, falling back to the configured default.

    Only the leading integer is read, so ``12abc`` is 12 and ``1.5`` is 1.
    """
    match = LEADING_INT.match(request.args.get('hours', ''))
    hours = int(match.group(1)) if match else None
    if not hours or hours <= 0:
        return current_app.config['DASHBOARD']['default_hours']
    return hours


@dashboard_bp.route('/')
@require_auth
def index():
    """Landing view with all-time statistics"""
    email = session['clientEmail']
    try:
        stats = current_app.aggregator.compute_stats(
            email, current_app.config['DASHBOARD']['history_hours']
        )
    except Exception as e:
        logger.error(f"Dashboard error: {str(e)}")
        stats = DashboardStats()

    return jsonify({
        'clientName': session.get('clientName') or 'User',
        'clientEmail': email,
        'stats': stats.to_dict(),
    })


@dashboard_bp.route('/api/stats')
@require_auth
def stats():
    """Get dashboard statistics for the requested window"""
    try:
        result = current_app.aggregator.compute_stats(session['clientEmail'], _window_hours())
        return jsonify(result.to_dict())
    except Exception as e:
        logger.error(f"Error fetching dashboard stats: {str(e)}")
        return jsonify({'error': 'Failed to fetch dashboard stats'}), 500


@dashboard_bp.route('/api/infractions')
@require_auth
def infractions():
    """Get the open infringement table"""
    try:
        rows = current_app.aggregator.get_infractions(session['clientEmail'], _window_hours())
        return jsonify([row.to_dict() for row in rows])
    except Exception as e:
        logger.error(f"Error fetching infraction data: {str(e)}")
        return jsonify({'error': 'Failed to fetch infraction data'}), 500


@dashboard_bp.route('/api/approve', methods=['POST'])
@require_auth
def approve():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    car_id = data.get('car_id')

    if not car_id:
        return jsonify({'success': False, 'message': 'Car ID is required'}), 400

    try:
        current_app.aggregator.approve_infraction(str(car_id))
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error approving infraction: {str(e)}")
        return jsonify({'success': False, 'message': 'Failed to approve infraction'}), 500
