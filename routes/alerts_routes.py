# routes/alerts_routes.py
"""
Handles all API endpoints for alert listing and the acknowledge/resolve lifecycle.
"""
from flask import Blueprint, jsonify, request, abort, session

from auth.decorators import login_required, mutation_required
from database import (
    acknowledge_alert, acknowledge_alerts, add_audit_log, get_alert_by_id, get_alerts, resolve_alert,
)
from report_builder import ALERT_FILTERS, alert_stats, filter_alerts

# A Blueprint is created to organize all alert-related routes.
alerts_bp = Blueprint('alerts_bp', __name__)


def _filter_arg():
    filter_name = request.args.get('filter', 'all')
    if filter_name not in ALERT_FILTERS:
        abort(400, f"Unknown filter '{filter_name}'.")
    return filter_name


@alerts_bp.route('/alerts', methods=['GET'])
@login_required
def api_get_alerts():
    """Lists alerts, newest first, narrowed by ?filter= (status or priority)."""
    return jsonify(filter_alerts(get_alerts(), _filter_arg()))


@alerts_bp.route('/alerts/stats', methods=['GET'])
@login_required
def api_get_alert_stats():
    return jsonify(alert_stats(get_alerts()))


@alerts_bp.route('/alerts/<int:alert_id>/acknowledge', methods=['POST'])
@mutation_required
def api_acknowledge_alert(alert_id):
    """Marks an active alert as acknowledged by the current user."""
    alert = get_alert_by_id(alert_id)
    if not alert:
        abort(404, "Alert not found.")

    if not acknowledge_alert(alert_id, session.get('user_id')):
        add_audit_log(user_id=session.get('user_id'), component='Alerts', action='Alert Acknowledged',
                      target=f"Alert ID: {alert_id}", status='Failure', ip_address=request.remote_addr,
                      details={'reason': f"status is '{alert['status']}'"})
        return jsonify({"status": "error", "message": f"Alert is already {alert['status']}."}), 409

    add_audit_log(user_id=session.get('user_id'), component='Alerts', action='Alert Acknowledged',
                  target=f"Alert ID: {alert_id}", status='Success', ip_address=request.remote_addr)
    return jsonify({"status": "success", "alert": get_alert_by_id(alert_id)})


@alerts_bp.route('/alerts/acknowledge-all', methods=['POST'])
@mutation_required
def api_acknowledge_all():
    """Acknowledges every active alert that matches the current ?filter=."""
    active = [a['id'] for a in filter_alerts(get_alerts(), _filter_arg()) if a['status'] == 'active']
    changed = acknowledge_alerts(active, session.get('user_id'))
    add_audit_log(user_id=session.get('user_id'), component='Alerts', action='Alerts Acknowledged',
                  target=f"{changed} alert(s)", status='Success', ip_address=request.remote_addr)
    return jsonify({"status": "success", "acknowledged": changed})


@alerts_bp.route('/alerts/<int:alert_id>/resolve', methods=['POST'])
@mutation_required
def api_resolve_alert(alert_id):
    alert = get_alert_by_id(alert_id)
    if not alert:
        abort(404, "Alert not found.")

    if not resolve_alert(alert_id):
        return jsonify({"status": "error", "message": "Alert is already resolved."}), 409

    add_audit_log(user_id=session.get('user_id'), component='Alerts', action='Alert Resolved',
                  target=f"Alert ID: {alert_id}", status='Success', ip_address=request.remote_addr)
    return jsonify({"status": "success", "alert": get_alert_by_id(alert_id)})
