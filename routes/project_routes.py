# routes/project_routes.py
"""
Handles all API endpoints for monitoring projects.
"""
import logging

from flask import Blueprint, jsonify, request, abort, session

from auth.decorators import login_required, mutation_required
from database import add_audit_log, create_project, get_alerts, get_project_by_id, get_projects, get_samples
from report_builder import project_stats

logger = logging.getLogger(__name__)

project_bp = Blueprint('project_bp', __name__)

REQUIRED_PROJECT_FIELDS = ('name', 'location_district', 'location_city')


@project_bp.route('/projects', methods=['GET'])
@login_required
def api_get_projects():
    """Lists projects, newest first, each with its card statistics."""
    projects = get_projects(request.args.get('search', '').strip() or None)
    samples = get_samples()
    alerts = get_alerts()
    for project in projects:
        project_samples = [s for s in samples if s['project_id'] == project['id']]
        project_alerts = [a for a in alerts if a['project_id'] == project['id']]
        project['stats'] = project_stats(project_samples, project_alerts)
    return jsonify(projects)


@project_bp.route('/projects/<int:project_id>', methods=['GET'])
@login_required
def api_get_project(project_id):
    project = get_project_by_id(project_id)
    if not project:
        abort(404, "Project not found.")
    project['stats'] = project_stats(get_samples(project_id), get_alerts(project_id))
    return jsonify(project)


@project_bp.route('/projects', methods=['POST'])
@mutation_required
def api_create_project():
    data = request.get_json(silent=True) or {}
    missing = [field for field in REQUIRED_PROJECT_FIELDS if not str(data.get(field) or '').strip()]
    if missing:
        return jsonify({"status": "error", "message": f"Missing required fields: {', '.join(missing)}"}), 400

    try:
        project = create_project(data, created_by=session.get('user_id'))
        add_audit_log(user_id=session.get('user_id'), component='Projects', action='Project Created',
                      target=f"Name: {data.get('name')}", status='Success', ip_address=request.remote_addr)
        return jsonify({"status": "success", "project": project}), 201
    except Exception as e:
        logger.error("Project creation failed: %s", e)
        add_audit_log(user_id=session.get('user_id'), component='Projects', action='Project Created',
                      target=f"Name: {data.get('name')}", status='Failure', ip_address=request.remote_addr,
                      details={'error': str(e)})
        return jsonify({"status": "error", "message": str(e)}), 500
