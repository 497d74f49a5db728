# routes/report_routes.py
"""
Handles the report screen's data and its CSV / PDF downloads.
Every endpoint accepts ?project_id= to scope the report to one project.
"""
from datetime import date

from flask import Blueprint, jsonify, request, abort, send_file, Response

from auth.decorators import login_required
from database import get_project_by_id, get_projects, get_samples
from exporters import render_csv, render_pdf
from report_builder import build_report

report_bp = Blueprint('report_bp', __name__)


def _report_for_request():
    """Builds the report for the requested scope, 404 for an unknown project."""
    project_id = request.args.get('project_id', type=int)
    project = None
    if project_id is not None:
        project = get_project_by_id(project_id)
        if not project:
            abort(404, "Project not found.")
    return build_report(get_samples(project_id), get_projects(), project=project), project_id


def _export_name(project_id, extension):
    scope = project_id if project_id is not None else 'all'
    return f"AquaSure_Report_{scope}_{date.today().isoformat()}.{extension}"


@report_bp.route('/reports/summary', methods=['GET'])
@login_required
def api_report_summary():
    report, _ = _report_for_request()
    return jsonify(report)


@report_bp.route('/reports/export.csv', methods=['GET'])
@login_required
def api_export_csv():
    report, project_id = _report_for_request()
    return Response(
        render_csv(report),
        mimetype="text/csv",
        headers={"Content-disposition": f"attachment; filename={_export_name(project_id, 'csv')}"}
    )


@report_bp.route('/reports/export.pdf', methods=['GET'])
@login_required
def api_export_pdf():
    report, project_id = _report_for_request()
    return send_file(
        render_pdf(report),
        as_attachment=True,
        download_name=_export_name(project_id, 'pdf'),
        mimetype='application/pdf'
    )
