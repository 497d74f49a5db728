# routes/sample_routes.py
"""
Handles sample entry: the manual form, bulk uploads, and the upload template.
"""
import logging

from flask import Blueprint, jsonify, request, session, Response

from auth.decorators import login_required, mutation_required
from database import add_audit_log, create_samples, get_project_ids, get_samples
from exporters import render_template_csv
from extensions import socketio, ALERTS_ROOM
from validation import clean_sample, parse_upload, validate_sample

logger = logging.getLogger(__name__)

sample_bp = Blueprint('sample_bp', __name__)


def _broadcast_alerts(alerts):
    for alert in alerts:
        socketio.emit('new_alert', alert, to=ALERTS_ROOM)


def _validate_entries(entries):
    """Returns (cleaned entries, per-row errors). Rows are numbered from 1."""
    project_ids = get_project_ids()
    row_errors = []
    for index, entry in enumerate(entries, start=1):
        errors = validate_sample(entry, project_ids)
        if errors:
            row_errors.append({"row": index, "sample_code": entry.get('sample_code'), "errors": errors})
    if row_errors:
        return [], row_errors
    return [clean_sample(entry) for entry in entries], []


def _save(entries, action):
    cleaned, row_errors = _validate_entries(entries)
    if row_errors:
        return jsonify({"status": "error", "message": "Some samples failed validation.", "errors": row_errors}), 400

    try:
        samples, alerts = create_samples(cleaned)
    except Exception as e:
        logger.error("%s failed: %s", action, e)
        add_audit_log(user_id=session.get('user_id'), component='Samples', action=action,
                      target=f"{len(cleaned)} sample(s)", status='Failure', ip_address=request.remote_addr,
                      details={'error': str(e)})
        return jsonify({"status": "error", "message": str(e)}), 500

    add_audit_log(user_id=session.get('user_id'), component='Samples', action=action,
                  target=f"{len(samples)} sample(s)", status='Success', ip_address=request.remote_addr,
                  details={'alerts_raised': len(alerts)})
    _broadcast_alerts(alerts)
    return jsonify({
        "status": "success",
        "message": f"Successfully saved {len(samples)} sample(s).",
        "samples": samples,
        "alerts": alerts,
    }), 201


@sample_bp.route('/samples', methods=['GET'])
@login_required
def api_get_samples():
    """Lists samples, newest first. Optional ?project_id= narrows to one project."""
    project_id = request.args.get('project_id', type=int)
    return jsonify(get_samples(project_id))


@sample_bp.route('/samples', methods=['POST'])
@mutation_required
def api_create_sample():
    """Saves one sample from the manual entry form."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"status": "error", "message": "A JSON object is required."}), 400
    return _save([data], 'Sample Created')


@sample_bp.route('/samples/bulk', methods=['POST'])
@mutation_required
def api_create_samples_bulk():
    """
    Saves a batch of samples, all or nothing. Accepts either a JSON list of
    entries or a multipart upload of the CSV template under the 'file' field.
    """
    upload = request.files.get('file')
    if upload is not None:
        try:
            entries = parse_upload(upload.read())
        except ValueError as e:
            return jsonify({"status": "error", "message": str(e)}), 400
    else:
        entries = request.get_json(silent=True)
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            return jsonify({"status": "error", "message": "A JSON list of samples or a CSV file is required."}), 400

    if not entries:
        return jsonify({"status": "error", "message": "No data to save. Please add samples or upload a file."}), 400
    return _save(entries, 'Bulk Upload')


@sample_bp.route('/samples/template', methods=['GET'])
@login_required
def api_download_template():
    return Response(
        render_template_csv(),
        mimetype="text/csv",
        headers={"Content-disposition": "attachment; filename=AquaSure_Sample_Template.csv"}
    )
