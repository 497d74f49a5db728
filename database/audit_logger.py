# database/audit_logger.py
"""
Handles all database operations for the system audit log.
"""
import json
from datetime import datetime
from .config import DB_LOCK, get_connection

def add_audit_log(user_id, component, action, status, ip_address, target=None, details=None):
    """
    Adds a new entry to the audit log.

    Args:
        user_id (int or None): The ID of the user performing the action (None for system actions).
        component (str): The part of the system being affected (e.g., 'Samples').
        action (str): A description of the action (e.g., 'Bulk Upload').
        status (str): The outcome of the action ('Success' or 'Failure').
        ip_address (str): The originating IP address.
        target (str, optional): The object the action was performed on (e.g., an alert ID).
        details (dict, optional): A dictionary of extra details to be stored as JSON.
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    details_json = json.dumps(details) if details else None

    with DB_LOCK:
        conn = get_connection()
        conn.execute(
            """INSERT INTO audit_log (timestamp, user_id, component, action, target, status, ip_address, details)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (timestamp, user_id, component, action, target, status, ip_address, details_json)
        )
        conn.commit()
        conn.close()

def get_audit_logs(component=None, action=None):
    """
    Retrieves audit entries, newest first, with the acting user's name.
    `component` and `action` narrow the result by exact match.
    """
    query = """
        SELECT a.timestamp, a.action, a.target, a.status, a.ip_address, a.details,
               a.component, COALESCE(u.name, 'System') as user_name
        FROM audit_log a
        LEFT JOIN users u ON a.user_id = u.id
    """
    clauses = []
    params = []
    if component:
        clauses.append("a.component = ?")
        params.append(component)
    if action:
        clauses.append("a.action = ?")
        params.append(action)
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY a.timestamp DESC, a.id DESC"

    with DB_LOCK:
        conn = get_connection()
        rows = conn.execute(query, params).fetchall()
        conn.close()
    return [dict(row) for row in rows]
