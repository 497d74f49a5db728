# database/alerts_manager.py
"""
Manages all database operations for alerts raised on risky samples.

Lifecycle: active -> acknowledged -> resolved. An active alert may also be
resolved directly. Alerts are only created together with their sample.
"""
import datetime
import logging

from report_builder import alert_priority_for
from standards_config import RECOMMENDED_ACTIONS
from .config import DB_LOCK, get_connection

logger = logging.getLogger(__name__)

_ALERT_SELECT = '''
    SELECT
        a.*,
        s.sample_code, s.metal, s.concentration, s.hmpi_value, s.project_id,
        s.latitude, s.longitude, s.date_collected,
        p.name as project_name, p.location_district, p.location_city,
        u.name as acknowledged_by_name
    FROM alerts a
    JOIN samples s ON a.sample_id = s.id
    LEFT JOIN projects p ON s.project_id = p.id
    LEFT JOIN users u ON a.acknowledged_by = u.id
'''


def insert_alert_for_sample(cursor, sample_id, risk_level, created_at):
    """
    Writes an alert for a freshly inserted sample if its tier calls for one.
    Runs on the caller's cursor so it shares the sample's transaction.
    Returns the new alert ID, or None when no alert is raised.
    """
    priority = alert_priority_for(risk_level)
    if priority is None:
        return None
    cursor.execute('''
        INSERT INTO alerts (sample_id, priority, risk_level, status, recommended_action, created_at)
        VALUES (?, ?, ?, 'active', ?, ?)
    ''', (sample_id, priority, risk_level, RECOMMENDED_ACTIONS[priority], created_at))
    return cursor.lastrowid


def get_alerts(project_id=None):
    """Fetches alerts with their sample and project details, newest first."""
    query = _ALERT_SELECT
    params = []
    if project_id is not None:
        query += ' WHERE s.project_id = ?'
        params.append(project_id)
    query += ' ORDER BY a.created_at DESC, a.id DESC'

    with DB_LOCK:
        conn = get_connection()
        rows = conn.execute(query, params).fetchall()
        conn.close()
    return [dict(row) for row in rows]


def get_alert_by_id(alert_id):
    with DB_LOCK:
        conn = get_connection()
        row = conn.execute(_ALERT_SELECT + ' WHERE a.id = ?', (alert_id,)).fetchone()
        conn.close()
    return dict(row) if row else None


def acknowledge_alert(alert_id, user_id):
    """
    Moves an active alert to 'acknowledged'.
    Returns True if the alert changed, False if it was not active.
    """
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with DB_LOCK:
        conn = get_connection()
        cursor = conn.cursor()
        cursor.execute('''
            UPDATE alerts
            SET status = 'acknowledged',
                acknowledged_by = ?,
                acknowledged_at = ?
            WHERE id = ? AND status = 'active'
        ''', (user_id, timestamp, alert_id))
        changed = cursor.rowcount > 0
        conn.commit()
        conn.close()
    if changed:
        logger.info("Alert %s acknowledged by user %s.", alert_id, user_id)
    return changed


def acknowledge_alerts(alert_ids, user_id):
    """Acknowledges every active alert in `alert_ids`. Returns how many changed."""
    if not alert_ids:
        return 0
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with DB_LOCK:
        conn = get_connection()
        cursor = conn.cursor()
        cursor.executemany('''
            UPDATE alerts
            SET status = 'acknowledged', acknowledged_by = ?, acknowledged_at = ?
            WHERE id = ? AND status = 'active'
        ''', [(user_id, timestamp, alert_id) for alert_id in alert_ids])
        changed = cursor.rowcount
        conn.commit()
        conn.close()
    logger.info("%d alert(s) acknowledged by user %s.", changed, user_id)
    return changed


def resolve_alert(alert_id):
    """
    Updates an active or acknowledged alert to 'resolved'.
    Returns True if the alert changed.
    """
    with DB_LOCK:
        conn = get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE alerts
            SET status = 'resolved'
            WHERE id = ? AND status IN ('active', 'acknowledged')
        """, (alert_id,))
        changed = cursor.rowcount > 0
        conn.commit()
        conn.close()
    if changed:
        logger.info("Alert %s resolved.", alert_id)
    return changed
