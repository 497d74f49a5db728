# database/sample_manager.py
"""
Manages the insertion and retrieval of heavy-metal samples.
"""
import datetime
import logging

from hmpi_engine import assess_sample
from .alerts_manager import insert_alert_for_sample
from .config import DB_LOCK, get_connection

logger = logging.getLogger(__name__)


def create_samples(entries):
    """
    Saves a batch of cleaned sample entries (see validation.clean_sample).

    HMPI and risk level are computed here, once, before the insert. Alerts for
    high and medium priority samples are written in the same transaction, so
    either the whole batch lands or nothing does.

    Returns (samples, alerts) as stored.
    """
    created_at = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    sample_ids = []
    alert_ids = []
    with DB_LOCK:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            for entry in entries:
                hmpi_value, tier = assess_sample(
                    entry['metal'], entry['concentration'],
                    entry.get('ideal_value'), entry.get('weight')
                )
                cursor.execute('''
                    INSERT INTO samples (project_id, sample_code, metal, concentration, latitude, longitude,
                                         date_collected, hmpi_value, risk_level, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ''', (
                    entry['project_id'], entry['sample_code'], entry['metal'], entry['concentration'],
                    entry['latitude'], entry['longitude'], entry['date_collected'],
                    hmpi_value, tier.level, created_at
                ))
                sample_id = cursor.lastrowid
                sample_ids.append(sample_id)

                alert_id = insert_alert_for_sample(cursor, sample_id, tier.level, created_at)
                if alert_id is not None:
                    alert_ids.append(alert_id)
            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Sample batch of %d rolled back.", len(entries))
            raise
        else:
            samples = _fetch_by_ids(conn, 'samples', sample_ids)
            alerts = _fetch_by_ids(conn, 'alerts', alert_ids)
        finally:
            conn.close()

    logger.info("Saved %d sample(s), raised %d alert(s).", len(samples), len(alerts))
    return samples, alerts


def create_sample(entry):
    """Saves one sample. Returns (sample, alert or None)."""
    samples, alerts = create_samples([entry])
    return samples[0], (alerts[0] if alerts else None)


def get_samples(project_id=None):
    """Fetches samples, newest first, optionally for one project."""
    query = 'SELECT * FROM samples'
    params = []
    if project_id is not None:
        query += ' WHERE project_id = ?'
        params.append(project_id)
    query += ' ORDER BY created_at DESC, id DESC'

    with DB_LOCK:
        conn = get_connection()
        rows = conn.execute(query, params).fetchall()
        conn.close()
    return [dict(row) for row in rows]


_ID_CHUNK = 500  # stays under SQLite's bound-parameter limit


def _fetch_by_ids(conn, table, ids):
    records = []
    for start in range(0, len(ids), _ID_CHUNK):
        chunk = ids[start:start + _ID_CHUNK]
        placeholders = ', '.join(['?'] * len(chunk))
        rows = conn.execute(
            f"SELECT * FROM {table} WHERE id IN ({placeholders}) ORDER BY id", chunk
        ).fetchall()
        records.extend(dict(row) for row in rows)
    return records
