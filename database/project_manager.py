# database/project_manager.py
"""
Manages database operations for monitoring projects.
"""
import datetime
import logging
import sqlite3

from .config import DB_LOCK, get_connection

logger = logging.getLogger(__name__)


def create_project(data, created_by=None):
    """Inserts a project and returns it as stored."""
    created_at = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with DB_LOCK:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO projects (name, location_district, location_city, location_state, description, created_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (
                data['name'],
                data.get('location_district'),
                data.get('location_city'),
                data.get('location_state'),
                data.get('description'),
                created_by,
                created_at
            ))
            conn.commit()
            new_id = cursor.lastrowid
            row = conn.execute('SELECT * FROM projects WHERE id = ?', (new_id,)).fetchone()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()
    logger.info("Project %s ('%s') created.", new_id, data['name'])
    return dict(row)


def get_projects(search=None):
    """
    Fetches all projects, newest first. `search` matches name, city or
    district, case-insensitively.
    """
    query = 'SELECT * FROM projects'
    params = []
    if search:
        query += '''
            WHERE LOWER(name) LIKE ? OR LOWER(COALESCE(location_city, '')) LIKE ?
               OR LOWER(COALESCE(location_district, '')) LIKE ?
        '''
        pattern = f"%{search.lower()}%"
        params.extend([pattern, pattern, pattern])
    query += ' ORDER BY created_at DESC, id DESC'

    with DB_LOCK:
        conn = get_connection()
        rows = conn.execute(query, params).fetchall()
        conn.close()
    return [dict(row) for row in rows]


def get_project_by_id(project_id):
    """Fetches a single project by its ID."""
    with DB_LOCK:
        conn = get_connection()
        row = conn.execute('SELECT * FROM projects WHERE id = ?', (project_id,)).fetchone()
        conn.close()
    return dict(row) if row else None


def get_project_ids():
    """The set of existing project IDs, used to validate sample entries."""
    with DB_LOCK:
        conn = get_connection()
        rows = conn.execute('SELECT id FROM projects').fetchall()
        conn.close()
    return {row['id'] for row in rows}
