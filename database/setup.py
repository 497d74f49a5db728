# database/setup.py
"""
Handles the initial setup of the database schema.
"""
import logging

from .config import DB_LOCK, get_connection

logger = logging.getLogger(__name__)


def create_tables():
    """
    Creates all necessary tables for the application if they don't already exist.
    This function defines the entire database schema.
    """
    with DB_LOCK:
        conn = get_connection()
        cursor = conn.cursor()

        # Table 1: User accounts. Role is one of auth.roles.Role.
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                role TEXT NOT NULL CHECK (role IN ('scientist', 'policy-maker', 'researcher')),
                hashed_password TEXT NOT NULL,
                salt TEXT NOT NULL,
                last_login TEXT,
                created_at TEXT NOT NULL
            )
        ''')

        # Table 2: Monitoring projects
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS projects (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                location_district TEXT,
                location_city TEXT,
                location_state TEXT,
                description TEXT,
                created_by INTEGER,
                created_at TEXT NOT NULL,
                FOREIGN KEY (created_by) REFERENCES users (id)
            )
        ''')

        # Table 3: Heavy-metal samples. hmpi_value and risk_level are written
        # once at insert time and never updated.
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS samples (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                project_id INTEGER NOT NULL,
                sample_code TEXT NOT NULL,
                metal TEXT NOT NULL,
                concentration REAL NOT NULL,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                date_collected TEXT NOT NULL,
                hmpi_value REAL NOT NULL,
                risk_level TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY (project_id) REFERENCES projects (id)
            )
        ''')

        # Table 4: Alerts raised for risky samples
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS alerts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sample_id INTEGER NOT NULL,
                priority TEXT NOT NULL CHECK (priority IN ('low', 'medium', 'high')),
                risk_level TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'active'
                    CHECK (status IN ('active', 'acknowledged', 'resolved')),
                recommended_action TEXT,
                acknowledged_by INTEGER,
                acknowledged_at TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (sample_id) REFERENCES samples (id),
                FOREIGN KEY (acknowledged_by) REFERENCES users (id)
            )
        ''')

        # Table 5: System-wide audit log
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                user_id INTEGER,
                component TEXT,
                action TEXT NOT NULL,
                target TEXT,
                details TEXT,
                status TEXT,
                ip_address TEXT,
                FOREIGN KEY (user_id) REFERENCES users (id)
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_samples_project ON samples (project_id)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_alerts_sample ON alerts (sample_id)')

        conn.commit()
        conn.close()
    logger.info("Database schema verified.")
