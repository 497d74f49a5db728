# database/__init__.py
"""
This file makes the database functions available at the package level,
allowing for cleaner imports in other parts of the application.
"""

# --- Core & Setup ---
from .config import DB_LOCK, get_connection
from .setup import create_tables

# --- Users & Auth ---
from .user_manager import (
    create_user,
    get_user_by_id,
    get_user_for_login,
    hash_password,
    update_last_login,
    verify_password,
)

# --- Projects ---
from .project_manager import (
    create_project,
    get_project_by_id,
    get_project_ids,
    get_projects,
)

# --- Samples ---
from .sample_manager import (
    create_sample,
    create_samples,
    get_samples,
)

# --- Alerts ---
from .alerts_manager import (
    acknowledge_alert,
    acknowledge_alerts,
    get_alert_by_id,
    get_alerts,
    resolve_alert,
)

# --- System ---
from .audit_logger import add_audit_log, get_audit_logs
