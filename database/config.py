# database/config.py
"""
Centralized configuration for the database.
"""
import sqlite3
import threading

import config

# --- Centralized Configuration ---

# The file path for the SQLite database. Tests point this at a temporary file.
DB_PATH = config.DB_PATH

# A thread lock to prevent race conditions during concurrent database writes.
DB_LOCK = threading.Lock()


def get_connection():
    """Opens a connection to the current DB_PATH with name-addressable rows."""
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
