# database/user_manager.py
"""
Manages all database operations related to users and authentication.
"""
import sqlite3
import hashlib
import os
import datetime
import logging

from auth.roles import parse_role
from .config import DB_LOCK, get_connection

logger = logging.getLogger(__name__)

# --- Password Hashing Functions ---

def hash_password(password, salt=None):
    """
    Hashes a password with a salt. Generates a new salt if one isn't provided.
    Returns the hashed password and the salt used.
    """
    if salt is None:
        salt = os.urandom(16).hex()
    salted_password = password.encode('utf-8') + salt.encode('utf-8')
    hashed_password = hashlib.sha256(salted_password).hexdigest()
    return hashed_password, salt

def verify_password(stored_hashed_password, provided_password, salt):
    """
    Verifies a provided password against a stored hash and salt.
    """
    hashed_password, _ = hash_password(provided_password, salt)
    return hashed_password == stored_hashed_password

# --- User Management Functions ---

def create_user(name, email, password, role):
    """
    Registers a new user and returns the new user's ID.
    Raises ValueError for an unknown role or an email that is already taken.
    """
    role_enum = parse_role(role)
    if role_enum is None:
        raise ValueError(f"Role '{role}' not found.")

    hashed_pass, salt = hash_password(password)
    created_at = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with DB_LOCK:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO users (name, email, role, hashed_password, salt, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                (name, email, role_enum.value, hashed_pass, salt, created_at)
            )
            new_user_id = cursor.lastrowid
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise ValueError(f"An account with email '{email}' already exists.")
        finally:
            conn.close()
    logger.info("User '%s' created with role '%s'.", email, role_enum.value)
    return new_user_id

def get_user_for_login(email):
    """
    Retrieves essential user details for the sign-in process.
    """
    with DB_LOCK:
        conn = get_connection()
        row = conn.execute(
            "SELECT id, name, email, role, hashed_password, salt FROM users WHERE email = ?",
            (email,)
        ).fetchone()
        conn.close()
    return dict(row) if row else None

def get_user_by_id(user_id):
    """Fetches a user's public profile (no password fields)."""
    with DB_LOCK:
        conn = get_connection()
        row = conn.execute(
            "SELECT id, name, email, role, last_login, created_at FROM users WHERE id = ?",
            (user_id,)
        ).fetchone()
        conn.close()
    return dict(row) if row else None

def update_last_login(user_id):
    """
    Updates the 'last_login' timestamp for a specific user to the current time.
    """
    current_timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with DB_LOCK:
        conn = get_connection()
        conn.execute("UPDATE users SET last_login = ? WHERE id = ?", (current_timestamp, user_id))
        conn.commit()
        conn.close()
