# auth/decorators.py
from functools import wraps
from flask import session, jsonify

from auth.roles import can_mutate


def login_required(f):
    """
    Rejects the request with 401 unless a user is signed in.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({"status": "error", "message": "You must be signed in."}), 401
        return f(*args, **kwargs)
    return decorated_function


def mutation_required(f):
    """
    A decorator for routes that create data or change alert status.
    Signed-in users whose role cannot mutate (researchers) get 403.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({"status": "error", "message": "You must be signed in."}), 401

        if not can_mutate(session.get('user_role')):
            return jsonify({"status": "error", "message": "View-only access: your role cannot modify data."}), 403

        return f(*args, **kwargs)
    return decorated_function
