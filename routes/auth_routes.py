# routes/auth_routes.py
"""
Handles sign-up, sign-in and sign-out. The session carries the user's id,
name and role; everything else asks auth.decorators about it.
"""
from flask import Blueprint, jsonify, request, session

from auth.decorators import login_required
from auth.roles import ROLE_DESCRIPTIONS, can_mutate
from database import (
    add_audit_log, create_user, get_user_by_id, get_user_for_login,
    update_last_login, verify_password,
)

auth_bp = Blueprint('auth_bp', __name__)

MIN_PASSWORD_LENGTH = 6


def _start_session(user):
    session.clear()
    session['user_id'] = user['id']
    session['user_name'] = user['name']
    session['user_role'] = user['role']


@auth_bp.route('/auth/roles', methods=['GET'])
def api_get_roles():
    """Lists the roles offered on the sign-up form."""
    return jsonify([
        {"value": role.value, "description": description}
        for role, description in ROLE_DESCRIPTIONS.items()
    ])


@auth_bp.route('/auth/signup', methods=['POST'])
def api_signup():
    """Creates an account and signs the new user in."""
    data = request.get_json(silent=True) or {}
    name, email, password, role = (data.get(k) for k in ('name', 'email', 'password', 'role'))

    if not all([name, email, password, role]):
        return jsonify({"status": "error", "message": "name, email, password and role are required."}), 400
    if not all(isinstance(value, str) for value in (name, email, password, role)):
        return jsonify({"status": "error", "message": "name, email, password and role must be strings."}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"status": "error", "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."}), 400

    try:
        user_id = create_user(name, email, password, role)
    except ValueError as e:
        add_audit_log(user_id=None, component='Security', action='Sign Up', target=f"Email: {email}",
                      status='Failure', ip_address=request.remote_addr, details={'error': str(e)})
        return jsonify({"status": "error", "message": str(e)}), 400

    user = get_user_by_id(user_id)
    _start_session(user)
    add_audit_log(user_id=user_id, component='Security', action='Sign Up', target=f"Email: {email}",
                  status='Success', ip_address=request.remote_addr)
    return jsonify({"status": "success", "user": user}), 201


@auth_bp.route('/auth/signin', methods=['POST'])
def api_signin():
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password') or ''
    user = get_user_for_login(email)

    if user and isinstance(password, str) and verify_password(user['hashed_password'], password, user['salt']):
        update_last_login(user['id'])
        _start_session(user)
        add_audit_log(user_id=user['id'], component='Security', action='Sign In Success',
                      target=f"Email: {email}", status='Success', ip_address=request.remote_addr)
        return jsonify({"status": "success", "user": get_user_by_id(user['id'])})

    add_audit_log(user_id=user['id'] if user else None, component='Security', action='Sign In Attempt Failed',
                  target=f"Email: {email}", status='Failure', ip_address=request.remote_addr,
                  details={'reason': 'Invalid credentials'})
    return jsonify({"status": "error", "message": "Invalid email or password."}), 401


@auth_bp.route('/auth/signout', methods=['POST'])
def api_signout():
    user_id = session.get('user_id')
    session.clear()
    if user_id:
        add_audit_log(user_id=user_id, component='Security', action='Sign Out',
                      status='Success', ip_address=request.remote_addr)
    return jsonify({"status": "success"})


@auth_bp.route('/auth/me', methods=['GET'])
@login_required
def api_current_user():
    """The signed-in user's profile and whether they may modify data."""
    user = get_user_by_id(session['user_id'])
    if not user:
        session.clear()
        return jsonify({"status": "error", "message": "You must be signed in."}), 401
    user['can_mutate'] = can_mutate(user['role'])
    return jsonify(user)
