# parkdash/web/auth.py
import hmac
import logging
from functools import wraps

import bcrypt
from flask import Blueprint, current_app, jsonify, redirect, request, session, url_for

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')


def verify_password(password: str, stored_password: str) -> bool:
    """Check a password against a bcrypt hash or a legacy plain-text value"""
    if not stored_password:
        return False
    if stored_password.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode('utf-8'), stored_password.encode('utf-8'))
        except ValueError as e:
            logger.warning(f"Malformed password hash: {str(e)}")
            return False
    # Legacy accounts still carry plain-text passwords
    return hmac.compare_digest(password.encode('utf-8'), stored_password.encode('utf-8'))


def require_auth(view):
    """Redirect to the login route unless a client is logged in"""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not session.get('clientEmail'):
            return redirect(url_for('auth.login'))
        return view(*args, **kwargs)
    return wrapped


def _credentials():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    return data.get('email'), data.get('password')


@auth_bp.route('/login', methods=['GET'])
def login():
    """Tell the caller whether a login is needed"""
    if session.get('clientEmail'):
        return redirect(url_for('dashboard.index'))
    return jsonify({'error': None, 'message': 'Login required'}), 401


@auth_bp.route('/login', methods=['POST'])
def login_post():
    email, password = _credentials()

    if not (isinstance(email, str) and isinstance(password, str)) or not email or not password:
        return jsonify({'error': 'Email and password are required'}), 400

    try:
        user = current_app.store.get_client(email)
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        return jsonify({'error': 'Login error. Please try again later.'}), 500

    stored_password = (user or {}).get('password') or (user or {}).get('password_')
    if not user or not verify_password(password, stored_password):
        return jsonify({'error': 'Invalid email or password'}), 401

    session['clientEmail'] = email
    session['clientId'] = user.get('client_id')
    session['clientName'] = user.get('client_name') or 'User'
    logger.info(f"Client {email} logged in")

    return redirect(url_for('dashboard.index'))


@auth_bp.route('/logout')
def logout():
    session.clear()
    return redirect(url_for('auth.login'))
