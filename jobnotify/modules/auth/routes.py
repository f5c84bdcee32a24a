"""
Auth Routes
===========

Minimal operator authentication backed by the entity store's User table.

- POST /api/register -- create an operator account and sign in
- POST /api/login    -- sign in
- POST /api/logout   -- sign out
- GET  /api/user     -- current operator
"""

import logging
from flask import request, jsonify, session

from . import auth_bp
from .utils import hash_password, verify_password, public_user, login_required
from ...core import get_storage, db_log, LoggingService, DuplicateEntity

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an operator account"""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password are required'}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({'error': f'Password must be at least {MIN_PASSWORD_LENGTH} characters long'}), 400

    storage = get_storage()
    try:
        user = storage.create_user({'username': username, 'password': hash_password(password)})
    except DuplicateEntity:
        return jsonify({'error': 'Username already exists'}), 400

    session['user_id'] = user['id']
    session['username'] = user['username']

    logger.info(f"Registered operator: {username}")
    LoggingService.log_user_action('auth', 'register', user_id=user['id'], details={'username': username})
    return jsonify(public_user(user)), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Operator login"""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password are required'}), 400

    user = get_storage().get_user_by_username(username)
    if not user or not verify_password(password, user.get('password')):
        db_log('warning', 'auth', 'Failed login attempt', {'username': username})
        return jsonify({'error': 'Invalid username or password'}), 401

    session['user_id'] = user['id']
    session['username'] = user['username']
    LoggingService.log_user_action('auth', 'login', user_id=user['id'], details={'username': username})
    return jsonify(public_user(user)), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Operator logout"""
    session.pop('user_id', None)
    session.pop('username', None)
    return jsonify({'message': 'Logged out'}), 200


@auth_bp.route('/user')
@login_required
def current_user():
    """Return the signed-in operator"""
    user = get_storage().get_user(session['user_id'])
    if not user:
        session.pop('user_id', None)
        return jsonify({'error': 'Authentication required'}), 401
    return jsonify(public_user(user)), 200
