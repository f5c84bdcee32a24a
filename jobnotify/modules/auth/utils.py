from functools import wraps
from flask import session, jsonify
from werkzeug.security import generate_password_hash, check_password_hash


def hash_password(password):
    """Salted password hash (werkzeug scrypt/pbkdf2)"""
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Verify password against hash"""
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def public_user(user):
    """User dict without the credential"""
    return {k: v for k, v in user.items() if k != 'password'}


# Helper function to check if user is authenticated
def login_required(f):
    """Decorator to require an operator session on JSON routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function
