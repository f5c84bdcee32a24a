"""
JobNotify Auth Module

Provides operator authentication:
- Username/password registration and login
- Session-based guard for admin API routes
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

from . import routes
from .utils import login_required

__all__ = ['auth_bp', 'login_required']
