"""
Dashboard Module
================

Operator dashboard statistics (job, subscriber and campaign counts) and the
/health endpoint.
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from . import routes

__all__ = ['dashboard_bp']
