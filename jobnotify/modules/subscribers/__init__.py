"""
Subscribers Module
==================

Provides:
- Public API for email subscriptions
- Operator listing of active subscribers
- CSV import of subscriber lists
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__, url_prefix='/api/subscribers')

from . import routes
