"""
Campaigns Module
================

Provides:
- Draft campaign creation and listing
- HTML rendering of a campaign with the current job list
- One-shot bulk dispatch to all active subscribers (DRAFT -> SENT)
- Test sends to a single address
"""

from flask import Blueprint

campaigns_bp = Blueprint('campaigns', __name__, url_prefix='/api')

from . import routes
