"""
Jobs Module
===========

Provides:
- Job listing and creation API
- Category listing
- Import of postings from the external job feed
"""

from flask import Blueprint

jobs_bp = Blueprint('jobs', __name__, url_prefix='/api')

from . import routes
