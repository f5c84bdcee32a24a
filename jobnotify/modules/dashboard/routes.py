"""
Admin Dashboard Routes
======================

Summary counts for the operator dashboard and a liveness probe.
"""

from flask import jsonify

from . import dashboard_bp
from ..auth import login_required
from ...core import get_storage


@dashboard_bp.route('/api/dashboard/stats')
@login_required
def api_stats():
    """Counts of jobs, active subscribers and campaigns"""
    storage = get_storage()
    campaigns = storage.get_campaigns()
    return jsonify({
        'jobs': len(storage.get_jobs()),
        'subscribers': len(storage.get_subscribers()),
        'campaigns': len(campaigns),
        'campaigns_sent': sum(1 for c in campaigns if c['sent']),
    }), 200


@dashboard_bp.route('/health')
def health():
    """Liveness probe"""
    return jsonify({'status': 'ok'}), 200
