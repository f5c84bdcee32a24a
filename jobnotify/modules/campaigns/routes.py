"""
Campaigns Routes
================

Operator routes for email campaigns. All routes require a signed-in operator.

- GET  /api/campaigns           -- list campaigns
- POST /api/campaigns           -- create a draft campaign
- POST /api/campaigns/<id>/send -- send to all active subscribers
- POST /api/test-email          -- send the built-in test campaign to one address
"""

import logging
from flask import request, jsonify, session

from . import campaigns_bp
from .models import validate_campaign, serialize_campaign, CampaignError, CampaignDispatchFailed
from .service import send_campaign, send_test_email
from ..auth import login_required
from ..email import get_email_service
from ..subscribers.routes import validate_email
from ...core import get_storage, db_log

logger = logging.getLogger(__name__)


@campaigns_bp.route('/campaigns', methods=['GET'])
@login_required
def list_campaigns():
    """List all campaigns"""
    return jsonify([serialize_campaign(c) for c in get_storage().get_campaigns()]), 200


@campaigns_bp.route('/campaigns', methods=['POST'])
@login_required
def create_campaign():
    """Create a draft campaign"""
    campaign, errors = validate_campaign(request.get_json(silent=True))
    if errors:
        return jsonify({'error': 'Validation failed', 'details': errors}), 400

    campaign = get_storage().create_campaign(campaign)
    logger.info(f"Campaign created: {campaign['id']}")
    db_log('info', 'campaigns', f"Campaign created: {campaign['name']}", {'id': campaign['id']},
           user_id=session.get('user_id'))
    return jsonify(serialize_campaign(campaign)), 201


@campaigns_bp.route('/campaigns/<int:campaign_id>/send', methods=['POST'])
@login_required
def send(campaign_id):
    """Send campaign to all active subscribers"""
    try:
        campaign = send_campaign(get_storage(), campaign_id, get_email_service())
    except CampaignDispatchFailed as e:
        logger.error(f"Campaign {campaign_id} dispatch failed: {e.result!r}")
        return jsonify({'error': e.message, 'dispatch': e.result.to_dict()}), e.status_code
    except CampaignError as e:
        return jsonify({'error': e.message}), e.status_code

    return jsonify(serialize_campaign(campaign)), 200


@campaigns_bp.route('/test-email', methods=['POST'])
@login_required
def test_email():
    """Send the built-in test campaign to one address"""
    data = request.get_json(silent=True) or {}
    address = (data.get('email') or '').strip()
    if not address:
        return jsonify({'error': 'Email address required'}), 400
    if not validate_email(address):
        return jsonify({'error': 'Please enter a valid email address'}), 400

    result = send_test_email(address, get_email_service())
    if result:
        logger.info(f"Test email sent to {address}")
        db_log('info', 'campaigns', f'Test email sent to {address}', user_id=session.get('user_id'))
        return jsonify({'message': 'Test email sent successfully'}), 200

    return jsonify({'error': 'Failed to send test email', 'dispatch': result.to_dict()}), 500
