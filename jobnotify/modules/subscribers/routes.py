"""
Subscribers Routes
==================

Provides:
- GET  /api/subscribers            -- active subscribers (operator)
- POST /api/subscribers            -- subscribe an email address (public)
- POST /api/subscribers/upload-csv -- bulk import from a CSV upload (operator)

Exported helpers:
- validate_email(email)
"""

import re
import logging
from flask import request, jsonify, session

from . import subscribers_bp
from .ingestion import import_subscribers_csv, SubscriberImportError
from ..auth import login_required
from ...core import get_storage, db_log, DuplicateEntity

# Email validation regex: rejects consecutive dots, leading/trailing dots
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

logger = logging.getLogger(__name__)


def validate_email(email):
    """Validate email format"""
    if not email or len(email) > 255:
        return False
    return EMAIL_REGEX.match(email.strip()) is not None


@subscribers_bp.route('', methods=['GET'])
@login_required
def list_subscribers():
    """List active subscribers"""
    return jsonify(get_storage().get_subscribers()), 200


@subscribers_bp.route('', methods=['POST'])
def subscribe():
    """Handle new subscription requests"""
    data = request.get_json(silent=True)

    if not data or not isinstance(data.get('email'), str):
        return jsonify({'error': 'Validation failed', 'details': {'email': 'Required'}}), 400

    email = data['email'].strip()
    if not validate_email(email):
        return jsonify({'error': 'Validation failed', 'details': {'email': 'Invalid email address'}}), 400

    try:
        subscriber = get_storage().create_subscriber({'email': email, 'categories': [], 'active': True})
    except DuplicateEntity:
        return jsonify({'error': 'You are already subscribed!'}), 409

    logger.info(f"New subscription added: {email}")
    db_log('info', 'subscribers', f'New subscriber: {email}')
    return jsonify(subscriber), 201


@subscribers_bp.route('/upload-csv', methods=['POST'])
@login_required
def upload_csv():
    """Import subscribers from the uploaded `csv` file field"""
    upload = request.files.get('csv')
    if upload is None:
        return jsonify({'error': 'No CSV file uploaded'}), 400

    try:
        result = import_subscribers_csv(get_storage(), upload.stream)
    except SubscriberImportError as e:
        db_log('error', 'subscribers', 'CSV import failed', {
            'filename': upload.filename, 'error': str(e)
        }, user_id=session.get('user_id'))
        if e.status_code == 400:
            return jsonify({'error': str(e)}), 400
        return jsonify({'error': 'Error processing CSV file'}), e.status_code

    return jsonify({
        'message': f"Imported {result['imported']} subscribers",
        **result
    }), 200
