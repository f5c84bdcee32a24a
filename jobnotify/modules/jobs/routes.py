"""
Jobs Routes
===========

- GET  /api/jobs             -- list jobs (public)
- POST /api/jobs             -- create a job
- GET  /api/categories       -- distinct job categories
- GET  /api/jobs/feed        -- raw postings from the external job feed
- POST /api/jobs/import-feed -- import external postings as jobs
"""

import logging
from flask import request, jsonify, current_app, session

from . import jobs_bp
from .models import validate_job
from .feed import fetch_feed_jobs, import_feed_jobs, JobFeedError
from ..auth import login_required
from ...core import get_storage, db_log

logger = logging.getLogger(__name__)


def _feed_settings():
    return (
        current_app.config.get('JOB_FEED_URL'),
        int(current_app.config.get('JOB_FEED_LIMIT', 10)),
        int(current_app.config.get('JOB_FEED_TIMEOUT', 15)),
    )


@jobs_bp.route('/jobs', methods=['GET'])
def list_jobs():
    """List all jobs"""
    return jsonify(get_storage().get_jobs()), 200


@jobs_bp.route('/jobs', methods=['POST'])
@login_required
def create_job():
    """Create a job from operator input"""
    job, errors = validate_job(request.get_json(silent=True))
    if errors:
        return jsonify({'error': 'Validation failed', 'details': errors}), 400

    job = get_storage().create_job(job)
    logger.info(f"Job created: {job['id']} {job['title']}")
    db_log('info', 'jobs', f"Job created: {job['title']}", {'id': job['id']}, user_id=session.get('user_id'))
    return jsonify(job), 201


@jobs_bp.route('/categories', methods=['GET'])
@login_required
def list_categories():
    """Distinct categories across all jobs"""
    return jsonify(get_storage().get_categories()), 200


@jobs_bp.route('/jobs/feed', methods=['GET'])
@login_required
def feed_jobs():
    """Return the first JOB_FEED_LIMIT postings from the external feed"""
    url, limit, timeout = _feed_settings()
    try:
        return jsonify(fetch_feed_jobs(url, limit=limit, timeout=timeout)), 200
    except JobFeedError:
        return jsonify({'error': 'Error fetching jobs from job feed'}), 502


@jobs_bp.route('/jobs/import-feed', methods=['POST'])
@login_required
def import_feed():
    """Import external feed postings as new jobs"""
    url, limit, timeout = _feed_settings()
    try:
        result = import_feed_jobs(get_storage(), url, limit=limit, timeout=timeout)
    except JobFeedError as e:
        db_log('error', 'jobs', 'Job feed import failed', {'url': url, 'error': str(e)})
        return jsonify({'error': 'Error fetching jobs from job feed'}), 502

    return jsonify({
        'message': f"Imported {result['imported']} jobs",
        'imported': result['imported'],
        'skipped': result['skipped'],
        'jobs': result['jobs'],
    }), 200
