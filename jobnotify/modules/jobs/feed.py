"""
External Job Feed
=================

Pulls a bounded prefix of postings from a third-party JSON endpoint and
re-submits each one as a new Job. Re-running the import creates duplicates;
nothing is matched against existing jobs.
"""

import logging
import requests

from .models import validate_job
from ...core import db_log

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'General'
DEFAULT_LOCATION = 'Remote'


class JobFeedError(Exception):
    """Feed could not be fetched or did not return a JSON array"""


def fetch_feed_jobs(url, limit=10, timeout=15):
    """GET the feed and return its first `limit` items."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        logger.error(f"Error fetching job feed {url}: {e}")
        raise JobFeedError(str(e)) from e
    except ValueError as e:
        logger.error(f"Job feed {url} returned invalid JSON: {e}")
        raise JobFeedError('Job feed returned invalid JSON') from e

    if not isinstance(data, list):
        raise JobFeedError('Job feed did not return a list')

    return data[:limit]


def map_feed_job(item):
    """Map one feed posting onto the Job shape, filling category/location defaults"""
    return {
        'title': item.get('title'),
        'company': item.get('company'),
        'description': item.get('description'),
        'category': item.get('category') or DEFAULT_CATEGORY,
        'location': item.get('location') or DEFAULT_LOCATION,
        'url': item.get('url'),
    }


def import_feed_jobs(storage, url, limit=10, timeout=15):
    """Fetch the feed and create one Job per valid posting.

    Returns:
        dict with imported / skipped counts and the created jobs
    """
    items = fetch_feed_jobs(url, limit=limit, timeout=timeout)

    created = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue

        job, errors = validate_job(map_feed_job(item))
        if errors:
            logger.warning(f"Skipping feed job {item.get('title')!r}: {errors}")
            skipped += 1
            continue

        created.append(storage.create_job(job))

    logger.info(f"Imported {len(created)} jobs from feed ({skipped} skipped)")
    db_log('info', 'jobs', 'Job feed imported', {
        'url': url, 'imported': len(created), 'skipped': skipped
    })
    return {'imported': len(created), 'skipped': skipped, 'jobs': created}
