"""
Job Tests
=========

Manual job creation and the external job feed (HTTP mocked).
Run with: pytest tests/test_jobs.py -v
"""

from unittest.mock import patch, MagicMock

import pytest
import requests

from jobnotify.core import MemStorage
from jobnotify.modules.jobs.feed import fetch_feed_jobs, import_feed_jobs, map_feed_job, JobFeedError
from jobnotify.modules.jobs.models import validate_job


FEED_URL = 'https://feed.example.com/jobs'

VALID_JOB = {
    'title': 'Backend Engineer',
    'description': 'Build APIs',
    'company': 'Acme',
    'category': 'Engineering',
    'location': 'Berlin',
    'url': 'https://acme.example/jobs/1',
}


def _feed_item(n, **overrides):
    item = {
        'title': f'Job {n}',
        'description': f'Description {n}',
        'company': 'FeedCo',
        'url': f'https://feed.example.com/jobs/{n}',
    }
    item.update(overrides)
    return item


def _mock_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


# ---------------------------------------------------------------------------
# 1. Validation
# ---------------------------------------------------------------------------

def test_validate_job():
    job, errors = validate_job(dict(VALID_JOB, title='  Backend Engineer  '))
    assert errors == {}
    assert job['title'] == 'Backend Engineer'

    job, errors = validate_job(dict(VALID_JOB, url='', company=None))
    assert job is None
    assert set(errors) == {'url', 'company'}

    assert validate_job(['not', 'a', 'dict'])[0] is None


# ---------------------------------------------------------------------------
# 2. Feed fetching
# ---------------------------------------------------------------------------

def test_fetch_returns_first_ten_items():
    payload = [_feed_item(n) for n in range(15)]
    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response(payload)) as mock_get:
        items = fetch_feed_jobs(FEED_URL, limit=10, timeout=5)

    assert len(items) == 10
    assert items[0]['title'] == 'Job 0'
    mock_get.assert_called_once_with(FEED_URL, timeout=5)


def test_fetch_connection_error():
    with patch('jobnotify.modules.jobs.feed.requests.get', side_effect=requests.ConnectionError('down')):
        with pytest.raises(JobFeedError):
            fetch_feed_jobs(FEED_URL)


def test_fetch_http_error():
    resp = _mock_response([])
    resp.raise_for_status.side_effect = requests.HTTPError('503')
    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=resp):
        with pytest.raises(JobFeedError):
            fetch_feed_jobs(FEED_URL)


def test_fetch_rejects_non_list_payload():
    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response({'jobs': []})):
        with pytest.raises(JobFeedError):
            fetch_feed_jobs(FEED_URL)


def test_fetch_rejects_invalid_json():
    resp = _mock_response(None)
    resp.json.side_effect = ValueError('Expecting value')
    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=resp):
        with pytest.raises(JobFeedError):
            fetch_feed_jobs(FEED_URL)


# ---------------------------------------------------------------------------
# 3. Feed import
# ---------------------------------------------------------------------------

def test_map_feed_job_defaults():
    job = map_feed_job(_feed_item(1))
    assert job['category'] == 'General'
    assert job['location'] == 'Remote'

    job = map_feed_job(_feed_item(1, category='Design', location='Paris'))
    assert job['category'] == 'Design'
    assert job['location'] == 'Paris'


def test_import_creates_jobs_and_skips_invalid():
    store = MemStorage()
    payload = [_feed_item(1), _feed_item(2, title=''), 'junk', _feed_item(3, location='Paris')]

    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response(payload)):
        result = import_feed_jobs(store, FEED_URL)

    assert result['imported'] == 2
    assert result['skipped'] == 2
    jobs = store.get_jobs()
    assert [j['title'] for j in jobs] == ['Job 1', 'Job 3']
    assert jobs[0]['location'] == 'Remote'
    assert jobs[1]['location'] == 'Paris'


def test_import_twice_creates_duplicates():
    store = MemStorage()
    payload = [_feed_item(1)]

    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response(payload)):
        import_feed_jobs(store, FEED_URL)
        import_feed_jobs(store, FEED_URL)

    assert len(store.get_jobs()) == 2


# ---------------------------------------------------------------------------
# 4. Routes
# ---------------------------------------------------------------------------

def test_create_and_list_jobs(auth_client):
    response = auth_client.post('/api/jobs', json=VALID_JOB)
    assert response.status_code == 201
    assert response.get_json()['id'] == 1

    jobs = auth_client.get('/api/jobs').get_json()
    assert [j['title'] for j in jobs] == ['Backend Engineer']
    assert auth_client.get('/api/categories').get_json() == ['Engineering']


def test_create_job_validation(auth_client):
    response = auth_client.post('/api/jobs', json={'title': 'Only a title'})
    assert response.status_code == 400
    body = response.get_json()
    assert body['error'] == 'Validation failed'
    assert 'company' in body['details']


def test_feed_route(app, auth_client):
    app.config['JOB_FEED_URL'] = FEED_URL
    payload = [_feed_item(n) for n in range(12)]

    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response(payload)):
        response = auth_client.get('/api/jobs/feed')

    assert response.status_code == 200
    assert len(response.get_json()) == 10


def test_feed_route_error(auth_client):
    with patch('jobnotify.modules.jobs.feed.requests.get', side_effect=requests.Timeout('slow')):
        response = auth_client.get('/api/jobs/feed')

    assert response.status_code == 502
    assert response.get_json() == {'error': 'Error fetching jobs from job feed'}


def test_import_feed_route(auth_client):
    payload = [_feed_item(1), _feed_item(2)]

    with patch('jobnotify.modules.jobs.feed.requests.get', return_value=_mock_response(payload)):
        response = auth_client.post('/api/jobs/import-feed')

    assert response.status_code == 200
    body = response.get_json()
    assert body['message'] == 'Imported 2 jobs'
    assert len(auth_client.get('/api/jobs').get_json()) == 2


def test_import_feed_route_error(auth_client):
    with patch('jobnotify.modules.jobs.feed.requests.get', side_effect=requests.ConnectionError('down')):
        response = auth_client.post('/api/jobs/import-feed')

    assert response.status_code == 502
    assert auth_client.get('/api/jobs').get_json() == []
