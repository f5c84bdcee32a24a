"""
Subscriber Tests
================

Public signup and CSV ingestion.
Run with: pytest tests/test_subscribers.py -v
"""

import io

import pytest

from jobnotify.core import MemStorage
from jobnotify.modules.subscribers.ingestion import (
    parse_subscriber_rows, import_subscribers_csv, NoValidEmails, CsvImportError
)


@pytest.fixture
def store():
    return MemStorage()


# ---------------------------------------------------------------------------
# 1. CSV parsing
# ---------------------------------------------------------------------------

def test_blank_email_row_is_skipped(store):
    """Five rows with row 3 blank give four subscribers."""
    data = b"email\na@x.com\nb@x.com\n\"\"\nd@x.com\ne@x.com\n"

    result = import_subscribers_csv(store, data)

    assert result == {'imported': 4, 'skipped': 1, 'failed': 0}
    assert [s['email'] for s in store.get_subscribers()] == ['a@x.com', 'b@x.com', 'd@x.com', 'e@x.com']


def test_email_header_is_case_insensitive():
    records, skipped = parse_subscriber_rows("Name,EMAIL\nAnn, ann@x.com \n")

    assert skipped == 0
    assert records == [{'email': 'ann@x.com', 'categories': [], 'active': True}]


def test_utf8_bom_is_ignored():
    records, _ = parse_subscriber_rows(io.BytesIO("\ufeffemail\na@x.com\n".encode('utf-8')))
    assert [r['email'] for r in records] == ['a@x.com']


def test_missing_email_column_imports_nothing(store):
    assert parse_subscriber_rows("name\nAnn\n") == ([], 0)

    with pytest.raises(NoValidEmails) as exc:
        import_subscribers_csv(store, "name\nAnn\n")
    assert exc.value.status_code == 400
    assert store.get_subscribers() == []


def test_undecodable_upload_is_rejected(store):
    with pytest.raises(CsvImportError) as exc:
        import_subscribers_csv(store, b"email\n\xff\xfe\xfa@x.com\n")
    assert exc.value.status_code == 500


def test_undecodable_text_stream_is_rejected(store):
    stream = io.TextIOWrapper(io.BytesIO(b"email\n\xff\xfe@x.com\n"), encoding='utf-8')

    with pytest.raises(CsvImportError):
        import_subscribers_csv(store, stream)
    assert store.get_subscribers() == []


def test_duplicates_are_counted_as_failed(store):
    store.create_subscriber({'email': 'a@x.com'})

    result = import_subscribers_csv(store, "email\nA@X.com\nb@x.com\nb@x.com\n")

    assert result == {'imported': 1, 'skipped': 0, 'failed': 2}
    assert len(store.get_subscribers()) == 2


def test_imported_subscribers_have_defaults(store):
    import_subscribers_csv(store, "email\na@x.com\n")
    subscriber = store.get_subscribers()[0]
    assert subscriber['categories'] == []
    assert subscriber['active'] is True


# ---------------------------------------------------------------------------
# 2. Signup route
# ---------------------------------------------------------------------------

def test_public_signup(client):
    response = client.post('/api/subscribers', json={'email': ' new@example.com '})
    assert response.status_code == 201
    subscriber = response.get_json()
    assert subscriber['email'] == 'new@example.com'
    assert subscriber['active'] is True


def test_signup_validation(client):
    assert client.post('/api/subscribers', json={}).status_code == 400
    response = client.post('/api/subscribers', json={'email': 'not-an-email'})
    assert response.status_code == 400
    assert response.get_json()['details'] == {'email': 'Invalid email address'}


def test_signup_duplicate(client):
    client.post('/api/subscribers', json={'email': 'dup@example.com'})
    response = client.post('/api/subscribers', json={'email': 'DUP@example.com'})
    assert response.status_code == 409
    assert response.get_json() == {'error': 'You are already subscribed!'}


def test_list_subscribers(auth_client):
    auth_client.post('/api/subscribers', json={'email': 'a@x.com'})
    listed = auth_client.get('/api/subscribers').get_json()
    assert [s['email'] for s in listed] == ['a@x.com']


# ---------------------------------------------------------------------------
# 3. CSV upload route
# ---------------------------------------------------------------------------

def test_upload_csv(auth_client):
    data = {'csv': (io.BytesIO(b"email\na@x.com\nb@x.com\n"), 'subs.csv')}

    response = auth_client.post('/api/subscribers/upload-csv', data=data, content_type='multipart/form-data')

    assert response.status_code == 200
    body = response.get_json()
    assert body['message'] == 'Imported 2 subscribers'
    assert body['imported'] == 2
    assert len(auth_client.get('/api/subscribers').get_json()) == 2


def test_upload_without_file(auth_client):
    response = auth_client.post('/api/subscribers/upload-csv', data={}, content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json() == {'error': 'No CSV file uploaded'}


def test_upload_without_emails(auth_client):
    data = {'csv': (io.BytesIO(b"name\nAnn\n"), 'subs.csv')}

    response = auth_client.post('/api/subscribers/upload-csv', data=data, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'No valid email addresses found in CSV file'}


def test_upload_unreadable_file(auth_client):
    data = {'csv': (io.BytesIO(b"email\n\xff\xfe@x.com\n"), 'subs.csv')}

    response = auth_client.post('/api/subscribers/upload-csv', data=data, content_type='multipart/form-data')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Error processing CSV file'}
