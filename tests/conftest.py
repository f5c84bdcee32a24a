"""
Shared fixtures for the JobNotify test-suite.

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from jobnotify import JobNotify


class FakeEmailService:
    """Records every bulk send instead of talking to a provider."""

    def __init__(self):
        self.calls = []
        self.succeed = True
        self.error = None
        self.on_send = None

    def send_bulk_email(self, recipients, subject, html_body, sender=None, headers=None, text_body=None):
        self.calls.append({
            'recipients': list(recipients),
            'subject': subject,
            'html': html_body,
            'sender': sender,
            'headers': dict(headers or {}),
        })
        if self.on_send:
            self.on_send()
        if self.error:
            raise self.error
        return self.succeed


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for the log database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="jobnotify-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def fake_email():
    return FakeEmailService()


@pytest.fixture
def app(tmp_db_dir, fake_email):
    """Fully initialised Flask app with all JobNotify modules registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "logs.db")
    JobNotify(app, email_service=fake_email)
    return app


@pytest.fixture
def storage(app):
    return app.extensions["jobnotify"].storage


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client with a registered, signed-in operator."""
    response = client.post("/api/register", json={"username": "operator", "password": "secret123"})
    assert response.status_code == 201
    return client
