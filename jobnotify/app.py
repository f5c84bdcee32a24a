"""
JobNotify Application
=====================

Ready-to-run Flask app with every JobNotify module enabled.

Run with:
    python -m jobnotify.app

Visit:
    http://localhost:5000/health      - Liveness probe
    http://localhost:5000/api/jobs    - Public job list
"""

import os
import logging

from flask import Flask

from . import JobNotify
from .core import Config

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = 'dev-secret-key-change-in-production'


def create_app(overrides=None, **jobnotify_kwargs):
    """Build the Flask app. `overrides` is applied to app.config before JobNotify starts."""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = Config.SECRET_KEY or DEV_SECRET_KEY

    # Session security
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['SESSION_COOKIE_SECURE'] = os.getenv('ENVIRONMENT') == 'production'

    if overrides:
        app.config.update(overrides)

    if app.config['SECRET_KEY'] == DEV_SECRET_KEY:
        if os.getenv('ENVIRONMENT') == 'production':
            logger.warning("FLASK_SECRET_KEY not set in production - using the development secret key")
        else:
            logger.info("FLASK_SECRET_KEY not set - using the development secret key")

    JobNotify(app, **jobnotify_kwargs)
    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv('PORT', '5000'))
    print("\n" + "=" * 60)
    print("JobNotify")
    print("=" * 60)
    print(f"Health:          http://localhost:{port}/health")
    print(f"Jobs API:        http://localhost:{port}/api/jobs")
    print("=" * 60 + "\n")
    create_app().run(host='0.0.0.0', port=port, debug=os.getenv('FLASK_DEBUG') == '1')
