"""
JobNotify - Job Board Email Campaigns for Flask
===============================================

A small admin backend for:
- Job postings (manual entry and external feed import)
- Email subscribers (signup and CSV import)
- Email campaigns rendered with the latest jobs and sent as one bulk message

Usage:
    from flask import Flask
    from jobnotify import JobNotify

    app = Flask(__name__)
    jobnotify = JobNotify(app, {'brand_name': 'Jobberway'})
"""

import os
import logging

from flask import jsonify
from flask_cors import CORS

__version__ = '0.1.0'

from .core import Config, MemStorage, LoggingService
from .modules.email import email_service as shared_email_service

logger = logging.getLogger(__name__)

# Module name -> import path of its blueprint, in registration order
MODULE_BLUEPRINTS = {
    'auth': ('.modules.auth', 'auth_bp'),
    'dashboard': ('.modules.dashboard', 'dashboard_bp'),
    'jobs': ('.modules.jobs', 'jobs_bp'),
    'subscribers': ('.modules.subscribers', 'subscribers_bp'),
    'campaigns': ('.modules.campaigns', 'campaigns_bp'),
}

# Lower-case extension config -> app.config keys
_CONFIG_MAP = {
    'brand_name': 'EMAIL_BRAND_NAME',
    'log_db': 'LOG_DB',
    'cors_origins': 'CORS_ORIGINS',
}
_EMAIL_CONFIG_MAP = {
    'provider': 'EMAIL_PROVIDER',
    'address': 'EMAIL_ADDRESS',
    'sender_name': 'EMAIL_SENDER_NAME',
    'unsubscribe_address': 'EMAIL_UNSUBSCRIBE_ADDRESS',
    'style': 'EMAIL_STYLE',
}
_FEED_CONFIG_MAP = {
    'url': 'JOB_FEED_URL',
    'limit': 'JOB_FEED_LIMIT',
    'timeout': 'JOB_FEED_TIMEOUT',
}


class JobNotify:
    """
    Flask extension wiring the entity store, the email service and the
    blueprint modules onto an app.

    Args:
        app: Flask app (optional, see init_app)
        config: dict of overrides, e.g.
            {
                'brand_name': 'Jobberway',
                'email': {'address': 'jobs@example.com', 'sender_name': 'Jobs'},
                'job_feed': {'url': 'https://...', 'limit': 10},
                'features': {'dashboard': False},
            }
        storage: Storage implementation (defaults to a fresh MemStorage)
        email_service: object with send_bulk_email(...) (defaults to the shared EmailService)
    """

    def __init__(self, app=None, config=None, storage=None, email_service=None):
        self._config = config or {}
        self.storage = storage
        self.email_service = email_service
        self._registered_modules = []

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        # Host app values win over environment defaults
        for key, value in Config.as_dict().items():
            app.config.setdefault(key, value)
        app.config.update(self._map_config(self._config))

        if not app.config.get('SECRET_KEY'):
            logger.warning("SECRET_KEY not configured - operator sessions will not work")

        if self.storage is None:
            self.storage = MemStorage()

        if self.email_service is None:
            self.email_service = shared_email_service
        if hasattr(self.email_service, 'init_app'):
            self.email_service.init_app(app)

        app.extensions['jobnotify'] = self

        self._setup_log_dir(app)
        self._register_modules(app)
        self._register_error_handlers(app)

        origins = app.config.get('CORS_ORIGINS')
        if origins:
            CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

        logger.info(f"JobNotify initialised with modules: {', '.join(self._registered_modules)}")

    def _map_config(self, config):
        """Translate the lower-case extension config into app.config keys"""
        mapped = {}
        for key, config_key in _CONFIG_MAP.items():
            if key in config:
                mapped[config_key] = config[key]
        for key, config_key in _EMAIL_CONFIG_MAP.items():
            if key in config.get('email', {}):
                mapped[config_key] = config['email'][key]
        for key, config_key in _FEED_CONFIG_MAP.items():
            if key in config.get('job_feed', {}):
                mapped[config_key] = config['job_feed'][key]
        return mapped

    def _feature_enabled(self, name):
        return self._config.get('features', {}).get(name, True)

    def _setup_log_dir(self, app):
        """Create the directory holding LOG_DB if it is configured"""
        log_db = app.config.get('LOG_DB')
        if log_db and os.path.dirname(log_db):
            os.makedirs(os.path.dirname(log_db), exist_ok=True)

    def _register_modules(self, app):
        from importlib import import_module

        for name, (module_path, attr) in MODULE_BLUEPRINTS.items():
            if not self._feature_enabled(name):
                logger.info(f"Module disabled by config: {name}")
                continue
            blueprint = getattr(import_module(module_path, __name__), attr)
            app.register_blueprint(blueprint)
            self._registered_modules.append(name)

    def _register_error_handlers(self, app):
        @app.errorhandler(500)
        def internal_error(error):
            original = getattr(error, 'original_exception', None) or error
            LoggingService.log_error_with_traceback('app', original)
            return jsonify({'error': 'An unexpected error occurred'}), 500

    def get_registered_modules(self):
        """Names of the modules registered on the app"""
        return list(self._registered_modules)


__all__ = ['JobNotify', '__version__']
