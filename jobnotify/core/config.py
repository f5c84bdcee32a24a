import os
from dotenv import load_dotenv

load_dotenv(override=True)

_FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def as_bool(value, default=True):
    """Interpret an env-style flag ('0', 'false', 'off', ...) or a real bool"""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSE_VALUES


class Config:
    """
    Base configuration for JobNotify.
    Host apps can override any of these through app.config before
    JobNotify(app) is created.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Persistent app log (entities themselves live in memory)
    LOG_DB = os.getenv('LOG_DB')

    # Email settings
    # SMTP is the default transport, Resend is optional
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'smtp')
    SMTP_HOST = os.getenv('SMTP_HOST')
    SMTP_PORT = int(os.getenv('SMTP_PORT', '587'))
    SMTP_USER = os.getenv('SMTP_USER')
    SMTP_PASS = os.getenv('SMTP_PASS')
    SMTP_USE_TLS = as_bool(os.getenv('SMTP_USE_TLS'))
    EMAIL_TIMEOUT = int(os.getenv('EMAIL_TIMEOUT', '30'))

    # Resend API settings
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')

    EMAIL_ADDRESS = os.getenv('EMAIL_ADDRESS', 'jobpush@jobberway.com')
    EMAIL_SENDER_NAME = os.getenv('EMAIL_SENDER_NAME', 'Job Board Notifications')
    EMAIL_UNSUBSCRIBE_ADDRESS = os.getenv('EMAIL_UNSUBSCRIBE_ADDRESS', 'unsubscribe@jobberway.com')
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'Jobberway')

    # External job feed
    JOB_FEED_URL = os.getenv('JOB_FEED_URL', 'https://jobberway.com/postslists.php')
    JOB_FEED_LIMIT = int(os.getenv('JOB_FEED_LIMIT', '10'))
    JOB_FEED_TIMEOUT = int(os.getenv('JOB_FEED_TIMEOUT', '15'))

    # Comma separated list of origins allowed to call /api/*
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '').split(',') if o.strip()]

    @classmethod
    def as_dict(cls):
        """Upper-case settings as a plain dict (used to seed app.config)"""
        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}
