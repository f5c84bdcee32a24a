"""
Email Module
============

Provides the bulk email transport (SMTP or Resend) used by campaign dispatch.
"""

from flask import current_app

from .email_service import EmailService, email_service, is_valid_email


def get_email_service():
    """Email service attached to the current app by the JobNotify extension"""
    ext = current_app.extensions.get('jobnotify')
    if ext is None:
        return email_service
    return ext.email_service


__all__ = ['EmailService', 'email_service', 'get_email_service', 'is_valid_email']
