"""
Campaign Dispatcher
===================

Renders a campaign once and hands it to the email service as a single bulk
transmission addressed to every subscriber with a deliverable address.
The dispatcher never retries and never touches the campaign record; the
caller marks it sent.
"""

import enum
import logging
from email.utils import formataddr

from flask import current_app

from .renderer import render_campaign
from ..email import is_valid_email
from ...core import db_log

logger = logging.getLogger(__name__)


class DispatchStatus(enum.Enum):
    SENT = 'sent'
    NO_RECIPIENTS = 'no_recipients'
    NO_VALID_RECIPIENTS = 'no_valid_recipients'
    RENDER_FAILED = 'render_failed'
    TRANSPORT_FAILED = 'transport_failed'


class DispatchResult:
    """Outcome of one dispatch. Truthy only when the transport accepted the message."""

    def __init__(self, status, recipients=0, error=None, rejected=None):
        self.status = status
        # Addresses handed to the transport
        self.recipients = recipients
        self.error = error
        # Stored subscriber addresses the transport cannot deliver to
        self.rejected = list(rejected or [])

    @property
    def ok(self):
        return self.status is DispatchStatus.SENT

    def __bool__(self):
        return self.ok

    def to_dict(self):
        return {
            'status': self.status.value,
            'recipients': self.recipients,
            'rejected': self.rejected,
            'error': self.error,
        }

    def __repr__(self):
        return f"DispatchResult({self.status.name}, recipients={self.recipients}, error={self.error!r})"


def _delivery_settings():
    """Sender identity and bulk headers from app config"""
    try:
        config = current_app.config
        sender_email = config.get('EMAIL_ADDRESS', 'jobpush@jobberway.com')
        sender_name = config.get('EMAIL_SENDER_NAME', 'Job Board Notifications')
        unsubscribe = config.get('EMAIL_UNSUBSCRIBE_ADDRESS', 'unsubscribe@jobberway.com')
    except RuntimeError:
        sender_email = 'jobpush@jobberway.com'
        sender_name = 'Job Board Notifications'
        unsubscribe = 'unsubscribe@jobberway.com'

    headers = {
        'List-Unsubscribe': f'<mailto:{unsubscribe}>',
        'Precedence': 'bulk',
    }
    return formataddr((sender_name, sender_email)), headers


def dispatch_campaign(campaign, jobs, subscribers, email_service):
    """Render `campaign` against `jobs` and send it to every subscriber in one transmission.

    Subscriber addresses the transport cannot deliver to are left out of the
    transmission and reported in DispatchResult.rejected.

    Returns:
        DispatchResult
    """
    addresses = [sub['email'] for sub in subscribers or []]
    logger.info(f"Starting campaign delivery to {len(addresses)} subscribers")

    if not addresses:
        logger.error("No subscribers provided")
        return DispatchResult(DispatchStatus.NO_RECIPIENTS, error='No subscribers provided')

    recipients = [addr for addr in addresses if is_valid_email(addr)]
    rejected = [addr for addr in addresses if not is_valid_email(addr)]
    if rejected:
        logger.warning(f"Leaving {len(rejected)} invalid subscriber addresses out of campaign {campaign.get('id')}")
        db_log('warning', 'campaigns', 'Invalid subscriber addresses skipped', {
            'campaign_id': campaign.get('id'), 'rejected': rejected
        })

    if not recipients:
        logger.error("No subscriber has a valid email address")
        return DispatchResult(
            DispatchStatus.NO_VALID_RECIPIENTS, error='No subscriber has a valid email address', rejected=rejected
        )

    try:
        html = render_campaign(campaign, jobs)
    except Exception as e:
        logger.error(f"Failed to render campaign {campaign.get('id')}: {e}")
        db_log('error', 'campaigns', 'Campaign render failed', {
            'campaign_id': campaign.get('id'), 'error': str(e)
        })
        return DispatchResult(DispatchStatus.RENDER_FAILED, len(recipients), str(e), rejected)

    logger.info("Generated email template")
    sender, headers = _delivery_settings()

    try:
        success = email_service.send_bulk_email(
            recipients, campaign['subject'], html, sender=sender, headers=headers
        )
    except Exception as e:
        logger.error(f"Failed to send campaign {campaign.get('id')}: {e}")
        success = False
        error = str(e)
    else:
        error = None if success else 'Email provider returned failure'

    if not success:
        db_log('error', 'campaigns', 'Campaign transmission failed', {
            'campaign_id': campaign.get('id'), 'recipients': len(recipients), 'error': error
        })
        return DispatchResult(DispatchStatus.TRANSPORT_FAILED, len(recipients), error, rejected)

    return DispatchResult(DispatchStatus.SENT, len(recipients), rejected=rejected)
