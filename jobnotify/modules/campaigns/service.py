"""
Campaign send workflow: precondition checks, the per-campaign single-flight
claim around dispatch, and the DRAFT -> SENT transition.
"""

import logging
from datetime import datetime, timezone

from .dispatcher import dispatch_campaign, DispatchStatus
from .models import (
    CampaignNotFound, CampaignAlreadySent, CampaignSendInProgress,
    NoActiveSubscribers, CampaignDispatchFailed, NoValidRecipients
)
from ...core import db_log

logger = logging.getLogger(__name__)

TEST_CAMPAIGN = {
    'id': 0,
    'name': 'Test Campaign',
    'subject': 'Test Email',
    'content': 'This is a test email to verify the email delivery system.',
    'category': 'test',
    'sent': False,
    'sendDate': None,
    'openCount': 0,
}

TEST_JOB = {
    'id': 0,
    'title': 'Test Job',
    'company': 'Test Company',
    'description': 'This is a test job posting.',
    'category': 'test',
    'location': 'Remote',
    'url': 'https://example.com',
}


def send_campaign(storage, campaign_id, email_service):
    """Send a draft campaign to all active subscribers and mark it sent.

    Raises:
        CampaignError subclasses; the campaign is unchanged on any failure.

    Returns:
        the updated campaign dict
    """
    campaign = storage.get_campaign(campaign_id)
    if not campaign:
        raise CampaignNotFound()
    if campaign['sent']:
        raise CampaignAlreadySent()

    subscribers = storage.get_subscribers()
    if not subscribers:
        raise NoActiveSubscribers()

    if not storage.claim_campaign_send(campaign_id):
        current = storage.get_campaign(campaign_id)
        if current and current['sent']:
            raise CampaignAlreadySent()
        raise CampaignSendInProgress()

    try:
        jobs = storage.get_jobs()
        result = dispatch_campaign(campaign, jobs, subscribers, email_service)
        if result.status is DispatchStatus.NO_VALID_RECIPIENTS:
            raise NoValidRecipients(result)
        if not result:
            raise CampaignDispatchFailed(result)
        updated = storage.mark_campaign_sent(campaign_id, datetime.now(timezone.utc))
    finally:
        storage.release_campaign_send(campaign_id)

    logger.info(
        f"Campaign {campaign_id} sent to {result.recipients} subscribers "
        f"({len(result.rejected)} invalid addresses skipped)"
    )
    db_log('info', 'campaigns', 'Campaign sent', {
        'campaign_id': campaign_id, 'name': campaign['name'],
        'recipients': result.recipients, 'rejected': result.rejected
    })
    return updated


def send_test_email(address, email_service):
    """Dispatch the built-in test campaign to a single address"""
    return dispatch_campaign(TEST_CAMPAIGN, [TEST_JOB], [{'id': 0, 'email': address}], email_service)
