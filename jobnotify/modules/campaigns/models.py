"""
Campaigns Models
================

Payload validation, JSON serialisation and the error types raised by the
campaign send workflow. Campaign records themselves live in the entity store.
"""

CAMPAIGN_REQUIRED_FIELDS = ('name', 'subject', 'content')


class CampaignError(Exception):
    """Base class for campaign send failures. status_code is the HTTP answer."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class CampaignNotFound(CampaignError):
    status_code = 404

    def __init__(self, message='Campaign not found'):
        super().__init__(message)


class CampaignAlreadySent(CampaignError):
    status_code = 400

    def __init__(self, message='Campaign already sent'):
        super().__init__(message)


class CampaignSendInProgress(CampaignError):
    status_code = 409

    def __init__(self, message='Campaign is already being sent'):
        super().__init__(message)


class NoActiveSubscribers(CampaignError):
    status_code = 400

    def __init__(self, message='No active subscribers found. Please add subscribers first.'):
        super().__init__(message)


class CampaignDispatchFailed(CampaignError):
    status_code = 500

    def __init__(self, result, message='Failed to send campaign'):
        super().__init__(message)
        self.result = result


class NoValidRecipients(CampaignDispatchFailed):
    status_code = 400

    def __init__(self, result, message='No subscriber has a valid email address'):
        super().__init__(result, message)


def validate_campaign(data):
    """Check a campaign payload. Returns (campaign, errors).

    Only name/subject/content/category are taken from the caller; sent,
    sendDate and openCount are always set by the store.
    """
    if not isinstance(data, dict):
        return None, {'_': 'Expected a JSON object'}

    campaign = {}
    errors = {}
    for field in CAMPAIGN_REQUIRED_FIELDS:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            errors[field] = 'Required'
        else:
            campaign[field] = value if field == 'content' else value.strip()

    category = data.get('category', '')
    if category is None:
        category = ''
    if not isinstance(category, str):
        errors['category'] = 'Must be a string'
    else:
        campaign['category'] = category.strip()

    if errors:
        return None, errors
    return campaign, {}


def serialize_campaign(campaign):
    """Campaign dict ready for jsonify (sendDate as ISO-8601)"""
    data = dict(campaign)
    send_date = data.get('sendDate')
    if send_date is not None and hasattr(send_date, 'isoformat'):
        data['sendDate'] = send_date.isoformat()
    return data
