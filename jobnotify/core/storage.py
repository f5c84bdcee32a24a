"""
Entity Storage
==============

Storage contract for Jobs, Subscribers, Campaigns and Users, plus the default
in-memory implementation. Modules only talk to the contract; the concrete store
is created by the JobNotify extension (or passed in by the host app) and looked
up with get_storage().

Entities are plain dicts. Every read returns a copy so callers never hold a
reference into the store.
"""

import copy
import logging
import threading
from flask import current_app

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage failures"""


class EntityNotFound(StorageError):
    """Lookup or update against an id that does not exist"""


class DuplicateEntity(StorageError):
    """Create that would break a uniqueness constraint"""


class Storage:
    """
    Contract every entity store implements.

    Users:        create_user, get_user, get_user_by_username
    Jobs:         create_job, get_jobs, get_categories
    Subscribers:  create_subscriber, get_subscribers
    Campaigns:    create_campaign, get_campaigns, get_campaign, update_campaign,
                  claim_campaign_send, release_campaign_send, mark_campaign_sent
    """

    # Users
    def create_user(self, user):
        raise NotImplementedError

    def get_user(self, user_id):
        raise NotImplementedError

    def get_user_by_username(self, username):
        raise NotImplementedError

    # Jobs
    def create_job(self, job):
        raise NotImplementedError

    def get_jobs(self):
        raise NotImplementedError

    def get_categories(self):
        """Distinct job categories in first-seen order"""
        categories = []
        for job in self.get_jobs():
            if job['category'] not in categories:
                categories.append(job['category'])
        return categories

    # Subscribers
    def create_subscriber(self, subscriber):
        raise NotImplementedError

    def get_subscribers(self):
        """Active subscribers only"""
        raise NotImplementedError

    # Campaigns
    def create_campaign(self, campaign):
        raise NotImplementedError

    def get_campaigns(self):
        raise NotImplementedError

    def get_campaign(self, campaign_id):
        raise NotImplementedError

    def update_campaign(self, campaign_id, updates):
        raise NotImplementedError

    def claim_campaign_send(self, campaign_id):
        """Atomically reserve a draft campaign for dispatch.

        Returns True for the single caller allowed to send, False when the
        campaign is already sent or another dispatch holds the claim.
        """
        raise NotImplementedError

    def release_campaign_send(self, campaign_id):
        raise NotImplementedError

    def mark_campaign_sent(self, campaign_id, send_date):
        """Set sent=True and sendDate together and drop the claim"""
        raise NotImplementedError


class MemStorage(Storage):
    """In-process store keyed by auto-incrementing integer ids. Nothing is persisted."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users = {}
        self._jobs = {}
        self._subscribers = {}
        self._campaigns = {}
        self._current_id = {'users': 1, 'jobs': 1, 'subscribers': 1, 'campaigns': 1}
        # Campaign ids currently being dispatched
        self._sending = set()

    def _next_id(self, table):
        new_id = self._current_id[table]
        self._current_id[table] += 1
        return new_id

    # ==================== Users ====================

    def create_user(self, user):
        with self._lock:
            username = user['username']
            if any(u['username'] == username for u in self._users.values()):
                raise DuplicateEntity(f"Username already exists: {username}")
            new_user = dict(user, id=self._next_id('users'))
            self._users[new_user['id']] = new_user
            return copy.deepcopy(new_user)

    def get_user(self, user_id):
        with self._lock:
            user = self._users.get(user_id)
            return copy.deepcopy(user) if user else None

    def get_user_by_username(self, username):
        with self._lock:
            for user in self._users.values():
                if user['username'] == username:
                    return copy.deepcopy(user)
            return None

    # ==================== Jobs ====================

    def create_job(self, job):
        with self._lock:
            new_job = dict(job, id=self._next_id('jobs'))
            self._jobs[new_job['id']] = new_job
            return dict(new_job)

    def get_jobs(self):
        with self._lock:
            return [dict(job) for job in self._jobs.values()]

    # ==================== Subscribers ====================

    def create_subscriber(self, subscriber):
        with self._lock:
            email = subscriber['email']
            if any(s['email'].lower() == email.lower() for s in self._subscribers.values()):
                raise DuplicateEntity(f"Subscriber already exists: {email}")
            new_subscriber = dict(
                subscriber,
                id=self._next_id('subscribers'),
                categories=[],
                active=True,
            )
            self._subscribers[new_subscriber['id']] = new_subscriber
            return copy.deepcopy(new_subscriber)

    def get_subscribers(self):
        with self._lock:
            return [copy.deepcopy(s) for s in self._subscribers.values() if s['active']]

    # ==================== Campaigns ====================

    def create_campaign(self, campaign):
        with self._lock:
            new_campaign = dict(
                campaign,
                id=self._next_id('campaigns'),
                sent=False,
                sendDate=None,
                openCount=0,
            )
            self._campaigns[new_campaign['id']] = new_campaign
            return dict(new_campaign)

    def get_campaigns(self):
        with self._lock:
            return [dict(c) for c in self._campaigns.values()]

    def get_campaign(self, campaign_id):
        with self._lock:
            campaign = self._campaigns.get(campaign_id)
            return dict(campaign) if campaign else None

    def update_campaign(self, campaign_id, updates):
        with self._lock:
            campaign = self._campaigns.get(campaign_id)
            if not campaign:
                raise EntityNotFound("Campaign not found")

            updated = dict(campaign)
            updated.update({k: v for k, v in updates.items() if k != 'id'})

            # sendDate is set if and only if the campaign is sent
            if bool(updated.get('sent')) != (updated.get('sendDate') is not None):
                raise StorageError("Campaign 'sent' and 'sendDate' must change together")
            if campaign['sent'] and not updated['sent']:
                raise StorageError("A sent campaign cannot return to draft")

            self._campaigns[campaign_id] = updated
            return dict(updated)

    def claim_campaign_send(self, campaign_id):
        with self._lock:
            campaign = self._campaigns.get(campaign_id)
            if not campaign:
                raise EntityNotFound("Campaign not found")
            if campaign['sent'] or campaign_id in self._sending:
                return False
            self._sending.add(campaign_id)
            return True

    def release_campaign_send(self, campaign_id):
        with self._lock:
            self._sending.discard(campaign_id)

    def mark_campaign_sent(self, campaign_id, send_date):
        with self._lock:
            campaign = self._campaigns.get(campaign_id)
            if not campaign:
                raise EntityNotFound("Campaign not found")
            if campaign['sent']:
                raise StorageError("Campaign already sent")
            campaign['sent'] = True
            campaign['sendDate'] = send_date
            self._sending.discard(campaign_id)
            return dict(campaign)


def get_storage():
    """Storage instance attached to the current app by the JobNotify extension"""
    ext = current_app.extensions.get('jobnotify')
    if ext is None:
        raise RuntimeError("JobNotify is not initialised on this app")
    return ext.storage
