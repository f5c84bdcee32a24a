"""
Email Service Module
====================

Configurable email transport supporting SMTP and Resend.
Provider is selected via EMAIL_PROVIDER config ('smtp' or 'resend').

The service exposes a single bulk-send capability: one outbound message whose
recipient list is delivered as BCC, with caller-supplied sender identity and
extra headers (List-Unsubscribe, Precedence, ...).
"""

import re
import smtplib
import logging
from email.message import EmailMessage
from email.utils import formataddr, parseaddr
from typing import List, Optional, Dict

from ...core import db_log, as_bool

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')


def is_valid_email(address):
    """True when the address is deliverable by the bulk transports"""
    return isinstance(address, str) and _VALID_EMAIL.match(address) is not None


logger = logging.getLogger(__name__)

# Try to import resend - it's optional
try:
    import resend
    RESEND_AVAILABLE = True
except ImportError:
    RESEND_AVAILABLE = False
    logger.info("resend package not installed.")


class EmailService:
    """
    Configurable email service supporting SMTP and Resend.

    Configuration (set in Flask app.config):
        EMAIL_PROVIDER: 'smtp' (default) or 'resend'
        SMTP_HOST / SMTP_PORT / SMTP_USER / SMTP_PASS / SMTP_USE_TLS: SMTP transport
        EMAIL_TIMEOUT: SMTP socket timeout in seconds (default: 30)
        RESEND_API_KEY: Your Resend API key (required if provider is 'resend')
        EMAIL_ADDRESS: Sender email address
        EMAIL_SENDER_NAME: Display name used in the From header
        EMAIL_UNSUBSCRIBE_ADDRESS: Mailbox used for List-Unsubscribe
    """

    def __init__(self, app=None):
        self.provider = 'smtp'
        self.api_key = None
        self.sender_email = None
        self.sender_name = None
        self.unsubscribe_address = None
        self.smtp_host = None
        self.smtp_port = 587
        self.smtp_user = None
        self.smtp_password = None
        self.smtp_use_tls = True
        self.timeout = 30

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.provider = (app.config.get('EMAIL_PROVIDER') or 'smtp').lower()
        logger.info(f"=== INITIALIZING EMAIL SERVICE (provider: {self.provider}) ===")

        self.sender_email = app.config.get('EMAIL_ADDRESS')
        self.sender_name = app.config.get('EMAIL_SENDER_NAME', 'Job Board Notifications')
        self.unsubscribe_address = app.config.get('EMAIL_UNSUBSCRIBE_ADDRESS')
        self.timeout = int(app.config.get('EMAIL_TIMEOUT', 30))

        logger.info(f"Sender email: {self.sender_email}")

        if self.provider == 'resend':
            self._init_resend(app)
        else:
            self._init_smtp(app)

    def _init_resend(self, app):
        """Initialize Resend provider"""
        self.api_key = app.config.get('RESEND_API_KEY')

        if not self.api_key:
            logger.warning("RESEND_API_KEY not configured - email sending disabled")
            return

        if not RESEND_AVAILABLE:
            logger.error("resend package not installed")
            return

        resend.api_key = self.api_key
        logger.info("Resend API client initialized successfully")

    def _init_smtp(self, app):
        """Initialize SMTP provider"""
        self.smtp_host = app.config.get('SMTP_HOST')
        self.smtp_port = int(app.config.get('SMTP_PORT', 587))
        self.smtp_user = app.config.get('SMTP_USER')
        self.smtp_password = app.config.get('SMTP_PASS')
        self.smtp_use_tls = as_bool(app.config.get('SMTP_USE_TLS'))

        if not self.smtp_host:
            logger.warning("SMTP_HOST not configured - SMTP email sending disabled")
            return

        logger.info(f"SMTP configured: {self.smtp_host}:{self.smtp_port}")

    @property
    def is_configured(self) -> bool:
        if self.provider == 'resend':
            return bool(self.api_key) and RESEND_AVAILABLE
        return bool(self.smtp_host)

    def default_sender(self) -> Optional[str]:
        """'"Display Name" <address>' built from config"""
        if not self.sender_email:
            return None
        return formataddr((self.sender_name or '', self.sender_email))

    def send_bulk_email(self, recipients: List[str], subject: str, html_body: str,
                        sender: Optional[str] = None, headers: Optional[Dict[str, str]] = None,
                        text_body: Optional[str] = None) -> bool:
        """
        Send ONE message to every recipient (BCC) via the configured provider.

        Args:
            recipients: List of recipient email addresses
            subject: Email subject
            html_body: HTML content of the email
            sender: From header; defaults to EMAIL_SENDER_NAME <EMAIL_ADDRESS>
            headers: Extra headers, e.g. List-Unsubscribe / Precedence
            text_body: Plain text alternative (optional)

        Returns:
            bool: True if the provider accepted the message, False otherwise
        """
        if not recipients:
            logger.error("No recipients provided")
            return False

        sender = sender or self.default_sender()
        if not sender:
            logger.error("Sender email not configured")
            return False

        # Filter out invalid email addresses before sending
        valid_recipients = []
        for addr in recipients:
            if is_valid_email(addr):
                valid_recipients.append(addr)
            else:
                logger.warning(f"Skipping invalid email address: {addr}")

        if not valid_recipients:
            logger.error("No valid recipients after filtering")
            return False

        headers = headers or {}
        logger.info(f"Sending bulk email from: {sender} to {len(valid_recipients)} recipients")
        logger.info(f"Subject: {subject}")

        try:
            if self.provider == 'resend':
                success = self._send_via_resend(valid_recipients, subject, html_body, sender, headers, text_body)
            else:
                success = self._send_via_smtp(valid_recipients, subject, html_body, sender, headers, text_body)
        except Exception as e:
            logger.error(f"Error sending bulk email '{subject}': {e}")
            db_log('error', 'email', 'Bulk email failed', {
                'subject': subject, 'recipients': len(valid_recipients), 'error': str(e)
            })
            return False

        if success:
            db_log('info', 'email', 'Bulk email sent', {
                'subject': subject, 'recipients': len(valid_recipients), 'provider': self.provider
            })
        else:
            db_log('error', 'email', 'Bulk email rejected by provider', {
                'subject': subject, 'recipients': len(valid_recipients), 'provider': self.provider
            })
        return success

    def _send_via_resend(self, recipients: List[str], subject: str, html_body: str,
                         sender: str, headers: Dict[str, str],
                         text_body: Optional[str] = None) -> bool:
        """Send one message via Resend API with every recipient in BCC"""
        if not RESEND_AVAILABLE:
            logger.error("resend package not installed")
            return False

        if not self.api_key:
            logger.error("Resend API key not configured")
            return False

        email_params = {
            "from": sender,
            "to": [parseaddr(sender)[1]],
            "bcc": recipients,
            "subject": subject,
            "html": html_body,
        }
        if headers:
            email_params["headers"] = dict(headers)
        if text_body:
            email_params["text"] = text_body

        r = resend.Emails.send(email_params)
        logger.info(f"Resend response: {r}")

        if r and r.get('id'):
            logger.debug(f"Bulk email accepted by Resend, ID: {r['id']}")
            return True

        logger.error(f"Resend error: {r}")
        return False

    def _send_via_smtp(self, recipients: List[str], subject: str, html_body: str,
                       sender: str, headers: Dict[str, str],
                       text_body: Optional[str] = None) -> bool:
        """Send one message via SMTP; recipients go in the envelope only (BCC)"""
        if not self.smtp_host:
            logger.error("SMTP host not configured")
            return False

        msg = EmailMessage()
        msg['From'] = sender
        msg['To'] = 'undisclosed-recipients:;'
        msg['Subject'] = subject
        for name, value in headers.items():
            msg[name] = value

        msg.set_content(text_body or 'This message requires an HTML capable email client.')
        msg.add_alternative(html_body, subtype='html')

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                refused = server.send_message(msg, from_addr=parseaddr(sender)[1], to_addrs=recipients)

            if refused:
                logger.warning(f"SMTP refused {len(refused)} recipients: {list(refused)}")
            logger.info(f"SMTP bulk email sent to {len(recipients) - len(refused)} recipients")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error: {e}")
            return False


# Shared instance, initialised by JobNotify(app)
email_service = EmailService()
