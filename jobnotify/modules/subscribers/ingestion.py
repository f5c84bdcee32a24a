"""
Subscriber Ingestion
====================

Bulk creation of subscribers from a CSV upload. The header row must contain an
"email" column (any capitalisation). Rows with a missing or blank email are
skipped; every other row becomes one create_subscriber call. Import is
best-effort: a row that fails to create is logged and counted, earlier rows
are kept.
"""

import csv
import io
import logging

from ...core import db_log, StorageError

logger = logging.getLogger(__name__)


class SubscriberImportError(Exception):
    """Base class for CSV import failures"""
    status_code = 500


class CsvImportError(SubscriberImportError):
    """Upload could not be decoded or parsed as CSV"""
    status_code = 500


class NoValidEmails(SubscriberImportError):
    """Upload parsed but contained no usable email rows"""
    status_code = 400


def _read_text(source):
    """Accept bytes, str or a file-like object and return decoded text"""
    try:
        raw = source.read() if hasattr(source, 'read') else source
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise CsvImportError('CSV file is not valid UTF-8') from e
    return raw.lstrip('\ufeff')


def _find_email_column(fieldnames):
    for name in fieldnames or []:
        if name and name.strip().lower() == 'email':
            return name
    return None


def parse_subscriber_rows(source):
    """Parse a CSV upload into subscriber payloads.

    Returns:
        (records, skipped) where records are {'email', 'categories', 'active'} dicts
    """
    text = _read_text(source)
    try:
        reader = csv.DictReader(io.StringIO(text))
        email_column = _find_email_column(reader.fieldnames)
        if email_column is None:
            return [], 0

        records = []
        skipped = 0
        for row in reader:
            email = (row.get(email_column) or '').strip()
            if not email:
                logger.warning(f"Empty or missing email in CSV row {reader.line_num}")
                skipped += 1
                continue
            records.append({'email': email, 'categories': [], 'active': True})
    except csv.Error as e:
        logger.error(f"CSV parsing error: {e}")
        raise CsvImportError(str(e)) from e

    return records, skipped


def import_subscribers_csv(storage, source):
    """Create a subscriber for every CSV row with an email.

    Returns:
        dict with imported / skipped / failed counts
    """
    records, skipped = parse_subscriber_rows(source)
    logger.info(f"Parsed {len(records)} valid records from CSV")

    if not records:
        raise NoValidEmails('No valid email addresses found in CSV file')

    imported = 0
    failed = 0
    for record in records:
        try:
            storage.create_subscriber(record)
            imported += 1
        except StorageError as e:
            logger.error(f"Error creating subscriber {record['email']}: {e}")
            failed += 1

    db_log('info', 'subscribers', 'CSV import finished', {
        'imported': imported, 'skipped': skipped, 'failed': failed
    })
    return {'imported': imported, 'skipped': skipped, 'failed': failed}
