"""
Offer Helpers
"""

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

MAX_NOTIFICATION_EMAILS = 10

# Loose match: something@something.tld, no whitespace
SIMPLE_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def clean_notification_emails(emails: Any) -> list[str]:
    """
    Keep the string entries that look like email addresses, in order, and
    cap the list at MAX_NOTIFICATION_EMAILS. Invalid entries are dropped
    silently.
    """
    if not isinstance(emails, list):
        return []
    valid = [e.strip() for e in emails if isinstance(e, str) and SIMPLE_EMAIL_PATTERN.match(e.strip())]
    return valid[:MAX_NOTIFICATION_EMAILS]


def parse_notification_emails(raw: str | None) -> list[str]:
    """
    Parse the ``notification_emails`` form field (a JSON array of strings).

    Unparseable input yields an empty list.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse notification_emails {raw!r}: {e}")
        return []
    return clean_notification_emails(parsed)
