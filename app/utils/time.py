"""Time Utilities for UTC management"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

BUSINESS_TZ = ZoneInfo("Asia/Seoul")


def get_utc_now() -> datetime:
    """
    Returns a naive UTC datetime.
    Matches the DB schema (TIMESTAMP WITHOUT TIME ZONE).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_business_today() -> date:
    """Today's date in Korea; receivable ages are counted against this."""
    return datetime.now(BUSINESS_TZ).date()
