"""
Shared datetime helpers for mail headers.

Parses raw "Date:" header values and converts dates to the epoch milliseconds
the Joplin API expects.
"""

from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional, Union

from dateutil.parser import parse as dateutil_parse

from .logging import get_logger

logger = get_logger(__name__)


def parse_datetime(datetime_input: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a mail date into a datetime.

    Handles:
    - RFC 2822 header dates: "Mon, 31 Aug 2025 10:00:00 +0200"
    - ISO 8601 strings: "2025-08-31T10:00:00Z"
    - datetime objects (returned unchanged)

    Args:
        datetime_input: The raw header value

    Returns:
        Parsed datetime, or None if the value is missing or unparseable
    """
    if datetime_input is None or isinstance(datetime_input, datetime):
        return datetime_input

    value = datetime_input.strip()
    if not value:
        return None

    try:
        # RFC 2822 is what mail headers carry, try it first
        return parsedate_to_datetime(value)
    except (ValueError, TypeError):
        pass

    try:
        return dateutil_parse(value)
    except (ValueError, OverflowError) as e:
        logger.warning(
            "Failed to parse mail date",
            extra={"data": {"datetime_input": value, "error": str(e)}}
        )
        return None


def to_epoch_millis(value: Optional[datetime]) -> int:
    """Milliseconds since the epoch, 0 when the date is absent."""
    if value is None:
        return 0
    return int(value.timestamp() * 1000)
