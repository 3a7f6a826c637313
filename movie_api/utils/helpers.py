# movie_api/utils/helpers.py

import logging
from datetime import date, datetime, time
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# --- Date conversion ---
# BSON has no date type, so calendar dates are stored as midnight datetimes.

def date_to_datetime(value: Optional[date]) -> Optional[datetime]:
    """
    Converts a calendar date into the midnight datetime stored in MongoDB.
    Returns None if the input is None.
    """
    if value is None:
        return None
    return datetime.combine(value, time.min)


def as_date(value: Any) -> Optional[date]:
    """
    Normalizes a stored Birthday back into a date.

    Accepts datetimes (as written by this API), dates, or ISO strings left
    behind by other writers. Anything unparsable yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            logger.warning(f"Could not parse stored date value '{value}'.")
            return None
    return None


# --- Data Structure Helpers ---

def safe_get(data: Optional[Dict[str, Any]], key: str, default: Any = None) -> Any:
    """
    Safely retrieves a value from a dictionary, returning a default if the
    dictionary is None or the key is missing.
    """
    if data is None:
        return default
    return data.get(key, default)
