from datetime import datetime, timezone

# MongoDB stores datetimes as UTC with millisecond precision and pymongo
# hands them back naive unless the client is tz_aware.

def get_utc_now():
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)

def to_storage(dt):
    """Convert a datetime to naive UTC for queries and inserts"""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)

def from_storage(dt):
    """Return a stored datetime as timezone-aware UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
