"""
Small shared helpers: ids, timestamps and avatars
"""
from datetime import datetime, timezone
from urllib.parse import quote
import uuid

AVATAR_URL = 'https://api.dicebear.com/7.x/initials/svg?seed={seed}'


def generate_uuid():
    """Generate a UUID string for primary keys"""
    return str(uuid.uuid4())


def default_avatar(seed):
    return AVATAR_URL.format(seed=quote(seed or '', safe=''))


def utcnow():
    """Naive UTC now, the way timestamps are stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_iso(value):
    """Format a naive UTC datetime like JavaScript's toISOString()"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec='milliseconds') + 'Z'


def now_iso():
    return to_iso(utcnow())


def parse_iso(value):
    """Parse an ISO timestamp (with or without a trailing Z) into naive UTC"""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
